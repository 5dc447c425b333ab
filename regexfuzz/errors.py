"""Exceptions raised by regexfuzz."""


class PatternError(ValueError):
    """The pattern (source text or tree) cannot be used for generation."""


class SinkError(IOError):
    """The output sink rejected a write."""
