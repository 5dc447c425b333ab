"""Pattern tree node types."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import PatternError


MAX_UNICODE = 0x10FFFF
MAX_BYTE = 0xFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

Range = Tuple[int, int]


class AnchorKind(Enum):
    """Zero-width assertions"""
    START_TEXT = "start_text"
    END_TEXT = "end_text"
    START_LINE = "start_line"
    END_LINE = "end_line"
    WORD_BOUNDARY = "word_boundary"
    NOT_WORD_BOUNDARY = "not_word_boundary"


class QuantifierKind(Enum):
    """Repetition operators"""
    ZERO_OR_ONE = "?"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"
    RANGE = "{}"


@dataclass(frozen=True)
class Quantifier:
    """Repetition specifier; min/max only apply to RANGE (max=None is unbounded)"""
    kind: QuantifierKind
    min: int = 0
    max: Optional[int] = None

    def __post_init__(self):
        if self.kind != QuantifierKind.RANGE:
            return
        if self.min < 0:
            raise PatternError(f"Repetition minimum must be >= 0, got {self.min}")
        if self.max is not None and self.min > self.max:
            raise PatternError(
                f"Repetition minimum {self.min} exceeds maximum {self.max}"
            )


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Anchor:
    kind: AnchorKind


@dataclass(frozen=True)
class Literal:
    """Fixed content: a str is emitted UTF-8 encoded, bytes verbatim."""
    value: Union[str, bytes]

    def __post_init__(self):
        if isinstance(self.value, str) and any(
            SURROGATE_MIN <= ord(c) <= SURROGATE_MAX for c in self.value
        ):
            raise PatternError(f"Literal {self.value!r} contains a lone surrogate")


@dataclass(frozen=True)
class Class:
    """Disjoint inclusive ranges over code points (unicode=True) or bytes."""
    ranges: Tuple[Range, ...]
    unicode: bool = True

    def __post_init__(self):
        if not self.ranges:
            raise PatternError("Character class has no ranges")

        upper = MAX_UNICODE if self.unicode else MAX_BYTE
        prev_hi = -1
        for lo, hi in self.ranges:
            if lo > hi:
                raise PatternError(f"Invalid class range {lo:#x}-{hi:#x}")
            if lo < 0 or hi > upper:
                raise PatternError(f"Class range {lo:#x}-{hi:#x} is out of domain")
            if lo <= prev_hi:
                raise PatternError("Class ranges must be ordered and disjoint")
            prev_hi = hi

        if self.unicode and all(
            SURROGATE_MIN <= lo and hi <= SURROGATE_MAX for lo, hi in self.ranges
        ):
            raise PatternError("Character class contains only surrogate code points")


@dataclass(frozen=True)
class AnyChar:
    """Any Unicode scalar value, optionally excluding newline"""
    newline: bool = True


@dataclass(frozen=True)
class AnyByte:
    """Any byte value, optionally excluding newline"""
    newline: bool = True


@dataclass(frozen=True)
class Group:
    child: "Node"


@dataclass(frozen=True)
class Concat:
    children: Tuple["Node", ...]


@dataclass(frozen=True)
class Alternation:
    children: Tuple["Node", ...]

    def __post_init__(self):
        if not self.children:
            raise PatternError("Alternation needs at least one branch")


@dataclass(frozen=True)
class Repetition:
    child: "Node"
    quantifier: Quantifier
    greedy: bool = True


Node = Union[
    Empty, Anchor, Literal, Class, AnyChar, AnyByte,
    Group, Concat, Alternation, Repetition,
]
