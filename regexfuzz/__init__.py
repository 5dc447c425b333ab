"""
regexfuzz - Random Match Generator

Generates random strings guaranteed to match a regular expression, for test
inputs, fuzzing corpora and fixtures.
"""

from .errors import PatternError, SinkError
from .nodes import (
    Alternation,
    Anchor,
    AnchorKind,
    AnyByte,
    AnyChar,
    Class,
    Concat,
    Empty,
    Group,
    Literal,
    Quantifier,
    QuantifierKind,
    Repetition,
)
from .parser import parse
from .sampling import repeat_interval, resolve_count, sample_ranges
from .generator import DEFAULT_MAX_REPEAT, Generator
from .config import GenerationConfig, OutputFormat, PatternEntry
from .registry import PatternRegistry, Preset, register_pattern
from .schema import SchemaValidator
from .writer import CorpusWriter
from .corpus import CorpusGenerator


__version__ = '1.0.0'

__all__ = [
    # Main entry point
    'Generator',
    'DEFAULT_MAX_REPEAT',
    'parse',

    # Errors
    'PatternError',
    'SinkError',

    # Pattern tree
    'Alternation',
    'Anchor',
    'AnchorKind',
    'AnyByte',
    'AnyChar',
    'Class',
    'Concat',
    'Empty',
    'Group',
    'Literal',
    'Quantifier',
    'QuantifierKind',
    'Repetition',

    # Sampling
    'repeat_interval',
    'resolve_count',
    'sample_ranges',

    # Corpus generation
    'CorpusGenerator',
    'CorpusWriter',
    'GenerationConfig',
    'OutputFormat',
    'PatternEntry',
    'SchemaValidator',

    # Registry
    'PatternRegistry',
    'Preset',
    'register_pattern',
]
