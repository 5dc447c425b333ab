"""Configuration and data classes for regexfuzz."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from .generator import DEFAULT_MAX_REPEAT


FLAG_NAMES = {
    'IGNORECASE': re.IGNORECASE,
    'MULTILINE': re.MULTILINE,
    'DOTALL': re.DOTALL,
    'VERBOSE': re.VERBOSE,
    'ASCII': re.ASCII,
}


class OutputFormat(Enum):
    """Output format options"""
    STDOUT = "stdout"
    SINGLE_FILE = "file"
    DIRECTORY = "directory"


@dataclass
class GenerationConfig:
    """Configuration for the generation process"""
    num_generations: int = 10
    max_repeat: int = DEFAULT_MAX_REPEAT
    output_format: OutputFormat = OutputFormat.STDOUT
    output_path: Path = Path("corpus")
    seed: Optional[int] = None
    separator: bytes = b"\n"
    verbose: bool = False
    presets_file: Optional[Path] = None


@dataclass
class PatternEntry:
    """One pattern to generate samples for"""
    name: str
    pattern: Union[str, bytes]
    count: int
    max_repeat: int
    flags: int = 0


def parse_flags(names: Iterable[str]) -> int:
    """Combine ``re`` flag names (e.g. ``["IGNORECASE", "DOTALL"]``)."""
    flags = 0
    for name in names:
        try:
            flags |= FLAG_NAMES[name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown flag '{name}'. Known flags: {', '.join(sorted(FLAG_NAMES))}"
            )
    return flags
