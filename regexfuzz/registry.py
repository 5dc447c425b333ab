"""Registry of named pattern presets."""

import importlib.util
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class Preset:
    """A named pattern with the ``re`` flags it should be parsed with"""
    name: str
    pattern: Union[str, bytes]
    flags: int = 0
    description: str = ""


class PatternRegistry:
    """Registry for named pattern presets.

    Presets let corpus configs and the command line refer to common formats
    by name instead of repeating the regular expression.
    """

    _presets: Dict[str, Preset] = {}

    @classmethod
    def register(cls, name: str, pattern: Union[str, bytes], flags: int = 0,
                 description: str = "") -> Preset:
        """Register a pattern under a name, replacing any previous one."""
        preset = Preset(name, pattern, flags, description)
        cls._presets[name] = preset
        return preset

    @classmethod
    def get(cls, name: str) -> Optional[Preset]:
        """Get a preset by name."""
        return cls._presets.get(name)

    @classmethod
    def require(cls, name: str) -> Preset:
        """Get a preset by name, failing with the list of known names."""
        preset = cls._presets.get(name)
        if preset is None:
            available = cls.list_patterns()
            available_str = f"\nAvailable: {', '.join(sorted(available))}" if available else ""
            raise ValueError(f"Preset '{name}' not found.{available_str}")
        return preset

    @classmethod
    def list_patterns(cls) -> List[str]:
        """List all registered preset names."""
        return list(cls._presets.keys())

    @classmethod
    def load_from_file(cls, filepath: Path) -> int:
        """Load presets from a Python file.

        The file can call ``register_pattern`` (injected into its namespace)
        or ``PatternRegistry.register`` directly.

        Returns: Number of presets added or replaced.
        """
        if not filepath.exists():
            return 0

        spec = importlib.util.spec_from_file_location("custom_patterns", filepath)
        if spec is None or spec.loader is None:
            return 0

        module = importlib.util.module_from_spec(spec)
        module.PatternRegistry = cls
        module.register_pattern = register_pattern

        before = dict(cls._presets)
        spec.loader.exec_module(module)
        return sum(1 for name, preset in cls._presets.items()
                   if before.get(name) is not preset)


def register_pattern(name: str, pattern: Union[str, bytes], flags: int = 0,
                     description: str = "") -> Preset:
    """Register a named pattern.

    Usage:
        register_pattern("order_id", r"ORD-[0-9]{8}")
    """
    return PatternRegistry.register(name, pattern, flags, description)


register_pattern(
    "date",
    r"""
    [0-9]{4}    # year
    -
    [0-9]{2}    # month
    -
    [0-9]{2}    # day
    """,
    flags=re.VERBOSE,
    description="ISO-like calendar date",
)
register_pattern(
    "url",
    r"https://[^\W\d_]{8,12}\.(com|org|gov|net|edu)/[0-9A-Z]{12,16}\?q=[a-z]",
    description="HTTPS URL with a query string",
)
register_pattern(
    "uuid",
    r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    description="Random (version 4) UUID",
)
register_pattern(
    "ipv4",
    r"(25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])(\.(25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])){3}",
    description="Dotted-quad IPv4 address",
)
register_pattern(
    "hex_id",
    r"[0-9a-f]{16,32}",
    description="Lowercase hexadecimal identifier",
)
