"""Main corpus generation orchestrator."""

import random
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from .config import GenerationConfig, PatternEntry, parse_flags
from .generator import Generator
from .registry import PatternRegistry
from .schema import DEFAULT_SCHEMA_PATH, SchemaValidator
from .writer import CorpusWriter


class CorpusGenerator:
    """Generates a corpus of samples for one or more patterns.

    Patterns come either from a JSON corpus configuration (validated against
    the packaged schema) or from ``entries`` built by the caller.
    """

    def __init__(self, gen_config: GenerationConfig, config_path: Optional[Path] = None,
                 entries: Optional[List[PatternEntry]] = None,
                 schema_path: Path = DEFAULT_SCHEMA_PATH,
                 stream: Optional[BinaryIO] = None):
        if config_path is None and not entries:
            raise ValueError("Either a configuration file or pattern entries are required")

        self.gen_config = gen_config
        self.config_path = config_path
        self.entries = list(entries or [])
        self.rng = random.Random(gen_config.seed)
        self.verbose = gen_config.verbose

        # Pipeline components (initialized in run())
        self.validator = SchemaValidator(schema_path)
        self.config: Dict[str, Any] = {}
        self.generators: List[Tuple[PatternEntry, Generator]] = []
        self.writer = CorpusWriter(gen_config.output_path, gen_config.output_format,
                                   gen_config.separator, stream)

    def run(self) -> int:
        """Run the complete generation pipeline."""
        self._log("[1/4] Loading presets...")
        loaded_count = 0
        if self.gen_config.presets_file:
            loaded_count = PatternRegistry.load_from_file(self.gen_config.presets_file)
        self._log(f"      Built-in: {len(PatternRegistry.list_patterns()) - loaded_count}")
        self._log(f"      Custom: {loaded_count}")

        self._log("[2/4] Loading configuration...")
        if self.config_path is not None:
            self.config = self.validator.validate(self.config_path)
            self.entries.extend(self._entries_from_config(self.config))
        self._log(f"      Patterns: {len(self.entries)}")

        self._log("[3/4] Parsing patterns...")
        self.generators = [
            (entry, Generator.parse(entry.pattern, self.rng, entry.max_repeat, entry.flags))
            for entry in self.entries
        ]

        self._log("[4/4] Generating samples...")
        self.writer.initialize()
        try:
            self._generate_all()
        finally:
            total = self.writer.finalize()

        self._log(f"\nGeneration complete!")
        self._log(f"  Total: {total} samples")
        if self.gen_config.output_format.value != 'stdout':
            self._log(f"  Output: {self.gen_config.output_path}")
        self._log(f"  Format: {self.gen_config.output_format.value}")

        return total

    def _generate_all(self) -> None:
        """Generate every sample for every pattern."""
        for entry, generator in self.generators:
            self._log(f"      {entry.name}: {entry.count} samples")
            for gen_idx in range(entry.count):
                self.writer.write(entry.name, generator.generate_bytes())

                if self.verbose and (gen_idx + 1) % 10 == 0:
                    print(f"      Progress: {gen_idx + 1}/{entry.count}", end='\r')

    def _entries_from_config(self, config: Dict[str, Any]) -> List[PatternEntry]:
        """Build pattern entries from a validated configuration."""
        defaults = config.get('defaults', {})
        default_count = defaults.get('count', self.gen_config.num_generations)
        default_max_repeat = defaults.get('max_repeat', self.gen_config.max_repeat)

        entries = []
        for item in config['patterns']:
            flags = parse_flags(item.get('flags', []))
            if 'preset' in item:
                preset = PatternRegistry.require(item['preset'])
                pattern = preset.pattern
                flags |= preset.flags
            else:
                pattern = item['pattern']

            if item.get('bytes', False) and isinstance(pattern, str):
                try:
                    pattern = pattern.encode('latin-1')
                except UnicodeEncodeError as e:
                    raise ValueError(
                        f"Pattern '{item['name']}' cannot be used as a bytes pattern: "
                        f"it contains characters outside latin-1"
                    ) from e

            entries.append(PatternEntry(
                name=item['name'],
                pattern=pattern,
                count=item.get('count', default_count),
                max_repeat=item.get('max_repeat', default_max_repeat),
                flags=flags,
            ))
        return entries

    def _log(self, message: str) -> None:
        """Log message if verbose mode is enabled."""
        if self.verbose:
            print(message)
