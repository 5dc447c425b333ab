"""CLI entry point for regexfuzz."""

import sys
import argparse
import re
from pathlib import Path

from .config import GenerationConfig, OutputFormat, PatternEntry
from .corpus import CorpusGenerator
from .errors import PatternError, SinkError
from .generator import DEFAULT_MAX_REPEAT
from .registry import PatternRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='regexfuzz',
        description='Generate random strings that match a regular expression',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print 10 random matches
  python -m regexfuzz '[a-z]{3,8}@example\\.(com|org)' -n 10

  # Use a built-in preset
  python -m regexfuzz --preset uuid -n 5

  # Reproducible corpus from a configuration file, one file per sample
  python -m regexfuzz -c corpus.json -f directory -o corpus/ --seed 42
        """
    )

    parser.add_argument('pattern', nargs='?', default=None,
                        help='Regular expression to generate matches for')
    parser.add_argument('-c', '--config', type=Path, default=None,
                        help='Path to corpus configuration JSON file')
    parser.add_argument('--preset', default=None,
                        help='Name of a registered pattern preset')
    parser.add_argument('--list-presets', action='store_true',
                        help='List registered presets and exit')
    parser.add_argument('-n', '--num-generations', type=int, default=10,
                        help='Number of samples per pattern (default: 10)')
    parser.add_argument('--max-repeat', type=int, default=DEFAULT_MAX_REPEAT,
                        help=f'Upper bound for *, + and {{n,}} (default: {DEFAULT_MAX_REPEAT})')
    parser.add_argument('-f', '--format', choices=['stdout', 'file', 'directory'],
                        default='stdout', help='Output format (default: stdout)')
    parser.add_argument('-o', '--output', type=Path, default=Path('corpus.txt'),
                        help='Output path (file or directory, default: corpus.txt)')
    parser.add_argument('--separator', default='\\n',
                        help='Separator written after each sample (default: \\n)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')
    parser.add_argument('-p', '--presets', type=Path, default=None,
                        help='Path to Python file registering extra presets')
    parser.add_argument('-i', '--ignorecase', action='store_true',
                        help='Parse the pattern with re.IGNORECASE')
    parser.add_argument('-m', '--multiline', action='store_true',
                        help='Parse the pattern with re.MULTILINE')
    parser.add_argument('-s', '--dotall', action='store_true',
                        help='Parse the pattern with re.DOTALL')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress progress output')
    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.presets is not None and not args.presets.exists():
        print(f"ERROR: Presets file not found: {args.presets}")
        return 1

    if args.presets is not None:
        PatternRegistry.load_from_file(args.presets)

    if args.list_presets:
        for name in sorted(PatternRegistry.list_patterns()):
            preset = PatternRegistry.get(name)
            print(f"{name:12s} {preset.description}")
        return 0

    sources = [s for s in (args.pattern, args.config, args.preset) if s is not None]
    if len(sources) != 1:
        print("ERROR: Give exactly one of PATTERN, --config or --preset")
        return 1

    if args.config is not None and not args.config.exists():
        print(f"ERROR: Configuration file not found: {args.config}")
        return 1

    if args.num_generations < 0 or args.max_repeat < 0:
        print("ERROR: --num-generations and --max-repeat must be >= 0")
        return 1

    try:
        separator = parse_separator(args.separator)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    output_format = OutputFormat(args.format)
    verbose = (not args.quiet and output_format != OutputFormat.STDOUT
               and sys.stdout.isatty())

    gen_config = GenerationConfig(
        num_generations=args.num_generations,
        max_repeat=args.max_repeat,
        output_format=output_format,
        output_path=args.output,
        seed=args.seed,
        separator=separator,
        verbose=verbose,
    )

    try:
        entries = []
        if args.config is None:
            entries.append(_single_entry(args, gen_config))
        generator = CorpusGenerator(gen_config, config_path=args.config, entries=entries)
        count = generator.run()
    except (PatternError, SinkError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    return 0 if count > 0 or args.num_generations == 0 else 1


def parse_separator(text: str) -> bytes:
    """Turn a separator given with backslash escapes (e.g. '\\t', '\\x00') into bytes."""
    try:
        return text.encode('utf-8').decode('unicode_escape').encode('latin-1')
    except UnicodeError as e:
        raise ValueError(f"Invalid separator {text!r}: {e}") from e


def _single_entry(args, gen_config: GenerationConfig) -> PatternEntry:
    """Build the entry for a pattern or preset given on the command line."""
    flags = 0
    if args.ignorecase:
        flags |= re.IGNORECASE
    if args.multiline:
        flags |= re.MULTILINE
    if args.dotall:
        flags |= re.DOTALL

    if args.preset is not None:
        preset = PatternRegistry.require(args.preset)
        name, pattern, flags = preset.name, preset.pattern, flags | preset.flags
    else:
        name, pattern = 'pattern', args.pattern

    return PatternEntry(
        name=name,
        pattern=pattern,
        count=gen_config.num_generations,
        max_repeat=gen_config.max_repeat,
        flags=flags,
    )


if __name__ == '__main__':
    sys.exit(main())
