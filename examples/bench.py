#!/usr/bin/env python3
"""
Rough generation timings for regexfuzz.

Each case generates a batch of samples and decodes them as UTF-8, reporting
the time per batch.

Usage:
  python examples/bench.py
  python examples/bench.py --batch 100 --rounds 3
"""

import argparse
import random
import time

from regexfuzz import Generator, PatternRegistry


BATCH_SIZE = 1000

CASES = [
    ("empty", ""),
    ("any", ".{10}"),
    ("literal", "aBcDe"),
    ("alternate", "(a|b)|(c|d)|(e|f)"),
    ("class", r"[^\W\d_]{10}"),
    ("not_class", r"[\W\d_]{10}"),
]


def preset_cases():
    """The built-in date and url presets as (name, pattern, flags)."""
    return [(name, PatternRegistry.require(name).pattern, PatternRegistry.require(name).flags)
            for name in ("date", "url")]


def time_batch(generator: Generator, batch: int) -> float:
    """Seconds taken to generate and decode ``batch`` samples."""
    start = time.perf_counter()
    for _ in range(batch):
        generator.generate_bytes().decode('utf-8')
    return time.perf_counter() - start


def run(batch: int = BATCH_SIZE, rounds: int = 5, seed: int = 0):
    """Time every case; returns ``(name, best seconds per batch)`` pairs."""
    rng = random.Random(seed)
    cases = [(name, pattern, 0) for name, pattern in CASES] + preset_cases()

    results = []
    for name, pattern, flags in cases:
        generator = Generator.parse(pattern, rng, flags=flags)
        best = min(time_batch(generator, batch) for _ in range(rounds))
        results.append((name, best))
    return results


def main():
    parser = argparse.ArgumentParser(description='Time regexfuzz generation')
    parser.add_argument('--batch', type=int, default=BATCH_SIZE,
                        help=f'Samples per timed batch (default: {BATCH_SIZE})')
    parser.add_argument('--rounds', type=int, default=5,
                        help='Batches per case; the fastest is reported (default: 5)')
    args = parser.parse_args()

    for name, seconds in run(args.batch, args.rounds):
        print(f"{name:12s} {seconds * 1000:10.3f} ms / {args.batch} samples")


if __name__ == '__main__':
    main()
