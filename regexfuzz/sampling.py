"""Interval sampling and quantifier resolution.

Both helpers only need ``rng.randint(a, b)`` (inclusive on both ends), so any
``random.Random`` instance, or a deterministic stand-in, can drive them.
"""

import bisect
from typing import Sequence, Tuple

from .nodes import Quantifier, QuantifierKind, Range


# Above this many ranges, pick a range first and a value second.
UNBIASED_MAX_RANGES = 2


def sample_ranges(ranges: Sequence[Range], rng) -> int:
    """Draw one value from the union of disjoint inclusive ranges.

    With few ranges every value is equally likely. ``.`` without DOTALL is
    two ranges of very different widths, so picking a range first would
    heavily favour the narrow one.

    With many ranges (broad Unicode classes) a range is picked uniformly and
    then a value inside it. Narrow ranges are over-represented, but no
    cumulative table has to be built per draw.
    """
    if len(ranges) > UNBIASED_MAX_RANGES:
        lo, hi = ranges[rng.randint(0, len(ranges) - 1)]
        return rng.randint(lo, hi)

    offsets = []
    total = 0
    for lo, hi in ranges:
        offsets.append(total)
        total += hi - lo + 1

    index = rng.randint(0, total - 1)
    pos = bisect.bisect_right(offsets, index) - 1
    return ranges[pos][0] + index - offsets[pos]


def repeat_interval(quantifier: Quantifier, greedy: bool, max_repeat: int) -> Tuple[int, int]:
    """Inclusive bounds for the repetition count of a quantifier.

    ``max_repeat`` stands in for an unbounded maximum but never pushes the
    upper bound below the quantifier's minimum.
    """
    kind = quantifier.kind
    if kind == QuantifierKind.ZERO_OR_ONE:
        lo, hi = 0, 1
    elif kind == QuantifierKind.ZERO_OR_MORE:
        lo, hi = 0, max_repeat
    elif kind == QuantifierKind.ONE_OR_MORE:
        lo, hi = 1, max_repeat
    elif quantifier.max is None:
        lo, hi = quantifier.min, max_repeat
    else:
        lo, hi = quantifier.min, quantifier.max

    if not greedy:
        return lo, lo
    return lo, max(lo, hi)


def resolve_count(quantifier: Quantifier, greedy: bool, max_repeat: int, rng) -> int:
    """Pick a concrete repetition count; lazy quantifiers always take the minimum."""
    lo, hi = repeat_interval(quantifier, greedy, max_repeat)
    if lo == hi:
        return lo
    return rng.randint(lo, hi)
