"""Conversion of ``re`` parse trees into generator pattern trees.

Parsing itself is done by the standard library (``re._parser``, the same
parser ``re.compile`` uses). This module only maps its opcode tuples onto the
node types in :mod:`regexfuzz.nodes`.
"""

import _sre
import re
from functools import lru_cache
from re import _parser
from re._casefix import _EXTRA_CASES
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple, Union
from re._constants import (
    ANY,
    ASSERT,
    ASSERT_NOT,
    AT,
    AT_BEGINNING,
    AT_BEGINNING_LINE,
    AT_BEGINNING_STRING,
    AT_BOUNDARY,
    AT_END,
    AT_END_LINE,
    AT_END_STRING,
    AT_NON_BOUNDARY,
    ATOMIC_GROUP,
    BRANCH,
    CATEGORY,
    CATEGORY_DIGIT,
    CATEGORY_NOT_DIGIT,
    CATEGORY_NOT_SPACE,
    CATEGORY_NOT_WORD,
    CATEGORY_SPACE,
    CATEGORY_WORD,
    GROUPREF,
    GROUPREF_EXISTS,
    IN,
    LITERAL,
    MAX_REPEAT,
    MAXREPEAT,
    MIN_REPEAT,
    NEGATE,
    NOT_LITERAL,
    POSSESSIVE_REPEAT,
    RANGE,
    SUBPATTERN,
)

from .errors import PatternError
from .nodes import (
    MAX_BYTE,
    MAX_UNICODE,
    Alternation,
    Anchor,
    AnchorKind,
    Class,
    Concat,
    Empty,
    Group,
    Literal,
    Node,
    Quantifier,
    QuantifierKind,
    Range,
    Repetition,
)


ASCII_DIGIT = ((0x30, 0x39),)
ASCII_WORD = ((0x30, 0x39), (0x41, 0x5A), (0x5F, 0x5F), (0x61, 0x7A))
ASCII_SPACE = ((0x09, 0x0D), (0x20, 0x20))

_ANCHORS = {
    AT_BEGINNING_STRING: AnchorKind.START_TEXT,
    AT_BEGINNING_LINE: AnchorKind.START_LINE,
    AT_END_STRING: AnchorKind.END_TEXT,
    AT_END_LINE: AnchorKind.END_LINE,
    AT_BOUNDARY: AnchorKind.WORD_BOUNDARY,
    AT_NON_BOUNDARY: AnchorKind.NOT_WORD_BOUNDARY,
}

_UNSUPPORTED = {
    GROUPREF: "backreferences",
    GROUPREF_EXISTS: "conditional groups",
    ASSERT: "lookaround assertions",
    ASSERT_NOT: "lookaround assertions",
}


def parse(pattern: Union[str, bytes, re.Pattern], flags: int = 0) -> Node:
    """Parse regular expression source into a pattern tree.

    ``str`` patterns produce text nodes, ``bytes`` patterns produce byte
    nodes. A compiled ``re.Pattern`` contributes its own flags.

    Raises:
        PatternError: the source is not a valid regular expression or uses a
            construct that cannot be generated (backreferences, lookaround,
            conditional groups).
    """
    if isinstance(pattern, re.Pattern):
        flags |= pattern.flags
        pattern = pattern.pattern

    try:
        parsed = _parser.parse(pattern, flags)
    except (re.error, ValueError) as e:
        raise PatternError(f"Could not parse pattern {pattern!r}: {e}") from e

    converter = _Converter(unicode=isinstance(pattern, str))
    return converter.convert(parsed, parsed.state.flags)


def normalize_ranges(ranges: Iterable[Range]) -> List[Range]:
    """Sort ranges and merge any that overlap or touch."""
    merged: List[Range] = []
    for lo, hi in sorted(ranges):
        if merged and lo <= merged[-1][1] + 1:
            if hi > merged[-1][1]:
                merged[-1] = (merged[-1][0], hi)
        else:
            merged.append((lo, hi))
    return merged


def complement_ranges(ranges: Iterable[Range], upper: int) -> List[Range]:
    """Ranges covering every value in ``0..upper`` not covered by ``ranges``."""
    result = []
    start = 0
    for lo, hi in normalize_ranges(ranges):
        if lo > start:
            result.append((start, lo - 1))
        start = hi + 1
    if start <= upper:
        result.append((start, upper))
    return result


@lru_cache(maxsize=None)
def unicode_category_ranges(predicate_name: str) -> Tuple[Range, ...]:
    """Code point ranges for which ``str.<predicate_name>()`` holds.

    Scans the whole code space once per predicate; results are cached.
    """
    if predicate_name == 'isword':
        def predicate(c):
            return c.isalnum() or c == '_'
    else:
        predicate = getattr(str, predicate_name)

    ranges = []
    start = None
    for cp in range(MAX_UNICODE + 2):
        hit = cp <= MAX_UNICODE and predicate(chr(cp))
        if hit and start is None:
            start = cp
        elif not hit and start is not None:
            ranges.append((start, cp - 1))
            start = None
    return tuple(ranges)


@lru_cache(maxsize=None)
def _lowercase_inverse() -> Dict[int, FrozenSet[int]]:
    """Map each code point to the other code points that lowercase to it."""
    inverse: Dict[int, Set[int]] = {}
    for cp in range(MAX_UNICODE + 1):
        lower = _sre.unicode_tolower(cp)
        if lower != cp:
            inverse.setdefault(lower, set()).add(cp)
    return {lower: frozenset(cps) for lower, cps in inverse.items()}


def case_variants(cp: int, unicode: bool = True) -> FrozenSet[int]:
    """Code points that ``re`` treats as equal to ``cp`` under IGNORECASE.

    Uses the same simple lowercase mapping and extra equivalences
    (e.g. KELVIN SIGN and 'k') as the ``re`` compiler.
    """
    if not unicode:
        if 0x41 <= cp <= 0x5A or 0x61 <= cp <= 0x7A:
            return frozenset((cp, cp ^ 0x20))
        return frozenset((cp,))

    lower = _sre.unicode_tolower(cp)
    targets = {cp, lower, *_EXTRA_CASES.get(lower, ())}
    inverse = _lowercase_inverse()
    variants = set(targets)
    for target in targets:
        variants.update(inverse.get(target, ()))
    return frozenset(variants)


class _Converter:
    """Walks ``re._parser`` output for one pattern."""

    def __init__(self, unicode: bool):
        self.unicode = unicode
        self.upper = MAX_UNICODE if unicode else MAX_BYTE

    def convert(self, subpattern, flags: int) -> Node:
        nodes: List[Node] = []
        pending: List[int] = []

        for op, av in subpattern:
            if op is LITERAL:
                pending.append(av)
                continue
            if pending:
                nodes.append(self._literal(pending))
                pending = []
            nodes.append(self._convert_op(op, av, flags))

        if pending:
            nodes.append(self._literal(pending))

        if not nodes:
            return Empty()
        if len(nodes) == 1:
            return nodes[0]
        return Concat(tuple(nodes))

    def _convert_op(self, op, av, flags: int):
        if op is IN:
            return self._class(self._set_ranges(av, flags))
        if op is NOT_LITERAL:
            return self._class(self._negated([(av, av)], flags))
        if op is ANY:
            if flags & re.DOTALL:
                return self._class([(0, self.upper)])
            return self._class(complement_ranges([(0x0A, 0x0A)], self.upper))
        if op is BRANCH:
            _, branches = av
            return Alternation(tuple(self.convert(b, flags) for b in branches))
        if op is SUBPATTERN:
            _, add_flags, del_flags, p = av
            return Group(self.convert(p, (flags | add_flags) & ~del_flags))
        if op is ATOMIC_GROUP:
            return Group(self.convert(av, flags))
        if op in (MAX_REPEAT, MIN_REPEAT, POSSESSIVE_REPEAT):
            lo, hi, item = av
            return Repetition(
                self.convert(item, flags),
                _quantifier(lo, hi),
                greedy=op is not MIN_REPEAT,
            )
        if op is AT:
            return self._anchor(av, flags)

        reason = _UNSUPPORTED.get(op, getattr(op, 'name', str(op)))
        raise PatternError(f"Unsupported construct in pattern: {reason}")

    def _literal(self, codes: List[int]) -> Literal:
        if self.unicode:
            return Literal(''.join(chr(c) for c in codes))
        return Literal(bytes(codes))

    def _class(self, ranges: List[Range]) -> Class:
        ranges = normalize_ranges(ranges)
        if not ranges:
            raise PatternError("Character class matches nothing")
        return Class(tuple(ranges), unicode=self.unicode)

    def _anchor(self, code, flags: int) -> Anchor:
        multiline = flags & re.MULTILINE
        if code is AT_BEGINNING:
            return Anchor(AnchorKind.START_LINE if multiline else AnchorKind.START_TEXT)
        if code is AT_END:
            return Anchor(AnchorKind.END_LINE if multiline else AnchorKind.END_TEXT)
        return Anchor(_ANCHORS[code])

    def _set_ranges(self, items, flags: int) -> List[Range]:
        negate = False
        explicit: List[Range] = []
        categories: List[Range] = []
        for op, av in items:
            if op is NEGATE:
                negate = True
            elif op is LITERAL:
                explicit.append((av, av))
            elif op is RANGE:
                explicit.append(av)
            elif op is CATEGORY:
                categories.extend(self._category(av, flags))
            else:
                raise PatternError(f"Unsupported item in character set: {op}")

        if negate:
            return complement_ranges(
                self._case_closure(explicit, flags) + categories, self.upper)
        return normalize_ranges(explicit + categories)

    def _negated(self, excluded: List[Range], flags: int) -> List[Range]:
        return complement_ranges(self._case_closure(excluded, flags), self.upper)

    def _case_closure(self, ranges: List[Range], flags: int) -> List[Range]:
        """Add the case variants of every value when matching ignores case.

        Only needed for exclusions: under IGNORECASE, '[^a]' rejects 'A' too.
        """
        if not flags & re.IGNORECASE:
            return list(ranges)
        closed = list(ranges)
        for lo, hi in ranges:
            for cp in range(lo, hi + 1):
                closed.extend((v, v) for v in case_variants(cp, self.unicode))
        return normalize_ranges(closed)

    def _category(self, code, flags: int) -> List[Range]:
        ascii_only = not self.unicode or flags & re.ASCII
        if code in (CATEGORY_DIGIT, CATEGORY_NOT_DIGIT):
            base = ASCII_DIGIT if ascii_only else unicode_category_ranges('isdecimal')
        elif code in (CATEGORY_WORD, CATEGORY_NOT_WORD):
            base = ASCII_WORD if ascii_only else unicode_category_ranges('isword')
        elif code in (CATEGORY_SPACE, CATEGORY_NOT_SPACE):
            base = ASCII_SPACE if ascii_only else unicode_category_ranges('isspace')
        else:
            raise PatternError(f"Unsupported character category: {code}")

        if code in (CATEGORY_NOT_DIGIT, CATEGORY_NOT_WORD, CATEGORY_NOT_SPACE):
            return complement_ranges(base, self.upper)
        return list(base)


def _quantifier(lo: int, hi) -> Quantifier:
    if hi == MAXREPEAT:
        if lo == 0:
            return Quantifier(QuantifierKind.ZERO_OR_MORE)
        if lo == 1:
            return Quantifier(QuantifierKind.ONE_OR_MORE)
        return Quantifier(QuantifierKind.RANGE, lo, None)
    if (lo, hi) == (0, 1):
        return Quantifier(QuantifierKind.ZERO_OR_ONE)
    return Quantifier(QuantifierKind.RANGE, lo, hi)
