import io
import random
import re

import pytest

from regexfuzz import (
    Alternation,
    Anchor,
    AnchorKind,
    AnyByte,
    AnyChar,
    Class,
    Concat,
    DEFAULT_MAX_REPEAT,
    Empty,
    Generator,
    Group,
    Literal,
    PatternError,
    Quantifier,
    QuantifierKind,
    Repetition,
    SinkError,
)


TEST_N = 10_000


def samples(pattern, n=TEST_N, seed=0, **kwargs):
    gen = Generator.parse(pattern, random.Random(seed), **kwargs)
    return [gen.generate_bytes() for _ in range(n)]


def test_default_max_repeat():
    gen = Generator(Empty())
    assert gen.max_repeat == DEFAULT_MAX_REPEAT == 100


def test_empty_pattern():
    assert set(samples("", n=100)) == {b""}


def test_literal_pattern():
    assert set(samples("aBcDe", n=100)) == {b"aBcDe"}


def test_unicode_literal_is_utf8_encoded():
    gen = Generator(Literal("héllo✓"))
    assert gen.generate_bytes() == "héllo✓".encode('utf-8')
    assert gen.generate_text() == "héllo✓"


def test_byte_literal_is_verbatim():
    gen = Generator(Literal(b"\x00\xff\n"))
    assert gen.generate_bytes() == b"\x00\xff\n"


def test_bounded_range():
    rx = re.compile(r"^a{3,8}$")
    outputs = samples("a{3,8}")
    assert all(rx.match(o.decode()) for o in outputs)
    assert {len(o) for o in outputs} == set(range(3, 9))


def test_nested_alternation():
    assert set(samples("(a|b)|(c|d)", n=2_000)) == {b"a", b"b", b"c", b"d"}


def test_end_line_anchor_emits_newline_in_place():
    tree = Concat((Literal("a"), Anchor(AnchorKind.END_LINE), Literal("b")))
    assert Generator(tree).generate_bytes() == b"a\nb"


@pytest.mark.parametrize("kind", [
    AnchorKind.START_TEXT,
    AnchorKind.END_TEXT,
    AnchorKind.START_LINE,
    AnchorKind.WORD_BOUNDARY,
    AnchorKind.NOT_WORD_BOUNDARY,
])
def test_zero_width_anchors_emit_nothing(kind):
    tree = Concat((Literal("x"), Anchor(kind), Literal("y")))
    assert Generator(tree).generate_bytes() == b"xy"


@pytest.mark.parametrize("bound", [0, 1, 5, 100])
def test_repetition_bound_respected(bound):
    lengths = {len(o) for o in samples("a*", n=2_000, max_repeat=bound)}
    assert min(lengths) >= 0
    assert max(lengths) <= bound
    if bound <= 5:
        assert lengths == set(range(bound + 1))


def test_zero_bound_yields_empty_output():
    assert set(samples("a*", n=200, max_repeat=0)) == {b""}
    assert set(samples("a+", n=200, max_repeat=0)) == {b"a"}


def test_bound_does_not_override_minimum():
    assert set(samples("a{7,}", n=200, max_repeat=3)) == {b"a" * 7}


@pytest.mark.parametrize("pattern, expected", [
    ("a*?", b""),
    ("a+?", b"a"),
    ("a??", b""),
    ("a{3,8}?", b"aaa"),
    ("a{3}?", b"aaa"),
    ("a{3,}?", b"aaa"),
])
def test_lazy_quantifiers_take_minimum(pattern, expected):
    assert set(samples(pattern, n=500)) == {expected}


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
def test_alternation_coverage(n):
    branches = tuple(Literal(f"<{i}>") for i in range(n))
    gen = Generator(Alternation(branches), random.Random(n))
    seen = {gen.generate_bytes() for _ in range(TEST_N)}
    assert seen == {f"<{i}>".encode() for i in range(n)}


def test_alternation_visits_only_one_branch():
    tree = Alternation((Literal("left"), Literal("right")))
    gen = Generator(tree, random.Random(0))
    assert all(gen.generate_bytes() in (b"left", b"right") for _ in range(100))


def test_group_is_transparent():
    gen = Generator(Group(Group(Literal("in"))))
    assert gen.generate_bytes() == b"in"


def test_repetition_repeats_child_independently():
    tree = Repetition(Class(((0x30, 0x39),)), Quantifier(QuantifierKind.RANGE, 20, 20))
    gen = Generator(tree, random.Random(4))
    out = gen.generate_bytes()
    assert len(out) == 20
    assert len(set(out)) > 1


def test_text_class_skips_surrogates():
    # Only the two ends of this range are scalar values.
    tree = Repetition(Class(((0xD7FF, 0xE000),)), Quantifier(QuantifierKind.RANGE, 5, 5))
    gen = Generator(tree, random.Random(2))
    for _ in range(20):
        text = gen.generate_text()
        assert len(text) == 5
        assert set(text) <= {chr(0xD7FF), chr(0xE000)}


def test_byte_class():
    tree = Class(((0x80, 0x81), (0xF0, 0xF0)), unicode=False)
    gen = Generator(tree, random.Random(3))
    assert {gen.generate_bytes() for _ in range(300)} == {b"\x80", b"\x81", b"\xf0"}


def test_any_char_without_newline():
    gen = Generator(Repetition(AnyChar(newline=False), Quantifier(QuantifierKind.RANGE, 100, 100)),
                    random.Random(5))
    for _ in range(200):
        text = gen.generate_text()
        assert len(text) == 100
        assert "\n" not in text


def test_any_byte_without_newline():
    class NewlineFirst(random.Random):
        def __init__(self):
            super().__init__(0)
            self.first = True

        def randint(self, a, b):
            if self.first:
                self.first = False
                return 0x0A
            return super().randint(a, b)

    assert Generator(AnyByte(newline=False), NewlineFirst()).generate_bytes() != b"\n"
    assert Generator(AnyByte(newline=True), NewlineFirst()).generate_bytes() == b"\n"


def test_same_seed_same_output():
    first = samples(r"[a-z]{1,10}(-\d+)?", n=50, seed=42)
    second = samples(r"[a-z]{1,10}(-\d+)?", n=50, seed=42)
    assert first == second


def test_rng_state_shared_across_calls():
    gen = Generator.parse(r"[a-z]{10}", random.Random(1))
    assert gen.generate_bytes() != gen.generate_bytes()


def test_generate_appends_to_sink():
    sink = io.BytesIO()
    gen = Generator(Literal("ab"))
    gen.generate(sink)
    gen.generate(sink)
    assert sink.getvalue() == b"abab"


class FailingSink:
    def __init__(self, accept):
        self.accept = accept
        self.data = b""

    def write(self, data):
        if self.accept == 0:
            raise OSError("disk full")
        self.accept -= 1
        self.data += data
        return len(data)


def test_sink_error_aborts_and_keeps_prefix():
    tree = Concat((Literal("a"), Class(((0x62, 0x62),)), Literal("c")))
    sink = FailingSink(accept=1)
    with pytest.raises(SinkError, match="disk full"):
        Generator(tree).generate(sink)
    assert sink.data == b"a"


def test_closed_sink_raises_sink_error():
    sink = io.BytesIO()
    sink.close()
    with pytest.raises(SinkError):
        Generator(Literal("a")).generate(sink)


def test_invalid_pattern_fails_construction():
    with pytest.raises(PatternError):
        Generator.parse("(unclosed")


def test_unknown_node_rejected():
    with pytest.raises(PatternError):
        Generator(Concat((Literal("a"), "not a node")))


def test_negative_bound_rejected():
    with pytest.raises(ValueError):
        Generator(Empty(), max_repeat=-1)
