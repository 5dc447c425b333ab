"""Random match generation from a pattern tree."""

import io
import random
from typing import Optional

from .errors import PatternError, SinkError
from .nodes import (
    MAX_BYTE,
    MAX_UNICODE,
    SURROGATE_MAX,
    SURROGATE_MIN,
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
    Node,
    Repetition,
)
from .parser import parse
from .sampling import resolve_count, sample_ranges


DEFAULT_MAX_REPEAT = 100
NEWLINE = 0x0A


def _is_scalar(value: int) -> bool:
    return not SURROGATE_MIN <= value <= SURROGATE_MAX


class Generator:
    """Generates random byte strings that match a pattern tree.

    The tree and the repetition bound are fixed at construction. The random
    source is shared by every call to :meth:`generate`, so a seeded
    ``random.Random`` yields a reproducible sequence of outputs.
    """

    def __init__(self, tree: Node, rng: Optional[random.Random] = None,
                 max_repeat: int = DEFAULT_MAX_REPEAT):
        if max_repeat < 0:
            raise ValueError(f"max_repeat must be >= 0, got {max_repeat}")
        _check_tree(tree)

        self._tree = tree
        self._max_repeat = max_repeat
        self.rng = rng if rng is not None else random.Random()

        self._handlers = {
            Empty: lambda node, sink: None,
            Anchor: self._emit_anchor,
            Literal: self._emit_literal,
            Class: self._emit_class,
            AnyChar: self._emit_any_char,
            AnyByte: self._emit_any_byte,
            Group: lambda node, sink: self._emit(node.child, sink),
            Concat: self._emit_concat,
            Alternation: self._emit_alternation,
            Repetition: self._emit_repetition,
        }

    @classmethod
    def parse(cls, pattern, rng: Optional[random.Random] = None,
              max_repeat: int = DEFAULT_MAX_REPEAT, flags: int = 0) -> 'Generator':
        """Build a generator from regular expression source (str or bytes)."""
        return cls(parse(pattern, flags), rng, max_repeat)

    @property
    def tree(self) -> Node:
        return self._tree

    @property
    def max_repeat(self) -> int:
        return self._max_repeat

    def generate(self, sink) -> None:
        """Write one random match to ``sink`` (any object with ``write(bytes)``).

        Raises:
            SinkError: the sink rejected a write. Whatever was written before
                the failure stays in the sink and should be discarded.
        """
        self._emit(self._tree, sink)

    def generate_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.generate(buffer)
        return buffer.getvalue()

    def generate_text(self) -> str:
        return self.generate_bytes().decode('utf-8')

    def _emit(self, node: Node, sink) -> None:
        self._handlers[type(node)](node, sink)

    def _write(self, sink, data: bytes) -> None:
        try:
            sink.write(data)
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to write {len(data)} byte(s) to sink: {e}") from e

    def _emit_anchor(self, node: Anchor, sink) -> None:
        if node.kind == AnchorKind.END_LINE:
            self._write(sink, b'\n')

    def _emit_literal(self, node: Literal, sink) -> None:
        value = node.value
        if isinstance(value, str):
            value = value.encode('utf-8')
        self._write(sink, value)

    def _emit_class(self, node: Class, sink) -> None:
        if not node.unicode:
            self._write(sink, bytes([sample_ranges(node.ranges, self.rng)]))
            return

        value = sample_ranges(node.ranges, self.rng)
        while not _is_scalar(value):
            value = sample_ranges(node.ranges, self.rng)
        self._write(sink, chr(value).encode('utf-8'))

    def _emit_any_char(self, node: AnyChar, sink) -> None:
        value = self.rng.randint(0, MAX_UNICODE)
        while not _is_scalar(value) or (not node.newline and value == NEWLINE):
            value = self.rng.randint(0, MAX_UNICODE)
        self._write(sink, chr(value).encode('utf-8'))

    def _emit_any_byte(self, node: AnyByte, sink) -> None:
        value = self.rng.randint(0, MAX_BYTE)
        while not node.newline and value == NEWLINE:
            value = self.rng.randint(0, MAX_BYTE)
        self._write(sink, bytes([value]))

    def _emit_concat(self, node: Concat, sink) -> None:
        for child in node.children:
            self._emit(child, sink)

    def _emit_alternation(self, node: Alternation, sink) -> None:
        index = self.rng.randint(0, len(node.children) - 1)
        self._emit(node.children[index], sink)

    def _emit_repetition(self, node: Repetition, sink) -> None:
        count = resolve_count(node.quantifier, node.greedy, self._max_repeat, self.rng)
        for _ in range(count):
            self._emit(node.child, sink)


_NODE_TYPES = (
    Empty, Anchor, Literal, Class, AnyChar, AnyByte,
    Group, Concat, Alternation, Repetition,
)


def _check_tree(node) -> None:
    """Reject anything that is not one of the known node types."""
    stack = [node]
    while stack:
        current = stack.pop()
        if type(current) not in _NODE_TYPES:
            raise PatternError(f"Unsupported pattern node: {current!r}")
        if isinstance(current, (Group, Repetition)):
            stack.append(current.child)
        elif isinstance(current, (Concat, Alternation)):
            stack.extend(current.children)
