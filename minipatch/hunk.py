"""Hunk header and body parsing.

A hunk looks like::

    @@ -start_a,length_a +start_b,length_b @@ optional section heading
     context
    -removed
    +added

Body lines are keyed by the original-file line number they are applied at.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from .line_operation import LineOperation, Operation

Span = Tuple[int, int]

HUNK_MARKER = "@@"
NO_NEWLINE_MARKER = "\\"

_NUMBER_RE = re.compile(r"[0-9]+")


def parse_header(header: str) -> Tuple[int, int, int, int]:
    """Parse ``@@ -a[,b] +c[,d] @@`` into ``(start_a, length_a, start_b, length_b)``.

    A missing length defaults to 1. Anything after the closing ``@@`` is
    ignored.
    """
    tokens = header.split(" ")
    if tokens[0] != HUNK_MARKER:
        raise ValueError(f"Hunk header must start with '{HUNK_MARKER}': {header!r}")

    range_a: Optional[Tuple[int, int]] = None
    range_b: Optional[Tuple[int, int]] = None
    for token in tokens[1:]:
        if not token:
            continue
        if token == HUNK_MARKER:
            break
        if token.startswith("-") and range_a is None:
            range_a = _parse_range(token[1:])
        elif token.startswith("+") and range_b is None:
            range_b = _parse_range(token[1:])
        else:
            raise ValueError(f"Unexpected token {token!r} in hunk header {header!r}")
        if range_a is not None and range_b is not None:
            break

    if range_a is None or range_b is None:
        raise ValueError(f"Hunk header is missing a line range: {header!r}")
    if range_a[0] == 0 and range_a[1] > 0:
        raise ValueError(f"Original line numbers start at 1: {header!r}")
    return range_a + range_b


def _parse_range(text: str) -> Tuple[int, int]:
    start, sep, length = text.partition(",")
    if not _NUMBER_RE.fullmatch(start) or (sep and not _NUMBER_RE.fullmatch(length)):
        raise ValueError(f"Invalid line range: {text!r}")
    return int(start), int(length) if sep else 1


class Hunk:
    """One ``@@`` block of a unified diff.

    ``start_b``/``length_b`` are informational; application is always
    addressed by original-file line numbers.
    """

    def __init__(self, start_a: int, length_a: int, start_b: int, length_b: int):
        self.start_a = start_a
        self.length_a = length_a
        self.start_b = start_b
        self.length_b = length_b
        self.line_operations: Dict[int, List[LineOperation]] = {}

    @classmethod
    def parse(cls, source: str, header: Span, body: Sequence[Span]) -> "Hunk":
        """Build a hunk from line spans of ``source``.

        Raises ValueError for a malformed header or body, or when the declared
        lengths disagree with the body.
        """
        hunk = cls(*parse_header(source[header[0]:header[1]]))
        hunk._read_body(source, body)
        if not hunk.lengths_are_consistent():
            raise ValueError(
                f"Hunk {hunk.header} declares {hunk.length_a} original and "
                f"{hunk.length_b} output lines, body has "
                f"{hunk.original_line_count} and {hunk.output_line_count}"
            )
        return hunk

    def _read_body(self, source: str, body: Sequence[Span]):
        # A zero-length original range inserts after line start_a.
        line_number = self.start_a if self.length_a else self.start_a + 1
        assigned = False

        for start, end in body:
            if start == end:
                # Empty context line with its trailing space stripped
                kind = Operation.CONTEXT
                text_start = start
            elif source[start] == NO_NEWLINE_MARKER:
                continue
            else:
                kind = Operation.from_marker(source[start])
                text_start = start + 1

            operation = LineOperation(kind, source, text_start, end)
            if operation.is_original_line:
                if assigned:
                    line_number += 1
                assigned = True
            self.line_operations.setdefault(line_number, []).append(operation)

    @property
    def header(self) -> str:
        return (
            f"{HUNK_MARKER} -{self.start_a},{self.length_a} "
            f"+{self.start_b},{self.length_b} {HUNK_MARKER}"
        )

    @property
    def end_a(self) -> int:
        """First original line after the hunk."""
        return self.start_a + self.length_a if self.length_a else self.start_a + 1

    def operations(self):
        for operations in self.line_operations.values():
            yield from operations

    @property
    def original_line_count(self) -> int:
        return sum(1 for op in self.operations() if op.is_original_line)

    @property
    def output_line_count(self) -> int:
        return sum(1 for op in self.operations() if op.is_output_line)

    def lengths_are_consistent(self) -> bool:
        return (
            self.original_line_count == self.length_a
            and self.output_line_count == self.length_b
        )

    @property
    def character_count_delta(self) -> int:
        """Characters added minus characters removed, one separator per line."""
        delta = 0
        for op in self.operations():
            if op.is_output_line and not op.is_original_line:
                delta += op.length + 1
            elif op.is_original_line and not op.is_output_line:
                delta -= op.length + 1
        return delta

    def __repr__(self) -> str:
        return f"Hunk({self.header!r})"
