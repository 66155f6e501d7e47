"""Unified diff parsing: hunks merged into one line-number keyed mapping."""

import logging
from typing import Dict, Iterator, List, Tuple

from .hunk import HUNK_MARKER, Hunk, Span
from .line_operation import LINE_SEPARATOR, LineOperation, iter_line_spans

logger = logging.getLogger(__name__)


def split_hunks(patch: str) -> Iterator[Tuple[Span, List[Span]]]:
    """Yield ``(header, body)`` line spans for each hunk in ``patch``.

    Lines before the first ``@@`` header (file headers, ``diff --git`` and
    ``index`` lines) are skipped.
    """
    spans = list(iter_line_spans(patch))
    if patch.endswith(LINE_SEPARATOR):
        spans.pop()

    header = None
    body: List[Span] = []
    for start, end in spans:
        if patch.startswith(HUNK_MARKER, start):
            if header is not None:
                yield header, body
            header, body = (start, end), []
        elif header is not None:
            body.append((start, end))
    if header is not None:
        yield header, body


class UnifiedDiff:
    """Parsed patch text.

    Attributes:
        patch: the patch text every LineOperation refers into.
        hunks: hunks in patch order.
        line_operations: original line number -> operations applied there.
        total_character_count_delta: length of the patched text minus the
            length of the original, for any output with at least one line.

    Raises ValueError when the patch has no hunks, a hunk is malformed, or
    hunks overlap or are out of order. An insertion-only hunk and the hunk
    that starts on the line after it may share an anchor line.
    """

    def __init__(self, patch: str):
        self.patch = patch
        self.hunks: List[Hunk] = []
        self.line_operations: Dict[int, List[LineOperation]] = {}
        self._next_free_line = 1

        for header, body in split_hunks(patch):
            hunk = Hunk.parse(patch, header, body)
            self._merge(hunk)
            self.hunks.append(hunk)

        if not self.hunks:
            raise ValueError("No hunks found in patch text")

        self.total_character_count_delta = sum(
            hunk.character_count_delta for hunk in self.hunks
        )
        logger.debug(
            "Parsed %d hunk(s) touching %d line(s), delta %+d chars",
            len(self.hunks), len(self.line_operations), self.total_character_count_delta,
        )

    def _merge(self, hunk: Hunk):
        if hunk.line_operations:
            first = min(hunk.line_operations)
            if first < self._next_free_line:
                raise ValueError(
                    f"Hunk {hunk.header} overlaps or precedes an earlier hunk "
                    f"(line {first}, expected {self._next_free_line} or later)"
                )
        for line_number, operations in hunk.line_operations.items():
            self.line_operations.setdefault(line_number, []).extend(operations)
        self._next_free_line = hunk.end_a

    def expected_output_length(self, original_length: int) -> int:
        """Exact length of the patched text for an original of ``original_length``.

        An output with no lines has no separators at all, which the per-line
        delta would otherwise count as minus one.
        """
        return max(original_length + self.total_character_count_delta, 0)
