"""Exact-match patch application.

The original text is walked once, line by line. Runs of lines the patch does
not touch are copied as a single slice; lines the patch does touch are
validated against the patch and replaced by its output lines. There is no
fuzzy matching: any difference between the patch and the original is an
error.
"""

import logging
from typing import List, MutableSequence, Optional, Tuple

from .errors import (
    BufferTooSmallError,
    ContentMismatchError,
    PatchError,
    PatchParseError,
)
from .line_operation import LINE_SEPARATOR, iter_line_spans
from .unified_diff import UnifiedDiff

__all__ = ["parse", "apply", "apply_into", "try_apply", "check"]

logger = logging.getLogger(__name__)


class _Output:
    """Pieces of the patched text plus the running character count."""

    def __init__(self):
        self.pieces: List[str] = []
        self.length = 0

    def append_line(self, text: str):
        # Every piece but the first is preceded by a separator, even when
        # the first piece is an empty line.
        if self.pieces:
            self.pieces.append(LINE_SEPARATOR)
            self.length += len(LINE_SEPARATOR)
        self.pieces.append(text)
        self.length += len(text)

    def getvalue(self) -> str:
        return "".join(self.pieces)


def parse(patch: str) -> UnifiedDiff:
    """Parse ``patch``, wrapping any failure in :class:`PatchParseError`."""
    try:
        return UnifiedDiff(patch)
    except ValueError as e:
        raise PatchParseError() from e


def _merge(diff: UnifiedDiff, original: str) -> _Output:
    operations_by_line = diff.line_operations
    output = _Output()
    pending: Optional[Tuple[int, int]] = None
    anchors_seen = 0
    line_number = 0

    for start, end in iter_line_spans(original):
        line_number += 1
        operations = operations_by_line.get(line_number)
        if operations is None:
            pending = (start, end) if pending is None else (pending[0], end)
            continue

        anchors_seen += 1
        if pending is not None:
            output.append_line(original[pending[0]:pending[1]])
            pending = None

        consumed = False
        for operation in operations:
            if operation.is_original_line:
                if not operation.matches(original, start, end):
                    raise ContentMismatchError(line_number)
                consumed = True
            if operation.is_output_line:
                output.append_line(operation.text)
        if not consumed:
            # Only insertions here; the original line itself is untouched.
            pending = (start, end)

    if pending is not None:
        output.append_line(original[pending[0]:pending[1]])

    if anchors_seen < len(operations_by_line):
        missing = min(n for n in operations_by_line if n > line_number)
        raise ContentMismatchError(
            missing,
            f"Patch references line #{missing} but original text has "
            f"{line_number} line(s)",
        )
    return output


def apply(patch: str, original: str) -> str:
    """Apply a unified diff to ``original`` and return the patched text.

    The patch must match the original text exactly.

    Raises:
        PatchParseError: the patch text cannot be parsed.
        ContentMismatchError: a context or deletion line differs from the
            original text.
    """
    diff = parse(patch)
    expected = diff.expected_output_length(len(original))
    output = _merge(diff, original)
    logger.debug("Patched text: %d chars (expected %d)", output.length, expected)
    return output.getvalue()


def apply_into(patch: str, original: str, destination: MutableSequence[str]) -> int:
    """Write the patched text into ``destination`` and return its length.

    ``destination`` is a mutable sequence of single characters (e.g. a
    ``list``) that must not alias ``patch`` or ``original``. It is left
    untouched unless the whole patch applies; only its first N items are
    overwritten on success.

    Raises:
        BufferTooSmallError: ``destination`` is shorter than the patched text.
        PatchParseError, ContentMismatchError: as for :func:`apply`.
    """
    diff = parse(patch)
    required = diff.expected_output_length(len(original))
    if len(destination) < required:
        raise BufferTooSmallError(required, len(destination))

    output = _merge(diff, original)
    destination[:output.length] = output.getvalue()
    return output.length


def try_apply(patch: str, original: str, destination: MutableSequence[str]) -> Tuple[bool, int]:
    """Non-raising :func:`apply_into`; returns ``(ok, chars_written)``."""
    try:
        return True, apply_into(patch, original, destination)
    except PatchError as e:
        logger.debug("Patch not applied: %s", e)
        return False, 0


def check(patch: str, original: str) -> UnifiedDiff:
    """Validate ``patch`` against ``original`` without keeping the output."""
    diff = parse(patch)
    _merge(diff, original)
    return diff
