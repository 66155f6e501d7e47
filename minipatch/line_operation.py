"""A single classified line inside a hunk body."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

LINE_SEPARATOR = "\n"


def iter_line_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` offsets of each line in ``text``, separator excluded.

    A text ending with the separator yields a final empty span, and an empty
    text yields exactly one empty span.
    """
    start = 0
    while True:
        end = text.find(LINE_SEPARATOR, start)
        if end == -1:
            yield start, len(text)
            return
        yield start, end
        start = end + 1


class Operation(Enum):
    CONTEXT = " "
    DELETE = "-"
    INSERT = "+"

    @classmethod
    def from_marker(cls, marker: str) -> "Operation":
        try:
            return cls(marker)
        except ValueError:
            raise ValueError(f"Unrecognized hunk line marker: {marker!r}") from None


@dataclass(frozen=True)
class LineOperation:
    """One hunk body line, referencing its text inside the patch.

    ``start``/``end`` delimit the line text in ``source`` with the marker
    character and the line separator excluded.
    """
    kind: Operation
    source: str
    start: int
    end: int

    @property
    def is_original_line(self) -> bool:
        """Line exists in the original text and must be validated."""
        return self.kind is not Operation.INSERT

    @property
    def is_output_line(self) -> bool:
        """Line exists in the patched text and must be written."""
        return self.kind is not Operation.DELETE

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    @property
    def length(self) -> int:
        return self.end - self.start

    def matches(self, text: str, start: int, end: int) -> bool:
        """Ordinal comparison against ``text[start:end]``."""
        if end - start != self.length:
            return False
        return text.startswith(self.text, start)

    def __repr__(self) -> str:
        return f"LineOperation({self.kind.name}, {self.text!r})"
