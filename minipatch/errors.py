"""Structured error types for patch parsing and application."""


class PatchError(Exception):
    """Base error for all patch operations."""
    pass


class InvalidPatchError(PatchError):
    """The patch text is malformed or inconsistent with the original text."""
    pass


class PatchParseError(InvalidPatchError):
    """Raised when the patch text cannot be parsed.

    The underlying cause is always chained (``__cause__``).
    """

    def __init__(self, message: str = "Error occurred while parsing patch text"):
        super().__init__(message)


class ContentMismatchError(InvalidPatchError):
    """Raised when a context or deletion line differs from the original text."""

    def __init__(self, line_number: int, message: str = ""):
        self.line_number = line_number
        super().__init__(
            message
            or f"Line #{line_number} of original text does not match "
               f"the corresponding line in the patch"
        )


class BufferTooSmallError(PatchError):
    """Raised when a caller-supplied destination cannot hold the patched text."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Destination holds {available} characters, "
            f"patched text needs {required}"
        )
