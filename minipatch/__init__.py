"""minipatch — apply unified diffs to text with exact matching."""

__version__ = "1.0.0"

from .errors import (
    BufferTooSmallError,
    ContentMismatchError,
    InvalidPatchError,
    PatchError,
    PatchParseError,
)
from .patcher import apply, apply_into, check, parse, try_apply
from .unified_diff import UnifiedDiff

__all__ = [
    "__version__",
    "parse",
    "apply",
    "apply_into",
    "try_apply",
    "check",
    "UnifiedDiff",
    "PatchError",
    "InvalidPatchError",
    "PatchParseError",
    "ContentMismatchError",
    "BufferTooSmallError",
]
