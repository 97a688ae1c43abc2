"""
Error types for size resolution and resizing.

Resize collaborators return a ResizeError instead of raising it; the
assembler treats any non-mapping result as a failed size and drops it.
"""
from typing import Optional


class MediaSizesError(Exception):
    """Base exception for media-sizes errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ResizeError(MediaSizesError):
    """Failure signal for a single size that could not be produced."""


# Standard error codes
class ErrorCodes:
    """Standard error codes."""

    MISSING_DIMENSIONS = "MISSING_DIMENSIONS"
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
    NO_RESIZE_NEEDED = "NO_RESIZE_NEEDED"
    RESIZE_FAILED = "RESIZE_FAILED"
