"""Exceptions raised by the crop analysis.

Every failure aborts the whole call; nothing is retried and no partial
result is returned.
"""

from __future__ import annotations


class CropError(Exception):
    """Base exception for all crop analysis errors."""

    def __init__(
        self,
        message: str,
        *,
        image_size: tuple[int, int] | None = None,
        target_size: tuple[int, int] | None = None,
    ) -> None:
        """Initialize crop error with optional size context.

        Args:
            message: Human-readable error description.
            image_size: (width, height) of the image being analysed.
            target_size: (width, height) requested by the caller.
        """
        self.message = message
        self.image_size = image_size
        self.target_size = target_size
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts: list[str] = []
        if self.image_size is not None:
            parts.append(f"image={self.image_size[0]}x{self.image_size[1]}")
        if self.target_size is not None:
            parts.append(f"target={self.target_size[0]}x{self.target_size[1]}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class InvalidDimensionsError(CropError):
    """Raised when the requested crop size is unusable.

    This happens when:
    - both target width and height are zero
    - either target dimension is negative
    """


class NoCandidatesError(CropError):
    """Raised when the candidate search yields no rectangle at all.

    Typical causes are a target that does not fit the analysis image after
    scaling, or a configuration whose scale range excludes every candidate.
    """
