"""Geometry primitives for salientcrop.

Immutable Pydantic models for sizes and rectangular regions in pixel
coordinates. (0, 0) is the top-left corner; x grows rightward and y grows
downward. Right and bottom edges are exclusive.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions must be strictly positive (> 0).

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)


class Region(BaseModel, frozen=True):
    """A rectangular region of an image.

    This is the result type of a crop search: the top-left corner (x, y)
    and the dimensions (width, height) in source-image pixels.

    Attributes:
        x: Left edge X coordinate (>= 0).
        y: Top edge Y coordinate (>= 0).
        width: Horizontal extent in pixels (> 0).
        height: Vertical extent in pixels (> 0).
    """

    x: int = Field(..., ge=0, description="Left edge X coordinate")
    y: int = Field(..., ge=0, description="Top edge Y coordinate")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        """Return the exact center point as (x, y)."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Convert to a Pillow box: (left, top, right, bottom)."""
        return (self.x, self.y, self.right, self.bottom)

    @classmethod
    def from_corners(
        cls,
        corner_a: tuple[int, int],
        corner_b: tuple[int, int],
    ) -> Self:
        """Create a canonical Region spanning two opposite corners.

        The corners may be given in any order; each axis is sorted so the
        result always has min <= max.

        Args:
            corner_a: (x, y) of one corner.
            corner_b: (x, y) of the opposite corner (exclusive).

        Returns:
            Region spanning the specified corners.

        Raises:
            ValueError: If the corners coincide on either axis.
        """
        x1, x2 = sorted((corner_a[0], corner_b[0]))
        y1, y2 = sorted((corner_a[1], corner_b[1]))
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

