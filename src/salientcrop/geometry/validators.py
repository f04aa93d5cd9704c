"""Bounds checking and clamping of crop regions.

Rescaled crops can overhang the source image by a pixel or two when the
resampler rounds the derived analysis height up; these helpers detect and
repair that.
"""

from __future__ import annotations

from salientcrop.geometry.primitives import Region, Size


class GeometryValidator:
    """Stateless validator for regions against image bounds."""

    def validate(self, region: Region, bounds: Size) -> bool:
        """Check that a region lies within bounds.

        Region x, y are already constrained to >= 0 by Pydantic, so only the
        right and bottom edges need checking.
        """
        return region.right <= bounds.width and region.bottom <= bounds.height

    def clamp_region(self, region: Region, bounds: Size) -> Region:
        """Clamp a region to valid bounds.

        The origin is pulled into ``[0, bounds - 1]`` and the extent is cut
        to the remaining space, keeping at least one pixel per axis.

        Example:
            >>> validator = GeometryValidator()
            >>> bounds = Size(width=1000, height=1000)
            >>> clamped = validator.clamp_region(
            ...     Region(x=900, y=900, width=200, height=200), bounds
            ... )
            >>> clamped.right
            1000
        """
        if self.validate(region, bounds):
            return region

        clamped_x = max(0, min(region.x, bounds.width - 1))
        clamped_y = max(0, min(region.y, bounds.height - 1))

        clamped_width = max(1, min(region.width, bounds.width - clamped_x))
        clamped_height = max(1, min(region.height, bounds.height - clamped_y))

        return Region(
            x=clamped_x,
            y=clamped_y,
            width=clamped_width,
            height=clamped_height,
        )
