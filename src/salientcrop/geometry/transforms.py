"""Coordinate transforms between source and analysis space.

The analysis image is the source image shrunk by the pre-scale factor
``p`` (0 < p <= 1). Transform direction conventions:

    - source_to_analysis: multiply by p
    - analysis_to_source: divide by p

All conversions truncate toward zero, matching the integer pixel grid of
the analysis image.
"""

from __future__ import annotations

import math

from salientcrop.geometry.primitives import Region, Size

__all__ = [
    "chop",
    "region_analysis_to_source",
    "size_source_to_analysis",
]


def chop(value: float) -> float:
    """Truncate toward zero (floor for positives, ceil for negatives)."""
    if value < 0:
        return float(math.ceil(value))
    return float(math.floor(value))


def _validate_factor(prescale_factor: float) -> None:
    if prescale_factor <= 0:
        raise ValueError(f"prescale_factor must be positive, got {prescale_factor}")


def size_source_to_analysis(size: Size, prescale_factor: float) -> Size:
    """Transform a source-image Size into analysis-image pixels.

    Each dimension keeps at least one pixel.

    Raises:
        ValueError: If prescale_factor is not positive.
    """
    _validate_factor(prescale_factor)
    return Size(
        width=max(1, int(chop(size.width * prescale_factor))),
        height=max(1, int(chop(size.height * prescale_factor))),
    )


def region_analysis_to_source(region: Region, prescale_factor: float) -> Region:
    """Map an analysis-space Region back onto the source image.

    Each of the four edges is divided by the factor and truncated, and the
    resulting corners are canonicalized.

    Args:
        region: Region in analysis-image coordinates.
        prescale_factor: Factor the source was shrunk by (0 < p <= 1).

    Returns:
        Region in source-image coordinates.

    Raises:
        ValueError: If prescale_factor is not positive.
    """
    _validate_factor(prescale_factor)
    if prescale_factor == 1.0:
        return region
    left = int(chop(region.x / prescale_factor))
    top = int(chop(region.y / prescale_factor))
    right = int(chop(region.right / prescale_factor))
    bottom = int(chop(region.bottom / prescale_factor))
    return Region.from_corners((left, top), (right, bottom))
