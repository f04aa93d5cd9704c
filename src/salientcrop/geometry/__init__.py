"""Geometry module for salientcrop.

Key Components:
    - Primitives: Size and Region models in pixel coordinates
    - Transforms: analysis-space <-> source-space conversions
    - Validators: bounds checking and region clamping

Example:
    from salientcrop.geometry import GeometryValidator, Region, Size

    region = Region(x=10, y=20, width=300, height=200)
    bounds = Size(width=320, height=240)
    GeometryValidator().validate(region, bounds)  # True
    GeometryValidator().clamp_region(region, bounds).bottom  # 220
"""

from salientcrop.geometry.primitives import Region, Size
from salientcrop.geometry.transforms import (
    chop,
    region_analysis_to_source,
    size_source_to_analysis,
)
from salientcrop.geometry.validators import GeometryValidator

__all__ = [
    "GeometryValidator",
    "Region",
    "Size",
    "chop",
    "region_analysis_to_source",
    "size_source_to_analysis",
]
