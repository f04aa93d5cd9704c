"""Vision module: per-pixel feature detection and debug rendering."""

from __future__ import annotations

from salientcrop.vision.debug import (
    DebugSink,
    DirectoryDebugSink,
    NullDebugSink,
    paint_importance,
)
from salientcrop.vision.features import (
    DETAIL_CHANNEL,
    SATURATION_CHANNEL,
    SKIN_CHANNEL,
    FeatureExtractor,
    FeatureMap,
    detect_edges,
    detect_saturation,
    detect_skin,
    hsl_saturation,
    luma,
    skin_score,
    to_rgba_array,
)

__all__ = [
    "DETAIL_CHANNEL",
    "SATURATION_CHANNEL",
    "SKIN_CHANNEL",
    "DebugSink",
    "DirectoryDebugSink",
    "FeatureExtractor",
    "FeatureMap",
    "NullDebugSink",
    "detect_edges",
    "detect_saturation",
    "detect_skin",
    "hsl_saturation",
    "luma",
    "paint_importance",
    "skin_score",
    "to_rgba_array",
]
