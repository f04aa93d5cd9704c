"""salientcrop: content-aware crop rectangle selection for raster images."""

from salientcrop.core import (
    Analyzer,
    AnalyzerProtocol,
    CropError,
    InvalidDimensionsError,
    NoCandidatesError,
    find_best_crop,
)
from salientcrop.geometry import Region

__version__ = "0.1.0"

__all__ = [
    "Analyzer",
    "AnalyzerProtocol",
    "CropError",
    "InvalidDimensionsError",
    "NoCandidatesError",
    "Region",
    "__version__",
    "find_best_crop",
]
