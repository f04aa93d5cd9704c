"""Core algorithms for salientcrop.

Public API:
    - Analyzer: Runs the full crop search on an image.
    - AnalyzerProtocol: Protocol for dependency injection.
    - find_best_crop: Convenience wrapper around a default Analyzer.
    - CandidateGenerator / CropCandidate / Score: The candidate search grid.
    - Scorer / Selector: Candidate evaluation and winner selection.
    - PrescaleController / AnalysisContext: Analysis resolution planning.
    - importance: Compositional weight of a pixel for a crop.
    - CropError, InvalidDimensionsError, NoCandidatesError: Failures.
"""

from salientcrop.core.analyzer import (
    Analyzer,
    AnalyzerProtocol,
    CropResult,
    find_best_crop,
)
from salientcrop.core.candidates import CandidateGenerator, CropCandidate, Score
from salientcrop.core.exceptions import (
    CropError,
    InvalidDimensionsError,
    NoCandidatesError,
)
from salientcrop.core.importance import importance, importance_grid, thirds
from salientcrop.core.prescale import (
    AnalysisContext,
    PillowResampler,
    PrescaleController,
    ResamplerProtocol,
)
from salientcrop.core.scorer import Scorer
from salientcrop.core.selector import Selector

__all__ = [
    "AnalysisContext",
    "Analyzer",
    "AnalyzerProtocol",
    "CandidateGenerator",
    "CropCandidate",
    "CropError",
    "CropResult",
    "InvalidDimensionsError",
    "NoCandidatesError",
    "PillowResampler",
    "PrescaleController",
    "ResamplerProtocol",
    "Score",
    "Scorer",
    "Selector",
    "find_best_crop",
    "importance",
    "importance_grid",
    "thirds",
]
