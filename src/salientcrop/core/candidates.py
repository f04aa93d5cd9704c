"""Candidate crop rectangles in analysis-image coordinates.

The search grid is scanned at scales from ``max_scale`` down to the
effective minimum in ``scale_step`` decrements. For each scale, every
top-left corner on a ``step``-pixel lattice where the scaled crop fits
inside the image is visited. Enumeration order is fixed (scale descending,
then y ascending, then x ascending) because it decides ties in selection.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

from salientcrop.config import AnalysisConfig
from salientcrop.geometry import Region


@dataclass(frozen=True, slots=True)
class Score:
    """Score of one candidate.

    Attributes:
        detail: Importance-weighted detail accumulator.
        saturation: Importance-weighted saturation accumulator.
        skin: Importance-weighted skin accumulator.
        total: Area-normalised composite; the only value used for ranking.
    """

    detail: float = 0.0
    saturation: float = 0.0
    skin: float = 0.0
    total: float = 0.0


@dataclass(frozen=True, slots=True)
class CropCandidate:
    """A proposed crop in analysis-image pixels, optionally scored."""

    x: int
    y: int
    width: int
    height: int
    score: Score | None = None

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def with_score(self, score: Score) -> CropCandidate:
        return replace(self, score=score)

    def to_region(self) -> Region:
        return Region(x=self.x, y=self.y, width=self.width, height=self.height)


class CandidateGenerator:
    """Restartable, lazy enumeration of crop candidates.

    Each call to ``iter()`` starts a fresh scan over the same grid.

    Example:
        >>> generator = CandidateGenerator(320, 240, 240.0, 240.0, 0.9)
        >>> first = next(iter(generator))
        >>> (first.x, first.y, first.width, first.height)
        (0, 0, 240, 240)
    """

    __slots__ = ("_config", "_crop_height", "_crop_width", "_height", "_min_scale", "_width")

    def __init__(
        self,
        image_width: int,
        image_height: int,
        crop_width: float,
        crop_height: float,
        min_scale: float,
        config: AnalysisConfig | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            image_width: Analysis image width in pixels.
            image_height: Analysis image height in pixels.
            crop_width: Analysis-space target width; 0 means unconstrained.
            crop_height: Analysis-space target height; 0 means unconstrained.
            min_scale: Smallest scale to visit (inclusive).
            config: Tunables; defaults to AnalysisConfig().
        """
        self._config = config or AnalysisConfig()
        self._width = image_width
        self._height = image_height

        # An unconstrained axis becomes a square on the shorter image side
        min_dimension = float(min(image_width, image_height))
        self._crop_width = crop_width if crop_width != 0.0 else min_dimension
        self._crop_height = crop_height if crop_height != 0.0 else min_dimension
        self._min_scale = min_scale

    @property
    def crop_size(self) -> tuple[float, float]:
        """Crop size at scale 1.0 after substituting unconstrained axes."""
        return (self._crop_width, self._crop_height)

    def scales(self) -> Iterator[float]:
        """Yield the visited scales, largest first.

        The scale is decremented by repeated subtraction, so the last value
        is subject to floating-point accumulation.
        """
        scale = self._config.max_scale
        while scale >= self._min_scale:
            yield scale
            scale -= self._config.scale_step

    def __iter__(self) -> Iterator[CropCandidate]:
        step = self._config.step
        for scale in self.scales():
            scaled_width = self._crop_width * scale
            scaled_height = self._crop_height * scale
            width = int(scaled_width)
            height = int(scaled_height)
            if width <= 0 or height <= 0:
                continue

            y = 0
            while y + scaled_height <= self._height:
                x = 0
                while x + scaled_width <= self._width:
                    yield CropCandidate(x=x, y=y, width=width, height=height)
                    x += step
                y += step

    def count(self) -> int:
        """Number of candidates a full scan yields."""
        return sum(1 for _ in self)
