"""Pre-scaling of the source image and rescaling of the result.

Analysis runs on a shrunken working copy so that its cost does not grow
with the source resolution. The controller decides how far to shrink
(the pre-scale factor ``p``). It converts the requested crop size into
analysis-space pixels. When the search finishes it maps the winning
rectangle back onto the source image.

Algorithm Invariant:
    The source is only ever downsampled (p <= 1). Images whose shorter
    side is already below ``prescale_min`` are analysed at native size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Protocol

from PIL import Image

from salientcrop.config import AnalysisConfig
from salientcrop.core.candidates import CropCandidate
from salientcrop.core.exceptions import InvalidDimensionsError
from salientcrop.geometry import (
    GeometryValidator,
    Region,
    Size,
    chop,
    region_analysis_to_source,
    size_source_to_analysis,
)


@dataclass(frozen=True)
class AnalysisContext:
    """Per-call analysis parameters, fixed once planned.

    Attributes:
        source_size: Dimensions of the original image.
        scale: Largest factor by which the target fits the source.
        prescale_factor: Shrink ratio applied before analysis (0 < p <= 1).
        analysis_size: Expected dimensions of the analysis image.
        crop_width: Analysis-space target width; 0 means unconstrained.
        crop_height: Analysis-space target height; 0 means unconstrained.
        min_scale: Lower bound of the candidate scale search.
    """

    source_size: Size
    scale: float
    prescale_factor: float
    analysis_size: Size
    crop_width: float
    crop_height: float
    min_scale: float


class ResamplerProtocol(Protocol):
    """Interface of the external downscaling primitive."""

    def resize(
        self,
        image: Image.Image,
        target_width: int,
        method: Image.Resampling,
    ) -> Image.Image:
        """Resize ``image`` to ``target_width``, deriving height from aspect.

        Args:
            image: Source image.
            target_width: Output width in pixels.
            method: Interpolation filter.

        Returns:
            Resized image.
        """
        ...


class PillowResampler:
    """Resampler backed by ``PIL.Image.resize``."""

    def resize(
        self,
        image: Image.Image,
        target_width: int,
        method: Image.Resampling,
    ) -> Image.Image:
        if target_width <= 0:
            raise ValueError(f"target_width must be positive, got {target_width}")
        width, height = image.size
        if target_width == width:
            return image
        target_height = max(1, round(height * target_width / width))
        return image.resize((target_width, target_height), resample=method)


class PrescaleController:
    """Plans the analysis resolution and maps results back.

    Example:
        >>> controller = PrescaleController(AnalysisConfig())
        >>> context = controller.plan(Size(width=1600, height=1200), 400, 300)
        >>> context.prescale_factor, context.crop_width, context.crop_height
        (0.3333333333333333, 533.0, 400.0)
    """

    __slots__ = ("_config", "_validator")

    def __init__(self, config: AnalysisConfig) -> None:
        self._config = config
        self._validator = GeometryValidator()

    def plan(
        self,
        source_size: Size,
        target_width: int,
        target_height: int,
    ) -> AnalysisContext:
        """Compute the AnalysisContext for one call.

        Args:
            source_size: Original image dimensions.
            target_width: Requested crop width (0 = unconstrained).
            target_height: Requested crop height (0 = unconstrained).

        Raises:
            InvalidDimensionsError: If both targets are zero or either is
                negative.
        """
        target = (target_width, target_height)
        if target_width < 0 or target_height < 0:
            raise InvalidDimensionsError(
                "Target dimensions must not be negative",
                image_size=source_size.to_tuple(),
                target_size=target,
            )
        if target_width == 0 and target_height == 0:
            raise InvalidDimensionsError(
                "Expected a nonzero target width or height",
                image_size=source_size.to_tuple(),
                target_size=target,
            )

        scale = min(
            source_size.width / target_width if target_width else math.inf,
            source_size.height / target_height if target_height else math.inf,
        )
        prescale_factor = self.prescale_factor(source_size)

        min_scale = min(
            self._config.max_scale, max(1.0 / scale, self._config.min_scale)
        )
        if prescale_factor < 1.0:
            analysis_size = size_source_to_analysis(source_size, prescale_factor)
        else:
            analysis_size = source_size

        return AnalysisContext(
            source_size=source_size,
            scale=scale,
            prescale_factor=prescale_factor,
            analysis_size=analysis_size,
            crop_width=chop(target_width * scale * prescale_factor),
            crop_height=chop(target_height * scale * prescale_factor),
            min_scale=min_scale,
        )

    def fit(self, context: AnalysisContext, analysis_size: Size) -> AnalysisContext:
        """Align the context with the image the resampler actually produced.

        Truncation of ``W*p`` and the resampler's rounded height can leave
        the analysis image a pixel short of the planned crop. Constrained
        crop axes are trimmed to the real analysis size; unconstrained (0)
        axes stay unconstrained.
        """
        crop_width = context.crop_width
        crop_height = context.crop_height
        if crop_width > analysis_size.width:
            crop_width = float(analysis_size.width)
        if crop_height > analysis_size.height:
            crop_height = float(analysis_size.height)
        return replace(
            context,
            analysis_size=analysis_size,
            crop_width=crop_width,
            crop_height=crop_height,
        )

    def prescale_factor(self, source_size: Size) -> float:
        """Shrink ratio for ``source_size``; never above 1.0."""
        if not self._config.prescale:
            return 1.0
        factor = self._config.prescale_min / min(source_size.width, source_size.height)
        return min(1.0, factor)

    def prescale(
        self,
        image: Image.Image,
        context: AnalysisContext,
        resampler: ResamplerProtocol,
        method: Image.Resampling,
    ) -> Image.Image:
        """Produce the analysis image via the external resampler."""
        if context.prescale_factor >= 1.0:
            return image
        return resampler.resize(image, context.analysis_size.width, method)

    def rescale(self, candidate: CropCandidate, context: AnalysisContext) -> Region:
        """Map the winning candidate onto the source image.

        The result is canonical and clamped to the source bounds; the
        resampler's rounded height can otherwise leave the bottom edge a
        pixel or two outside.
        """
        region = region_analysis_to_source(candidate.to_region(), context.prescale_factor)
        return self._validator.clamp_region(region, context.source_size)
