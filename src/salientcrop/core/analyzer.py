"""Content-aware crop search.

This module ties the pipeline together:

    1. Plan: derive scale, pre-scale factor and analysis-space crop size.
    2. Prescale: shrink the source with the injected resampler.
    3. Extract: build the feature map (edges, skin, saturation).
    4. Search: enumerate candidates and keep the best-scoring one.
    5. Rescale: map the winner back onto the source image.

Each call owns all of its intermediate buffers; an ``Analyzer`` instance
holds only immutable configuration and collaborators, so one instance can
serve concurrent calls on different images.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np
from PIL import Image

from salientcrop.config import AnalysisConfig, Settings
from salientcrop.core.candidates import CandidateGenerator, CropCandidate
from salientcrop.core.importance import importance_grid
from salientcrop.core.prescale import (
    AnalysisContext,
    PillowResampler,
    PrescaleController,
    ResamplerProtocol,
)
from salientcrop.core.scorer import Scorer
from salientcrop.core.selector import Selector
from salientcrop.geometry import Region, Size
from salientcrop.utils.logging import get_logger, log_timing
from salientcrop.vision.debug import DebugSink, DirectoryDebugSink, paint_importance
from salientcrop.vision.features import (
    FeatureExtractor,
    FeatureMap,
    assemble_feature_map,
    to_rgba_array,
)


@dataclass(frozen=True)
class CropResult:
    """Detailed outcome of one crop search.

    Attributes:
        region: Winning rectangle in source-image pixels.
        candidate: Winning candidate in analysis pixels, with its Score.
        context: Analysis parameters used for the search.
        feature_map: Feature map the candidates were scored against.
    """

    region: Region
    candidate: CropCandidate
    context: AnalysisContext
    feature_map: FeatureMap


class AnalyzerProtocol(Protocol):
    """Capability to find the best crop of an image."""

    def find_best_crop(self, image: Image.Image, width: int, height: int) -> Region:
        """Return the best crop of ``image`` for a width x height target.

        Raises:
            InvalidDimensionsError: If both dimensions are zero.
            NoCandidatesError: If no candidate rectangle fits.
        """
        ...


class Analyzer:
    """Smart-crop analyzer.

    Example:
        >>> from PIL import Image
        >>> analyzer = Analyzer()
        >>> image = Image.open("photo.jpg")
        >>> region = analyzer.find_best_crop(image, 250, 250)
        >>> cropped = image.crop(region.to_box())
    """

    __slots__ = (
        "_config",
        "_controller",
        "_debug_sink",
        "_extractor",
        "_logger",
        "_resample_method",
        "_resampler",
        "_selector",
    )

    def __init__(  # noqa: PLR0913
        self,
        config: AnalysisConfig | None = None,
        *,
        resampler: ResamplerProtocol | None = None,
        resample_method: Image.Resampling = Image.Resampling.BICUBIC,
        debug_sink: DebugSink | None = None,
        logger: Any | None = None,
        max_workers: int = 1,
    ) -> None:
        """Initialize the analyzer.

        Args:
            config: Algorithm tunables. Defaults to AnalysisConfig().
            resampler: Downscaling primitive. Defaults to PillowResampler.
            resample_method: Interpolation filter used for pre-scaling.
            debug_sink: Receives intermediate images; None disables debug
                output.
            logger: structlog-style logger for diagnostics and timings.
            max_workers: Threads used to score candidates.
        """
        self._config = config or AnalysisConfig()
        self._resampler = resampler or PillowResampler()
        self._resample_method = resample_method
        self._debug_sink = debug_sink
        self._logger = logger or get_logger(__name__)
        self._controller = PrescaleController(self._config)
        self._extractor = FeatureExtractor(self._config)
        self._selector = Selector(max_workers=max_workers, logger=self._logger)

    @classmethod
    def from_settings(cls, app_settings: Settings, **overrides: Any) -> Analyzer:
        """Build an analyzer from environment-backed Settings.

        Raises:
            ConfigError: If RESAMPLE_METHOD is not a known filter.
        """
        options: dict[str, Any] = {
            "config": app_settings.analysis_config(),
            "resample_method": app_settings.require_resampling(),
            "max_workers": app_settings.SCORE_WORKERS,
        }
        if app_settings.DEBUG_MODE:
            options["debug_sink"] = DirectoryDebugSink(app_settings.DEBUG_DIR)
        options.update(overrides)
        return cls(**options)

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def find_best_crop(self, image: Image.Image, width: int, height: int) -> Region:
        """Return the best crop of ``image`` for a width x height target.

        Args:
            image: Source image, any Pillow mode.
            width: Target width; 0 leaves the width unconstrained.
            height: Target height; 0 leaves the height unconstrained.

        Returns:
            Canonical Region in source-image pixels.

        Raises:
            InvalidDimensionsError: If both dimensions are zero or either
                is negative.
            NoCandidatesError: If no candidate rectangle fits.
        """
        return self.analyze(image, width, height).region

    def analyze(self, image: Image.Image, width: int, height: int) -> CropResult:
        """Run the full search and return the winner with its context."""
        source_size = Size(width=image.width, height=image.height)
        context = self._controller.plan(source_size, width, height)

        self._logger.debug("Prescale factor", prescale_factor=context.prescale_factor)
        working = self._controller.prescale(
            image, context, self._resampler, self._resample_method
        )
        rgba = to_rgba_array(working)
        context = self._controller.fit(
            context, Size(width=rgba.shape[1], height=rgba.shape[0])
        )
        self._emit("prescale", lambda: working)

        self._logger.debug(
            f"original resolution: {source_size.width}x{source_size.height}"
        )
        self._logger.debug(
            "Analysis parameters",
            scale=context.scale,
            crop_width=context.crop_width,
            crop_height=context.crop_height,
            min_scale=context.min_scale,
            analysis_width=rgba.shape[1],
            analysis_height=rgba.shape[0],
        )

        feature_map = self._extract(rgba)

        generator = CandidateGenerator(
            image_width=feature_map.width,
            image_height=feature_map.height,
            crop_width=context.crop_width,
            crop_height=context.crop_height,
            min_scale=context.min_scale,
            config=self._config,
        )
        with log_timing(self._logger, "candidates"):
            candidates = list(generator)
        self._logger.debug("Candidates generated", count=len(candidates))

        scorer = Scorer(feature_map, self._config)
        with log_timing(self._logger, "score", candidates=len(candidates)):
            winner = self._selector.select(scorer, candidates)

        if self._debug_sink is not None:
            self._emit("final", lambda: self._render_final(feature_map, winner))

        region = self._controller.rescale(winner, context)
        self._logger.info(
            "Best crop found",
            x=region.x,
            y=region.y,
            width=region.width,
            height=region.height,
        )
        return CropResult(
            region=region,
            candidate=winner,
            context=context,
            feature_map=feature_map,
        )

    def _extract(self, rgba: np.ndarray) -> FeatureMap:
        with log_timing(self._logger, "edge"):
            detail = self._extractor.edges(rgba)
        self._emit("edge", lambda: _partial_map(detail=detail).to_image())

        with log_timing(self._logger, "skin"):
            skin = self._extractor.skin(rgba)
        self._emit("skin", lambda: _partial_map(detail=detail, skin=skin).to_image())

        with log_timing(self._logger, "saturation"):
            saturation = self._extractor.saturation(rgba)
        feature_map = assemble_feature_map(skin=skin, detail=detail, saturation=saturation)
        self._emit("saturation", feature_map.to_image)
        return feature_map

    def _render_final(self, feature_map: FeatureMap, winner: CropCandidate) -> Image.Image:
        xs = np.arange(feature_map.width, dtype=np.int64)
        ys = np.arange(feature_map.height, dtype=np.int64)
        return paint_importance(feature_map, importance_grid(winner, xs, ys, self._config))

    def _emit(self, tag: str, render: Any) -> None:
        if self._debug_sink is None:
            return
        self._debug_sink.emit(tag, render())


def _partial_map(
    *,
    detail: np.ndarray,
    skin: np.ndarray | None = None,
) -> FeatureMap:
    """Feature map with only the channels computed so far."""
    empty = np.zeros_like(detail)
    return assemble_feature_map(
        skin=skin if skin is not None else empty,
        detail=detail,
        saturation=empty,
    )


def find_best_crop(
    image: Image.Image,
    width: int,
    height: int,
    config: AnalysisConfig | None = None,
) -> Region:
    """Convenience function: best crop with a default Analyzer.

    Args:
        image: Source image.
        width: Target width (0 = unconstrained).
        height: Target height (0 = unconstrained).
        config: Optional tunables.

    Returns:
        Canonical Region in source-image pixels.
    """
    return Analyzer(config).find_best_crop(image, width, height)
