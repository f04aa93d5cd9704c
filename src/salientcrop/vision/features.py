"""Per-pixel feature extraction for crop scoring.

Three independent detectors run over the analysis image and each fills one
channel of the feature map:

    R: skin likelihood
    G: edge / detail magnitude (discrete Laplacian of luma)
    B: saturation likelihood

All detectors read only the analysis image, never each other's output, so
they can be evaluated in any order. Every computation is vectorised with
NumPy; values are clamped to [0, 255] and truncated to uint8.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
from PIL import Image

from salientcrop.config import AnalysisConfig

# Channel layout of the feature map
SKIN_CHANNEL = 0
DETAIL_CHANNEL = 1
SATURATION_CHANNEL = 2
ALPHA_CHANNEL = 3

# Luma weights in (B, G, R) order. They intentionally do not match any
# standard luma definition; changing them changes every crop decision.
LUMA_WEIGHT_B = 0.5126
LUMA_WEIGHT_G = 0.7152
LUMA_WEIGHT_R = 0.0722

# Skin score assigned to pure black pixels (no direction to compare)
SKIN_SCORE_FLOOR = -1.0

FloatArray = npt.NDArray[np.float64]
ByteArray = npt.NDArray[np.uint8]


@dataclass(frozen=True)
class FeatureMap:
    """Feature channels for one analysis image.

    Attributes:
        pixels: uint8 array of shape (height, width, 4). Channel 0 holds
            skin, 1 detail, 2 saturation and 3 is always 255.
    """

    pixels: ByteArray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def skin(self) -> ByteArray:
        return self.pixels[:, :, SKIN_CHANNEL]

    @property
    def detail(self) -> ByteArray:
        return self.pixels[:, :, DETAIL_CHANNEL]

    @property
    def saturation(self) -> ByteArray:
        return self.pixels[:, :, SATURATION_CHANNEL]

    def to_image(self, channels: tuple[int, ...] | None = None) -> Image.Image:
        """Render the map as an RGBA image.

        Args:
            channels: Feature channels to keep; the others are zeroed.
                None keeps all three.
        """
        pixels = self.pixels.copy()
        if channels is not None:
            for channel in (SKIN_CHANNEL, DETAIL_CHANNEL, SATURATION_CHANNEL):
                if channel not in channels:
                    pixels[:, :, channel] = 0
        return Image.fromarray(pixels)


def to_rgba_array(image: Image.Image) -> ByteArray:
    """Convert a Pillow image of any mode to an (H, W, 4) uint8 array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.asarray(image, dtype=np.uint8)


def _channels(rgba: ByteArray) -> tuple[FloatArray, FloatArray, FloatArray]:
    r = rgba[:, :, 0].astype(np.float64)
    g = rgba[:, :, 1].astype(np.float64)
    b = rgba[:, :, 2].astype(np.float64)
    return r, g, b


def _to_byte(values: FloatArray) -> ByteArray:
    return np.clip(values, 0.0, 255.0).astype(np.uint8)


def luma(rgba: ByteArray) -> FloatArray:
    """Compute the luma plane used by all three detectors (range 0..~330)."""
    r, g, b = _channels(rgba)
    return LUMA_WEIGHT_B * b + LUMA_WEIGHT_G * g + LUMA_WEIGHT_R * r


def detect_edges(rgba: ByteArray) -> ByteArray:
    """Laplacian edge magnitude; border pixels are zero."""
    height, width = rgba.shape[:2]
    out = np.zeros((height, width), dtype=np.uint8)
    if height < 3 or width < 3:
        return out

    lum = luma(rgba)
    laplacian = (
        lum[1:-1, 1:-1] * 4.0
        - lum[:-2, 1:-1]
        - lum[1:-1, :-2]
        - lum[1:-1, 2:]
        - lum[2:, 1:-1]
    )
    out[1:-1, 1:-1] = _to_byte(laplacian)
    return out


def skin_score(rgba: ByteArray, skin_color: tuple[float, float, float]) -> FloatArray:
    """Return ``1 - distance`` between each normalised colour and skin_color."""
    r, g, b = _channels(rgba)
    magnitude = np.sqrt(r * r + g * g + b * b)
    safe = np.where(magnitude > 0.0, magnitude, 1.0)

    rd = r / safe - skin_color[0]
    gd = g / safe - skin_color[1]
    bd = b / safe - skin_color[2]
    distance = np.sqrt(rd * rd + gd * gd + bd * bd)

    return np.where(magnitude > 0.0, 1.0 - distance, SKIN_SCORE_FLOOR)


def detect_skin(rgba: ByteArray, config: AnalysisConfig) -> ByteArray:
    """Skin likelihood channel."""
    skin = skin_score(rgba, config.skin_color)
    lightness = luma(rgba) / 255.0

    mask = (
        (skin > config.skin_threshold)
        & (lightness >= config.skin_brightness_min)
        & (lightness <= config.skin_brightness_max)
    )
    level = (skin - config.skin_threshold) * (255.0 / (1.0 - config.skin_threshold))
    return np.where(mask, _to_byte(level), 0).astype(np.uint8)


def hsl_saturation(rgba: ByteArray) -> FloatArray:
    """HSL saturation in [0, 1]; zero wherever max == min."""
    rgb = rgba[:, :, :3]
    maximum = rgb.max(axis=2).astype(np.float64) / 255.0
    minimum = rgb.min(axis=2).astype(np.float64) / 255.0

    spread = maximum - minimum
    total = maximum + minimum
    lightness = total / 2.0

    chromatic = spread > 0.0
    denominator = np.where(lightness > 0.5, 2.0 - maximum - minimum, total)
    denominator = np.where(chromatic, denominator, 1.0)
    return np.where(chromatic, spread / denominator, 0.0)


def detect_saturation(rgba: ByteArray, config: AnalysisConfig) -> ByteArray:
    """Saturation likelihood channel."""
    saturation = hsl_saturation(rgba)
    lightness = luma(rgba) / 255.0

    mask = (
        (saturation > config.saturation_threshold)
        & (lightness >= config.saturation_brightness_min)
        & (lightness <= config.saturation_brightness_max)
    )
    level = (saturation - config.saturation_threshold) * (
        255.0 / (1.0 - config.saturation_threshold)
    )
    return np.where(mask, _to_byte(level), 0).astype(np.uint8)


class FeatureExtractor:
    """Builds a FeatureMap from an analysis image.

    Example:
        >>> extractor = FeatureExtractor(AnalysisConfig())
        >>> feature_map = extractor.extract(to_rgba_array(image))
        >>> feature_map.detail.max()
    """

    __slots__ = ("_config",)

    def __init__(self, config: AnalysisConfig) -> None:
        self._config = config

    def edges(self, rgba: ByteArray) -> ByteArray:
        return detect_edges(rgba)

    def skin(self, rgba: ByteArray) -> ByteArray:
        return detect_skin(rgba, self._config)

    def saturation(self, rgba: ByteArray) -> ByteArray:
        return detect_saturation(rgba, self._config)

    def extract(self, rgba: ByteArray) -> FeatureMap:
        """Run all three detectors and assemble the feature map."""
        return assemble_feature_map(
            skin=self.skin(rgba),
            detail=self.edges(rgba),
            saturation=self.saturation(rgba),
        )


def assemble_feature_map(
    *,
    skin: ByteArray,
    detail: ByteArray,
    saturation: ByteArray,
) -> FeatureMap:
    """Stack detector outputs into an opaque RGBA feature map."""
    alpha = np.full(detail.shape, 255, dtype=np.uint8)
    pixels = np.stack([skin, detail, saturation, alpha], axis=2)
    pixels.setflags(write=False)
    return FeatureMap(pixels=pixels)
