"""Debug image output for the crop analysis.

When debug mode is enabled the analyzer hands intermediate images to a
``DebugSink`` at fixed checkpoints ("prescale", "edge", "skin",
"saturation", "final"). The analysis itself never touches the filesystem;
only ``DirectoryDebugSink`` does.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image

from salientcrop.vision.features import DETAIL_CHANNEL, SKIN_CHANNEL, FeatureMap

logger = logging.getLogger(__name__)

# Overlay intensities for painting importance onto a feature map
POSITIVE_IMPORTANCE_GAIN = 32.0
NEGATIVE_IMPORTANCE_GAIN = 64.0


class DebugSink(Protocol):
    """Receiver for intermediate analysis images."""

    def emit(self, tag: str, image: Image.Image) -> None:
        """Accept one checkpoint image.

        Args:
            tag: Checkpoint name, e.g. "edge" or "final".
            image: Image to record. Sinks must not mutate it.
        """
        ...


class NullDebugSink:
    """Sink that discards every image."""

    def emit(self, tag: str, image: Image.Image) -> None:
        _ = tag, image


class DirectoryDebugSink:
    """Writes checkpoint images as ``<prefix>_<tag>.png`` into a directory."""

    __slots__ = ("_directory", "_prefix")

    def __init__(self, directory: Path | str, prefix: str = "smartcrop") -> None:
        self._directory = Path(directory)
        self._prefix = prefix

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, tag: str) -> Path:
        return self._directory / f"{self._prefix}_{tag}.png"

    def emit(self, tag: str, image: Image.Image) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(tag)
        image.save(path, format="PNG")
        logger.debug("Wrote debug image %s", path)


def paint_importance(
    feature_map: FeatureMap,
    importance: npt.NDArray[np.float64],
) -> Image.Image:
    """Overlay a per-pixel importance field onto the feature map.

    Positive importance brightens the green (detail) channel and negative
    importance brightens the red (skin) channel, so the winning crop shows
    up as a green window on a reddish surround.

    Args:
        feature_map: Map to paint on; it is not modified.
        importance: Array of shape (height, width) matching the map.

    Returns:
        New RGBA image.

    Raises:
        ValueError: If the importance field does not match the map's shape.
    """
    if importance.shape != (feature_map.height, feature_map.width):
        raise ValueError(
            f"importance shape {importance.shape} does not match feature map "
            f"{(feature_map.height, feature_map.width)}"
        )

    pixels = feature_map.pixels.copy()
    red = pixels[:, :, SKIN_CHANNEL].astype(np.float64)
    green = pixels[:, :, DETAIL_CHANNEL].astype(np.float64)

    green = np.where(importance > 0, green + importance * POSITIVE_IMPORTANCE_GAIN, green)
    red = np.where(importance < 0, red - importance * NEGATIVE_IMPORTANCE_GAIN, red)

    pixels[:, :, SKIN_CHANNEL] = np.clip(red, 0.0, 255.0).astype(np.uint8)
    pixels[:, :, DETAIL_CHANNEL] = np.clip(green, 0.0, 255.0).astype(np.uint8)
    pixels[:, :, 3] = 255
    return Image.fromarray(pixels)
