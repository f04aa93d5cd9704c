"""Compositional importance of a pixel relative to a crop.

The weight combines three terms measured from the crop centre:

1. a radial falloff ``1.41 - r`` that favours the centre,
2. a steep penalty inside the outer ``edge_radius`` band of the crop,
3. an optional rule-of-thirds boost peaking on the thirds lines.

Pixels outside the crop receive ``outside_importance``.

Two forms are provided. ``importance`` evaluates one pixel with plain
floats. ``importance_grid`` evaluates a whole sampling lattice with NumPy
and performs the same operations in the same order, so both agree exactly.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from salientcrop.config import AnalysisConfig

if TYPE_CHECKING:
    from salientcrop.core.candidates import CropCandidate

# Offset at which the radial falloff reaches zero (~ sqrt(2))
CENTER_WEIGHT = 1.41
THIRDS_WIDTH = 16.0
THIRDS_GAIN = 1.2
THIRDS_FLOOR = 0.5

_DEFAULT_CONFIG = AnalysisConfig()


def thirds(value: float) -> float:
    """Rule-of-thirds bump: 1.0 at one third, zero from an eighth away."""
    x = (math.fmod(value - (1.0 / 3.0) + 1.0, 2.0) * 0.5 - 0.5) * THIRDS_WIDTH
    return max(1.0 - x * x, 0.0)


def importance(
    crop: CropCandidate,
    x: int,
    y: int,
    config: AnalysisConfig = _DEFAULT_CONFIG,
) -> float:
    """Importance of pixel (x, y) for ``crop``."""
    if crop.x > x or x >= crop.x + crop.width or crop.y > y or y >= crop.y + crop.height:
        return config.outside_importance

    xf = (x - crop.x) / crop.width
    yf = (y - crop.y) / crop.height

    px = abs(0.5 - xf) * 2.0
    py = abs(0.5 - yf) * 2.0

    dx = max(px - 1.0 + config.edge_radius, 0.0)
    dy = max(py - 1.0 + config.edge_radius, 0.0)
    d = (dx * dx + dy * dy) * config.edge_weight

    s = CENTER_WEIGHT - math.sqrt(px * px + py * py)
    if config.rule_of_thirds:
        s += (max(0.0, s + d + THIRDS_FLOOR) * THIRDS_GAIN) * (thirds(px) + thirds(py))

    return s + d


def _thirds_array(values: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    x = (np.fmod(values - (1.0 / 3.0) + 1.0, 2.0) * 0.5 - 0.5) * THIRDS_WIDTH
    return np.maximum(1.0 - x * x, 0.0)


def importance_grid(
    crop: CropCandidate,
    xs: npt.NDArray[np.int64],
    ys: npt.NDArray[np.int64],
    config: AnalysisConfig = _DEFAULT_CONFIG,
) -> npt.NDArray[np.float64]:
    """Importance over the lattice ``ys x xs``.

    Args:
        crop: Candidate rectangle.
        xs: Sample x coordinates (1-D).
        ys: Sample y coordinates (1-D).
        config: Tunables.

    Returns:
        Array of shape (len(ys), len(xs)).
    """
    inside_x = (xs >= crop.x) & (xs < crop.x + crop.width)
    inside_y = (ys >= crop.y) & (ys < crop.y + crop.height)

    px = np.abs(0.5 - (xs - crop.x) / crop.width) * 2.0
    py = np.abs(0.5 - (ys - crop.y) / crop.height) * 2.0

    dx = np.maximum(px - 1.0 + config.edge_radius, 0.0)
    dy = np.maximum(py - 1.0 + config.edge_radius, 0.0)
    d = (dx[np.newaxis, :] * dx[np.newaxis, :] + dy[:, np.newaxis] * dy[:, np.newaxis]) * (
        config.edge_weight
    )

    pxx = px[np.newaxis, :]
    pyy = py[:, np.newaxis]
    s = CENTER_WEIGHT - np.sqrt(pxx * pxx + pyy * pyy)
    if config.rule_of_thirds:
        boost = _thirds_array(px)[np.newaxis, :] + _thirds_array(py)[:, np.newaxis]
        s = s + (np.maximum(0.0, s + d + THIRDS_FLOOR) * THIRDS_GAIN) * boost

    inside = inside_y[:, np.newaxis] & inside_x[np.newaxis, :]
    return np.where(inside, s + d, config.outside_importance)
