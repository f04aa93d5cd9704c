"""Importance-weighted scoring of crop candidates.

The feature map is sampled on a regular lattice (every
``score_down_sample``-th pixel in both axes) that spans the whole map, not
just the candidate. Pixels outside the candidate still count, weighted by
the negative outside importance, which penalises crops that leave strong
features behind.

Per sample, with ``det = G/255`` and ``imp`` the importance:

    skin       += R/255 * (det + skin_bias) * imp
    detail     += det * imp
    saturation += B/255 * (det + saturation_bias) * imp

and ``total = (detail*dw + skin*sw + saturation*satw) / width / height``.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from salientcrop.config import AnalysisConfig
from salientcrop.core.candidates import CropCandidate, Score
from salientcrop.core.importance import importance_grid
from salientcrop.vision.features import FeatureMap


class Scorer:
    """Scores candidates against one shared, read-only feature map.

    The sampled feature terms are computed once at construction; each
    ``score`` call only evaluates importance over the lattice. Instances
    hold no mutable state and can be shared across threads.
    """

    __slots__ = ("_config", "_detail", "_saturation", "_skin", "_xs", "_ys")

    def __init__(self, feature_map: FeatureMap, config: AnalysisConfig) -> None:
        self._config = config
        stride = config.score_down_sample

        # Samples stop where a full stride no longer fits
        self._xs: npt.NDArray[np.int64] = np.arange(
            0, feature_map.width - stride + 1, stride, dtype=np.int64
        )
        self._ys: npt.NDArray[np.int64] = np.arange(
            0, feature_map.height - stride + 1, stride, dtype=np.int64
        )

        lattice = np.ix_(self._ys, self._xs)
        det = feature_map.detail[lattice].astype(np.float64) / 255.0
        skin = feature_map.skin[lattice].astype(np.float64) / 255.0
        saturation = feature_map.saturation[lattice].astype(np.float64) / 255.0

        self._detail = det
        self._skin = skin * (det + config.skin_bias)
        self._saturation = saturation * (det + config.saturation_bias)

    @property
    def sample_count(self) -> int:
        return int(self._xs.size * self._ys.size)

    def score(self, candidate: CropCandidate) -> Score:
        """Compute the Score of one candidate."""
        if self.sample_count == 0:
            return Score()

        imp = importance_grid(candidate, self._xs, self._ys, self._config)
        skin = float(np.sum(self._skin * imp))
        detail = float(np.sum(self._detail * imp))
        saturation = float(np.sum(self._saturation * imp))

        config = self._config
        total = (
            (
                detail * config.detail_weight
                + skin * config.skin_weight
                + saturation * config.saturation_weight
            )
            / candidate.width
            / candidate.height
        )
        return Score(detail=detail, saturation=saturation, skin=skin, total=total)
