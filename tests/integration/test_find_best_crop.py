"""End-to-end properties of the crop search on real Pillow images."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from PIL import Image

from salientcrop import Analyzer, InvalidDimensionsError, find_best_crop
from salientcrop.config import AnalysisConfig

pytestmark = pytest.mark.integration


def _noise_image(width: int, height: int, seed: int) -> Image.Image:
    rng = np.random.default_rng(seed)
    return Image.fromarray(rng.integers(0, 256, (height, width, 3), dtype=np.uint8))


class TestScenarios:
    def test_textured_block_is_kept(
        self, textured_block_image: Callable[..., Image.Image]
    ) -> None:
        region = find_best_crop(textured_block_image(), 50, 50)

        assert region.x <= 40
        assert region.y <= 40
        assert region.right >= 60
        assert region.bottom >= 60
        assert region.width == region.height

    def test_uniform_image_is_center_biased(self) -> None:
        image = Image.new("RGB", (200, 200), (128, 128, 128))

        region = find_best_crop(image, 20, 20)

        assert region.center == (100.0, 100.0)
        assert region.x <= 90 and region.y <= 90
        assert region.right >= 110 and region.bottom >= 110

    def test_offset_block_pulls_the_crop(
        self, textured_block_image: Callable[..., Image.Image]
    ) -> None:
        image = textured_block_image(size=(300, 100), block_origin=(230, 40))

        region = find_best_crop(image, 100, 100)

        assert region.right >= 250
        assert region.x <= 230

    def test_skin_toned_patch_attracts_crop(self) -> None:
        image = Image.new("RGB", (300, 100), (40, 40, 40))
        image.paste((198, 145, 112), (20, 20, 80, 80))

        region = find_best_crop(image, 100, 100)

        assert region.x <= 20
        assert region.right >= 80

    def test_zero_target_is_rejected(self) -> None:
        with pytest.raises(InvalidDimensionsError):
            find_best_crop(Image.new("RGB", (10, 10)), 0, 0)


class TestPrescaledPath:
    def test_large_image_result_is_in_bounds(self) -> None:
        image = _noise_image(800, 600, seed=11)

        result = Analyzer().analyze(image, 100, 100)

        assert result.context.prescale_factor == pytest.approx(400 / 600)
        assert (result.feature_map.width, result.feature_map.height) == (533, 400)
        region = result.region
        assert region.right <= 800
        assert region.bottom <= 600
        assert abs(region.width - region.height) <= 2

    def test_prescale_disabled_equals_native_factor(self) -> None:
        image = _noise_image(450, 420, seed=5)

        disabled = find_best_crop(image, 120, 90, AnalysisConfig(prescale=False))
        native = find_best_crop(image, 120, 90, AnalysisConfig(prescale_min=1000))

        assert disabled == native

    def test_rescaled_edges_stay_within_one_analysis_pixel(self) -> None:
        image = _noise_image(640, 480, seed=3)
        result = Analyzer(AnalysisConfig(prescale_min=240)).analyze(image, 200, 200)
        p = result.context.prescale_factor
        candidate = result.candidate

        assert p == 0.5
        assert abs(result.region.x - candidate.x / p) < 1 / p
        assert abs(result.region.right - candidate.right / p) < 1 / p


class TestProperties:
    @settings(max_examples=25, deadline=None)
    @given(
        width=st.integers(min_value=1, max_value=120),
        height=st.integers(min_value=1, max_value=120),
        target_width=st.integers(min_value=0, max_value=200),
        target_height=st.integers(min_value=0, max_value=200),
        prescale_min=st.sampled_from([16.0, 50.0, 400.0]),
        seed=st.integers(min_value=0, max_value=2**16),
    )
    def test_result_is_canonical_and_inside_source(
        self,
        width: int,
        height: int,
        target_width: int,
        target_height: int,
        prescale_min: float,
        seed: int,
    ) -> None:
        image = _noise_image(width, height, seed)
        config = AnalysisConfig(prescale_min=prescale_min)

        if target_width == 0 and target_height == 0:
            with pytest.raises(InvalidDimensionsError):
                find_best_crop(image, target_width, target_height, config)
            return

        region = find_best_crop(image, target_width, target_height, config)

        assert region.x >= 0
        assert region.y >= 0
        assert region.width > 0
        assert region.height > 0
        assert region.right <= width
        assert region.bottom <= height

    @settings(max_examples=10, deadline=None)
    @given(seed=st.integers(min_value=0, max_value=2**16))
    def test_repeated_calls_are_identical(self, seed: int) -> None:
        image = _noise_image(96, 72, seed)
        analyzer = Analyzer()
        assert analyzer.find_best_crop(image, 40, 30) == analyzer.find_best_crop(
            image, 40, 30
        )
