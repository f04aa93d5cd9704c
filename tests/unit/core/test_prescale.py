"""Tests for salientcrop.core.prescale module."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from PIL import Image

from salientcrop.config import AnalysisConfig
from salientcrop.core.candidates import CropCandidate
from salientcrop.core.exceptions import InvalidDimensionsError
from salientcrop.core.prescale import PillowResampler, PrescaleController
from salientcrop.geometry import Region, Size


@pytest.fixture
def controller(analysis_config: AnalysisConfig) -> PrescaleController:
    return PrescaleController(analysis_config)


class TestPlan:
    def test_both_zero_is_rejected(self, controller: PrescaleController) -> None:
        with pytest.raises(InvalidDimensionsError, match="nonzero target") as exc_info:
            controller.plan(Size(width=100, height=100), 0, 0)
        assert exc_info.value.image_size == (100, 100)
        assert exc_info.value.target_size == (0, 0)

    @pytest.mark.parametrize(("width", "height"), [(-1, 10), (10, -1), (-5, 0)])
    def test_negative_is_rejected(
        self, controller: PrescaleController, width: int, height: int
    ) -> None:
        with pytest.raises(InvalidDimensionsError, match="must not be negative"):
            controller.plan(Size(width=100, height=100), width, height)

    def test_large_image_is_prescaled(self, controller: PrescaleController) -> None:
        context = controller.plan(Size(width=1600, height=1200), 400, 300)

        assert context.scale == 4.0
        assert context.prescale_factor == pytest.approx(1 / 3)
        assert context.analysis_size == Size(width=533, height=400)
        assert context.crop_width == 533.0
        assert context.crop_height == 400.0
        assert context.min_scale == 0.9

    def test_small_image_is_analysed_natively(
        self, controller: PrescaleController
    ) -> None:
        context = controller.plan(Size(width=200, height=200), 20, 20)

        assert context.prescale_factor == 1.0
        assert context.analysis_size == Size(width=200, height=200)
        assert context.scale == 10.0
        assert (context.crop_width, context.crop_height) == (200.0, 200.0)
        assert context.min_scale == 0.9

    def test_unconstrained_width_stays_zero(self, controller: PrescaleController) -> None:
        context = controller.plan(Size(width=1000, height=500), 0, 250)

        assert context.scale == 2.0
        assert context.prescale_factor == pytest.approx(0.8)
        assert context.crop_width == 0.0
        assert context.crop_height == 400.0

    def test_target_larger_than_image_pins_min_scale(
        self, controller: PrescaleController
    ) -> None:
        context = controller.plan(Size(width=100, height=100), 200, 200)

        assert context.scale == 0.5
        assert context.min_scale == 1.0
        assert (context.crop_width, context.crop_height) == (100.0, 100.0)

    def test_min_scale_follows_target_ratio(self, controller: PrescaleController) -> None:
        # scale 100/95 -> 1/scale = 0.95, above the configured 0.9
        context = controller.plan(Size(width=100, height=100), 95, 95)
        assert context.min_scale == pytest.approx(0.95)

    def test_prescale_can_be_disabled(self) -> None:
        controller = PrescaleController(AnalysisConfig(prescale=False))
        context = controller.plan(Size(width=4000, height=3000), 100, 100)

        assert context.prescale_factor == 1.0
        assert context.analysis_size == Size(width=4000, height=3000)
        assert context.crop_width == 3000.0

    def test_prescale_min_is_configurable(self) -> None:
        controller = PrescaleController(AnalysisConfig(prescale_min=100))
        assert controller.prescale_factor(Size(width=1000, height=500)) == 0.2


class TestPrescale:
    def test_skips_resampler_at_native_size(self, controller: PrescaleController) -> None:
        image = Image.new("RGB", (200, 150))
        context = controller.plan(Size(width=200, height=150), 50, 50)
        resampler = MagicMock()

        result = controller.prescale(
            image, context, resampler, Image.Resampling.BICUBIC
        )

        assert result is image
        resampler.resize.assert_not_called()

    def test_calls_resampler_with_analysis_width(
        self, controller: PrescaleController
    ) -> None:
        image = Image.new("RGB", (800, 500))
        context = controller.plan(Size(width=800, height=500), 100, 100)
        resampler = MagicMock()
        resampler.resize.return_value = Image.new("RGB", (640, 400))

        result = controller.prescale(image, context, resampler, Image.Resampling.BOX)

        resampler.resize.assert_called_once_with(image, 640, Image.Resampling.BOX)
        assert result.size == (640, 400)


class TestPillowResampler:
    def test_height_follows_aspect_ratio(self) -> None:
        image = Image.new("RGB", (160, 120))
        resized = PillowResampler().resize(image, 53, Image.Resampling.BILINEAR)
        # 120 * 53 / 160 = 39.75
        assert resized.size == (53, 40)

    def test_same_width_returns_input(self) -> None:
        image = Image.new("RGB", (10, 10))
        assert PillowResampler().resize(image, 10, Image.Resampling.BICUBIC) is image

    def test_never_collapses_height(self) -> None:
        image = Image.new("RGB", (1000, 2))
        resized = PillowResampler().resize(image, 10, Image.Resampling.NEAREST)
        assert resized.size == (10, 1)

    def test_rejects_non_positive_width(self) -> None:
        with pytest.raises(ValueError, match="target_width must be positive"):
            PillowResampler().resize(Image.new("RGB", (4, 4)), 0, Image.Resampling.BOX)


class TestRescale:
    def test_native_size_is_identity(self, controller: PrescaleController) -> None:
        context = controller.plan(Size(width=200, height=200), 20, 20)
        candidate = CropCandidate(x=8, y=16, width=180, height=180)

        assert controller.rescale(candidate, context) == Region(
            x=8, y=16, width=180, height=180
        )

    def test_divides_by_prescale_factor(self) -> None:
        controller = PrescaleController(AnalysisConfig(prescale_min=100))
        context = controller.plan(Size(width=200, height=200), 50, 50)
        assert context.prescale_factor == 0.5

        region = controller.rescale(
            CropCandidate(x=8, y=8, width=90, height=90), context
        )

        assert region == Region(x=16, y=16, width=180, height=180)

    def test_overhang_is_clamped_to_source(self) -> None:
        controller = PrescaleController(AnalysisConfig(prescale_min=50))
        context = controller.plan(Size(width=100, height=99), 10, 10)
        assert context.prescale_factor == pytest.approx(50 / 99)

        region = controller.rescale(
            CropCandidate(x=0, y=0, width=50, height=50), context
        )

        assert region.right <= 100
        assert region.bottom <= 99
        assert region.x == 0
        assert region.y == 0


class TestFit:
    def test_trims_crop_to_actual_analysis_size(
        self, controller: PrescaleController
    ) -> None:
        context = controller.plan(Size(width=600, height=500), 600, 500)
        assert (context.crop_width, context.crop_height) == (480.0, 400.0)

        fitted = controller.fit(context, Size(width=480, height=399))

        assert fitted.analysis_size == Size(width=480, height=399)
        assert (fitted.crop_width, fitted.crop_height) == (480.0, 399.0)
        assert fitted.prescale_factor == context.prescale_factor

    def test_unconstrained_axis_is_left_alone(
        self, controller: PrescaleController
    ) -> None:
        context = controller.plan(Size(width=600, height=500), 0, 500)
        fitted = controller.fit(context, Size(width=480, height=398))
        assert fitted.crop_width == 0.0
        assert fitted.crop_height == 398.0

    def test_matching_size_changes_nothing(self, controller: PrescaleController) -> None:
        context = controller.plan(Size(width=200, height=100), 50, 50)
        assert controller.fit(context, context.analysis_size) == context
