"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator

import numpy as np
import pytest
from PIL import Image

from salientcrop.config import AnalysisConfig, Settings
from salientcrop.utils.logging import clear_correlation_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def analysis_config() -> AnalysisConfig:
    """Default algorithm tunables."""
    return AnalysisConfig()


@pytest.fixture
def textured_block_image() -> Callable[..., Image.Image]:
    """Factory for a uniform gray canvas with one high-contrast textured block.

    The block is a 1px checkerboard of black and white, which lights up the
    Laplacian edge detector everywhere inside it.
    """

    def _make(
        size: tuple[int, int] = (100, 100),
        block_origin: tuple[int, int] = (40, 40),
        block_size: int = 20,
    ) -> Image.Image:
        width, height = size
        pixels = np.full((height, width, 3), 128, dtype=np.uint8)
        bx, by = block_origin
        yy, xx = np.mgrid[0:block_size, 0:block_size]
        checker = np.where((xx + yy) % 2 == 0, 255, 0).astype(np.uint8)
        pixels[by : by + block_size, bx : bx + block_size] = checker[:, :, np.newaxis]
        return Image.fromarray(pixels)

    return _make
