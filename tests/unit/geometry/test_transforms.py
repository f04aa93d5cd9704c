"""Unit tests for analysis <-> source coordinate transforms."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from salientcrop.geometry import (
    Region,
    Size,
    chop,
    region_analysis_to_source,
    size_source_to_analysis,
)


class TestChop:
    """Tests for truncation toward zero."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.7, 2.0), (2.0, 2.0), (0.0, 0.0), (-2.7, -2.0), (-0.5, 0.0)],
    )
    def test_chop(self, value: float, expected: float) -> None:
        assert chop(value) == expected


class TestSizeSourceToAnalysis:
    def test_scales_and_truncates(self) -> None:
        assert size_source_to_analysis(Size(width=1000, height=750), 0.4) == Size(
            width=400, height=300
        )

    def test_keeps_at_least_one_pixel(self) -> None:
        assert size_source_to_analysis(Size(width=10, height=1), 0.01) == Size(
            width=1, height=1
        )

    def test_rejects_non_positive_factor(self) -> None:
        with pytest.raises(ValueError, match="prescale_factor must be positive"):
            size_source_to_analysis(Size(width=10, height=10), 0.0)


class TestRegionAnalysisToSource:
    def test_identity_factor_returns_same_region(self) -> None:
        region = Region(x=8, y=16, width=100, height=50)
        assert region_analysis_to_source(region, 1.0) == region

    def test_divides_edges(self) -> None:
        region = Region(x=8, y=16, width=100, height=50)
        assert region_analysis_to_source(region, 0.5) == Region(
            x=16, y=32, width=200, height=100
        )

    def test_edges_truncate_independently(self) -> None:
        """Right/bottom are rescaled as edges, not via width/height."""
        region = Region(x=1, y=1, width=1, height=1)
        # edges: 1/0.3=3.33 -> 3, 2/0.3=6.67 -> 6
        assert region_analysis_to_source(region, 0.3) == Region(
            x=3, y=3, width=3, height=3
        )

    def test_rejects_non_positive_factor(self) -> None:
        with pytest.raises(ValueError, match="prescale_factor must be positive"):
            region_analysis_to_source(Region(x=0, y=0, width=1, height=1), -1.0)

    @given(
        x=st.integers(min_value=0, max_value=500),
        y=st.integers(min_value=0, max_value=500),
        width=st.integers(min_value=1, max_value=500),
        height=st.integers(min_value=1, max_value=500),
        factor=st.floats(min_value=0.05, max_value=1.0),
    )
    def test_result_is_canonical_and_not_smaller(
        self, x: int, y: int, width: int, height: int, factor: float
    ) -> None:
        region = Region(x=x, y=y, width=width, height=height)
        mapped = region_analysis_to_source(region, factor)
        assert mapped.x <= mapped.right
        assert mapped.y <= mapped.bottom
        assert mapped.width >= width
        assert mapped.height >= height
