"""Unit tests for the growth estimate."""

import pytest

from creatormetrics.growth import estimate_growth


class TestEstimateGrowth:
    def test_zero(self) -> None:
        assert estimate_growth(0) == 0.0

    def test_saturates_at_fifteen(self) -> None:
        assert estimate_growth(100) == 15.0
        assert estimate_growth(1_000_000) == 15.0

    def test_linear_below_saturation(self) -> None:
        assert estimate_growth(50) == pytest.approx(7.5)
        assert estimate_growth(1) == pytest.approx(0.15)

    def test_monotonic(self) -> None:
        values = [estimate_growth(v) for v in range(0, 250)]
        assert values == sorted(values)
        assert all(0.0 <= v <= 15.0 for v in values)
