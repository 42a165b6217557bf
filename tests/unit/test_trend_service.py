"""
Unit tests for trend and seasonality calculations.

Tests cover:
- Least-squares fit over index positions
- Sparse input (fewer than 2 points)
- Seasonal factors, defaults for empty quarters
- Trend and performance classification
- Confidence distance decay
"""

import pytest

from models.forecast import PerformanceTrend, TrendDirection
from services.trend_service import (
    calculate_distance_factor,
    calculate_growth_rate,
    calculate_linear_trend,
    calculate_seasonal_factors,
    classify_performance,
    classify_trend,
    neutral_seasonal_factors,
)


# ===================
# LINEAR TREND
# ===================

class TestLinearTrend:
    """
    OLS over x = 1..n.

    slope = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)
    intercept = (Σy - slope × Σx) / n
    """

    def test_rising_series_slope_and_intercept(self):
        """[10,12,14,16,18,20] -> slope 2, intercept 8."""
        fit = calculate_linear_trend([10, 12, 14, 16, 18, 20])

        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(8.0)
        assert fit.r_squared == pytest.approx(1.0)
        assert fit.sample_count == 6

    def test_next_index_prediction(self):
        """Month 1 ahead of a 6-month history is evaluated at x = 7: 8 + 2 × 7 = 22."""
        fit = calculate_linear_trend([10, 12, 14, 16, 18, 20])

        assert fit.predict(7) == pytest.approx(22.0)

    @pytest.mark.parametrize("values", [[], [7.5]])
    def test_fewer_than_two_points(self, values):
        """n < 2: slope 0, R² 0, no exception."""
        fit = calculate_linear_trend(values)

        assert fit.slope == 0.0
        assert fit.r_squared == 0.0

    def test_single_point_intercept_is_value(self):
        assert calculate_linear_trend([7.5]).intercept == 7.5

    def test_empty_intercept_is_zero(self):
        assert calculate_linear_trend([]).intercept == 0.0

    def test_constant_series_has_zero_r_squared(self):
        fit = calculate_linear_trend([5, 5, 5, 5])

        assert fit.slope == pytest.approx(0.0)
        assert fit.intercept == pytest.approx(5.0)
        assert fit.r_squared == 0.0

    def test_noisy_series_r_squared_in_range(self):
        fit = calculate_linear_trend([3, 9, 1, 12, 4, 8, 2])

        assert 0.0 <= fit.r_squared <= 1.0


# ===================
# SEASONALITY
# ===================

class TestSeasonalFactors:
    """factor(Q) = mean(Q) / overall mean; defaults where a quarter has no data."""

    def test_always_four_quarters(self):
        factors = calculate_seasonal_factors({"2025-02": 10.0})

        assert list(factors) == ["Q1", "Q2", "Q3", "Q4"]

    def test_empty_history_uses_defaults(self):
        factors = calculate_seasonal_factors({})

        assert factors == {"Q1": 1.10, "Q2": 1.00, "Q3": 0.90, "Q4": 1.05}

    def test_quarter_relative_to_overall_mean(self):
        """Q1 mean 30, Q2 mean 10, overall mean 20 -> 1.5 and 0.5."""
        data = {
            "2025-01": 30.0, "2025-02": 30.0, "2025-03": 30.0,
            "2025-04": 10.0, "2025-05": 10.0, "2025-06": 10.0,
        }

        factors = calculate_seasonal_factors(data)

        assert factors["Q1"] == pytest.approx(1.5)
        assert factors["Q2"] == pytest.approx(0.5)
        # No Q3/Q4 observations
        assert factors["Q3"] == 0.90
        assert factors["Q4"] == 1.05

    def test_zero_mean_gives_neutral_observed_quarters(self):
        factors = calculate_seasonal_factors({"2025-07": 0.0, "2025-08": 0.0})

        assert factors["Q3"] == 1.0
        assert factors["Q1"] == 1.10

    def test_neutral_factors(self):
        assert neutral_seasonal_factors() == {"Q1": 1.0, "Q2": 1.0, "Q3": 1.0, "Q4": 1.0}


# ===================
# CLASSIFICATION
# ===================

class TestClassification:

    @pytest.mark.parametrize("slope,expected", [
        (0.5, TrendDirection.INCREASING),
        (-0.5, TrendDirection.DECREASING),
        (0.1, TrendDirection.STABLE),
        (-0.05, TrendDirection.STABLE),
    ])
    def test_classify_trend_absolute_threshold(self, slope, expected):
        assert classify_trend(slope) == expected

    def test_performance_threshold_is_relative(self):
        """Slope 0.5 is stable for an average of 10 but improving for an average of 2."""
        assert classify_performance(0.5, 10.0) == PerformanceTrend.STABLE
        assert classify_performance(0.5, 2.0) == PerformanceTrend.IMPROVING
        assert classify_performance(-0.5, 2.0) == PerformanceTrend.DECLINING

    def test_growth_rate(self):
        """slope 2 / mean 15 = 0.1333."""
        assert calculate_growth_rate(2.0, [10, 12, 14, 16, 18, 20]) == pytest.approx(0.1333)

    def test_growth_rate_sparse(self):
        assert calculate_growth_rate(2.0, [10]) == 0.0
        assert calculate_growth_rate(2.0, [0, 0]) == 0.0


# ===================
# DISTANCE DECAY
# ===================

class TestDistanceFactor:
    """1.0 at month 1, floor (0.6) at the last month, linear in between."""

    def test_endpoints(self):
        assert calculate_distance_factor(1, 12) == pytest.approx(1.0)
        assert calculate_distance_factor(12, 12) == pytest.approx(0.6)

    def test_single_month_horizon(self):
        assert calculate_distance_factor(1, 1) == 1.0

    def test_never_increases(self):
        factors = [calculate_distance_factor(i, 18) for i in range(1, 19)]

        assert all(a >= b for a, b in zip(factors, factors[1:]))
