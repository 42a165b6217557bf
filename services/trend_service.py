"""
Trend calculation service for the forecasting engine.

Linear trend extraction and seasonal adjustment shared by the demand
and capability forecasters. Pure functions; none of them raise on
sparse data.
"""

from typing import Sequence

from config.forecasting import DEFAULT_SEASONAL_FACTORS, QUARTERS
from models.forecast import PerformanceTrend, TrendDirection, TrendFit
from utils.month_utils import quarter_of


def calculate_linear_trend(values: Sequence[float]) -> TrendFit:
    """
    Ordinary least-squares fit over index positions 1..n.

    Index positions rather than calendar months, so gaps in the history
    do not distort the slope.

    - n < 2: slope 0, intercept = first value (or 0), R² 0
    - constant series: R² 0 (nothing explained)
    - R² clamped to [0, 1]
    """
    n = len(values)
    if n < 2:
        return TrendFit(
            slope=0.0,
            intercept=float(values[0]) if n == 1 else 0.0,
            r_squared=0.0,
            sample_count=n,
        )

    xs = range(1, n + 1)
    sum_x = n * (n + 1) / 2
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in zip(xs, values))
    sum_x2 = n * (n + 1) * (2 * n + 1) / 6

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    ss_total = sum((y - mean_y) ** 2 for y in values)
    ss_residual = sum((y - (intercept + slope * x)) ** 2 for x, y in zip(xs, values))
    r_squared = 1 - ss_residual / ss_total if ss_total > 0 else 0.0

    return TrendFit(
        slope=slope,
        intercept=intercept,
        r_squared=min(1.0, max(0.0, r_squared)),
        sample_count=n,
    )


def calculate_seasonal_factors(monthly_data: dict[str, float]) -> dict[str, float]:
    """
    Quarter-level multipliers from historical variance.

    factor(Q) = mean of months in Q / overall mean

    Quarters with no observations fall back to the Gulf of Mexico
    defaults. Observed quarters get 1.0 when the overall mean is zero.
    Always returns exactly Q1..Q4.
    """
    buckets: dict[str, list[float]] = {q: [] for q in QUARTERS}
    for month_key, value in monthly_data.items():
        buckets[quarter_of(month_key)].append(value)

    values = list(monthly_data.values())
    overall_mean = sum(values) / len(values) if values else 0.0

    factors = {}
    for quarter in QUARTERS:
        observed = buckets[quarter]
        if not observed:
            factors[quarter] = DEFAULT_SEASONAL_FACTORS[quarter]
        elif overall_mean > 0:
            factors[quarter] = round((sum(observed) / len(observed)) / overall_mean, 4)
        else:
            factors[quarter] = 1.0
    return factors


def neutral_seasonal_factors() -> dict[str, float]:
    """Factors used when seasonal adjustment is switched off."""
    return {q: 1.0 for q in QUARTERS}


def classify_trend(slope: float, threshold: float = 0.1) -> TrendDirection:
    """
    Classify demand trend by absolute slope.

    - |slope| <= threshold: STABLE
    - otherwise INCREASING / DECREASING by sign
    """
    if abs(slope) <= threshold:
        return TrendDirection.STABLE
    return TrendDirection.INCREASING if slope > 0 else TrendDirection.DECREASING


def classify_performance(slope: float, average: float, threshold: float = 0.1) -> PerformanceTrend:
    """
    Classify vessel performance trend relative to its own average.

    A slope counts once it exceeds threshold × average capability.
    """
    if abs(slope) <= threshold * abs(average):
        return PerformanceTrend.STABLE
    return PerformanceTrend.IMPROVING if slope > 0 else PerformanceTrend.DECLINING


def calculate_growth_rate(slope: float, values: Sequence[float]) -> float:
    """Monthly growth as slope / mean; 0 with fewer than 2 points or a non-positive mean."""
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    if mean <= 0:
        return 0.0
    return round(slope / mean, 4)


def calculate_distance_factor(month: int, horizon: int, floor: float = 0.6) -> float:
    """
    Linear confidence decay over the horizon.

    Month 1 -> 1.0, month `horizon` -> floor. Single-month horizons
    stay at 1.0. Never increases with distance.
    """
    if horizon <= 1:
        return 1.0
    position = min(max(month, 1), horizon)
    return 1.0 - (1.0 - floor) * (position - 1) / (horizon - 1)
