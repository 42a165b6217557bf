"""
Shared test fixtures.

Builders live in tests/factories.py; fixtures here wire them into
ready-made inputs for the forecast services.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from datetime import date
from unittest.mock import MagicMock

from tests.factories import (
    CapabilitySeriesFactory,
    DemandSeriesFactory,
    ScenarioFactory,
    month_series,
)


# ===================
# LOGGER
# ===================

@pytest.fixture
def mock_logger() -> MagicMock:
    """Injected logger; lets tests assert on emitted events."""
    return MagicMock()


# ===================
# HISTORY
# ===================

@pytest.fixture
def linear_demand_history():
    """Six months rising by 2 per month: 10, 12, ... 20."""
    return DemandSeriesFactory.create(
        location="Mad Dog",
        monthly_deliveries=month_series("2025-01", [10, 12, 14, 16, 18, 20]),
    )


@pytest.fixture
def steady_fleet_history():
    """Three vessels each completing 10 deliveries per month for a year."""
    return CapabilitySeriesFactory.create_batch(3, values=[10.0] * 12)


@pytest.fixture
def analysis_date() -> date:
    return date(2025, 12, 15)


# ===================
# SCENARIOS
# ===================

@pytest.fixture
def flat_base_scenario():
    """Base case without growth, so totals equal the raw forecasts."""
    return ScenarioFactory.create(id="base_case", name="Base Case", time_horizon=12)
