"""
Forecasting constants.

Gulf of Mexico planning defaults for demand seasonality, scenario growth
assumptions and the core fleet day-rate structure.
"""

from decimal import Decimal

# =============================================================================
# SEASONALITY
# =============================================================================

QUARTERS = ("Q1", "Q2", "Q3", "Q4")

# Fallback multipliers when a quarter has no history
DEFAULT_SEASONAL_FACTORS = {
    "Q1": 1.10,  # Winter weather windows
    "Q2": 1.00,
    "Q3": 0.90,  # Hurricane season
    "Q4": 1.05,
}

# =============================================================================
# CONFIDENCE
# =============================================================================

MIN_CONFIDENCE_THRESHOLD = 0.6
HIGH_CONFIDENCE_THRESHOLD = 0.8

# Release recommendations rest on a thinner signal than acquisitions
RELEASE_CONFIDENCE_FACTOR = 0.8

# =============================================================================
# UTILIZATION BAND
# =============================================================================

CORE_FLEET_TARGET_UTILIZATION = 0.75
CORE_FLEET_MAX_UTILIZATION = 0.90
CORE_FLEET_MIN_UTILIZATION = 0.50

# =============================================================================
# CORE FLEET
# =============================================================================

CURRENT_FLEET_COUNT = 6
MAX_FLEX_UP_CAPACITY = 4
CONTRACTUAL_NOTICE_DAYS = 30

DAYS_PER_CHARTER_MONTH = 30

BASE_DAY_RATE_USD = Decimal("22000")

# Month number -> surcharge fraction
SEASONAL_DAY_RATE_SURCHARGE = {
    "06": 0.15, "07": 0.20, "08": 0.15,  # Hurricane season
    "01": 0.10, "02": 0.05, "12": 0.05,  # Winter weather
}

# =============================================================================
# SCENARIOS
# =============================================================================

BASE_SCENARIO_ID = "base_case"

DEFAULT_SCENARIO_DEFINITIONS = [
    {
        "id": "base_case",
        "name": "Base Case",
        "scenario_type": "base_case",
        "description": "Conservative forecast based on historical trends with no major changes",
        "demand_growth_rate": 0.02,
        "capability_growth_rate": 0.01,
        "confidence_threshold": MIN_CONFIDENCE_THRESHOLD,
        "assumptions": [
            "Historical trends continue",
            "No major operational changes",
            "Seasonal patterns remain consistent",
            "Current fleet performance maintained",
        ],
    },
    {
        "id": "optimistic",
        "name": "Optimistic Growth",
        "scenario_type": "optimistic",
        "description": "Higher demand growth scenario with improved operational efficiency",
        "demand_growth_rate": 0.05,
        "capability_growth_rate": 0.03,
        "confidence_threshold": MIN_CONFIDENCE_THRESHOLD,
        "assumptions": [
            "Accelerated drilling programs",
            "Improved vessel efficiency",
            "Favorable market conditions",
        ],
    },
    {
        "id": "pessimistic",
        "name": "Conservative Planning",
        "scenario_type": "pessimistic",
        "description": "Lower growth scenario accounting for potential operational challenges",
        "demand_growth_rate": -0.01,
        "capability_growth_rate": 0.005,
        "confidence_threshold": HIGH_CONFIDENCE_THRESHOLD,
        "assumptions": [
            "Reduced drilling activity",
            "Increased maintenance requirements",
            "Weather-related delays",
        ],
    },
]

# Forecast months at which a standing review checkpoint is proposed
REVIEW_CHECKPOINT_MONTHS = (3, 6, 9, 12, 15, 18)

# Month-over-month requirement change that warrants a decision point
DECISION_POINT_CHANGE_THRESHOLD = 2

# Relative perturbation used for sensitivity analysis
SENSITIVITY_STEP = 0.10
