"""Demographic risk-delta tables (percentage points, first match wins)."""
from screening.catalog.builders import band, d
from screening.models.enums import Gender
from screening.models.instrument import DemographicAdjustments

# Shared by both cognitive screens
COGNITIVE_SCREEN = DemographicAdjustments(
    age=(
        band(8, min_value=80),
        band(5, min_value=75),
        band(3, min_value=70),
        band(1, min_value=65),
        band(-2, max_value=49),
    ),
    education=(
        band(5, max_value=6),
        band(3, max_value=9),
        band(1, max_value=12),
        band(-2, min_value=16),
    ),
)

INFORMANT_INTERVIEW = DemographicAdjustments(
    age=(
        band(15, min_value=85),
        band(10, min_value=80),
        band(6, min_value=75),
        band(3, min_value=70),
        band(-5, max_value=59),
    ),
    education=(
        band(3, max_value=8),
        band(-2, min_value=16),
    ),
)

DEPRESSION_SCALE = DemographicAdjustments(
    age=(
        band(2, min_value=75),
        band(3, max_value=25),
    ),
    gender={Gender.FEMALE: d(2)},
)

SYMPTOM_SEVERITY = DemographicAdjustments(
    age=(
        band(5, min_value=70),
        band(2, min_value=60),
        band(-3, max_value=39),
    ),
    gender={Gender.MALE: d(1)},
)
