"""Enumeration types for the screening engine."""
from enum import Enum


class InstrumentId(str, Enum):
    """Supported screening instruments."""
    MOCA = "moca"  # Montreal Cognitive Assessment
    PHQ9 = "phq9"  # Patient Health Questionnaire-9
    MMSE = "mmse"  # Mini-Mental State Examination
    AD8 = "ad8"  # AD8 informant interview
    PARKINSONS = "parkinsons"  # Parkinson's symptom-severity screen


class RiskCategory(str, Enum):
    """Coarse risk buckets derived from a risk percentage."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Priority(str, Enum):
    """Recommendation priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class RecommendationType(str, Enum):
    """What kind of action a recommendation asks for."""
    MEDICAL = "medical"
    LIFESTYLE = "lifestyle"
    MONITORING = "monitoring"
    EDUCATIONAL = "educational"


class RecommendationCategory(str, Enum):
    """Time horizon of a recommendation."""
    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class LifestyleCategory(str, Enum):
    """Groups of lifestyle recommendation templates."""
    EXERCISE = "exercise"
    NUTRITION = "nutrition"
    COGNITIVE = "cognitive"
    SLEEP = "sleep"
    SOCIAL = "social"


class ScoringRuleType(str, Enum):
    """Variants of a question scoring rule."""
    DIRECT = "direct"
    LOOKUP = "lookup"
    CALCULATED = "calculated"
    CUSTOM = "custom"


class RiskAlgorithm(str, Enum):
    """Algorithms for mapping a score onto a risk percentage."""
    THRESHOLD = "threshold"
    WEIGHTED_THRESHOLD = "weighted_threshold"
    LINEAR = "linear"
    CUSTOM = "custom"


class FactorImpact(str, Enum):
    """Direction in which a rationale factor moves risk."""
    POSITIVE = "positive"  # lowers risk
    NEGATIVE = "negative"  # raises risk
    NEUTRAL = "neutral"


class Gender(str, Enum):
    """Self-reported gender used by demographic adjustments."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


# Instruments that measure cognition directly or via an informant
COGNITIVE_INSTRUMENTS: frozenset[InstrumentId] = frozenset({
    InstrumentId.MOCA,
    InstrumentId.MMSE,
    InstrumentId.AD8,
})

# Default weights for the composite risk (need not sum to 1.0;
# the composite normalizes by the weights actually present)
COMPOSITE_WEIGHTS: dict[InstrumentId, float] = {
    InstrumentId.MOCA: 0.25,
    InstrumentId.MMSE: 0.25,
    InstrumentId.AD8: 0.20,
    InstrumentId.PARKINSONS: 0.15,
    InstrumentId.PHQ9: 0.15,
}

# Weight for any instrument missing from an injected weight table
FALLBACK_INSTRUMENT_WEIGHT: float = 0.1

# Sort rank per priority (higher sorts first)
PRIORITY_RANK: dict[Priority, int] = {
    Priority.EMERGENCY: 5,
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}
