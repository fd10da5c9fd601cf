"""Pydantic models for the screening engine."""

# Enums
from screening.models.enums import (
    COGNITIVE_INSTRUMENTS,
    COMPOSITE_WEIGHTS,
    FALLBACK_INSTRUMENT_WEIGHT,
    PRIORITY_RANK,
    FactorImpact,
    Gender,
    InstrumentId,
    LifestyleCategory,
    Priority,
    RecommendationCategory,
    RecommendationType,
    RiskAlgorithm,
    RiskCategory,
    ScoringRuleType,
)

# Instrument definitions
from screening.models.instrument import (
    CalculatedRule,
    CustomRule,
    DemographicAdjustments,
    DemographicBand,
    DirectRule,
    InstrumentDefinition,
    LookupRule,
    Question,
    QuestionOption,
    RiskBreakpoint,
    RiskMapping,
    RiskRange,
    ScoreAdjustment,
    ScoringConfig,
    ScoringRule,
    Section,
    SectionScoring,
)

# Inputs
from screening.models.response import Response, ScoringContext, UserProfile

# Recommendations
from screening.models.recommendation import Recommendation, Resource

__all__ = [
    "COGNITIVE_INSTRUMENTS",
    "COMPOSITE_WEIGHTS",
    "FALLBACK_INSTRUMENT_WEIGHT",
    "PRIORITY_RANK",
    "FactorImpact",
    "Gender",
    "InstrumentId",
    "LifestyleCategory",
    "Priority",
    "RecommendationCategory",
    "RecommendationType",
    "RiskAlgorithm",
    "RiskCategory",
    "ScoringRuleType",
    "CalculatedRule",
    "CustomRule",
    "DemographicAdjustments",
    "DemographicBand",
    "DirectRule",
    "InstrumentDefinition",
    "LookupRule",
    "Question",
    "QuestionOption",
    "RiskBreakpoint",
    "RiskMapping",
    "RiskRange",
    "ScoreAdjustment",
    "ScoringConfig",
    "ScoringRule",
    "Section",
    "SectionScoring",
    "Response",
    "ScoringContext",
    "UserProfile",
    "Recommendation",
    "Resource",
]
