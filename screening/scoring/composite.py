"""Composite Risk Calculator.

Formula
-------
  overall = Σ risk_i × w_i / Σ w_i      (over the results supplied)

  w_i = instrument weight (moca 0.25, mmse 0.25, ad8 0.20,
        parkinsons 0.15, phq9 0.15), or the fallback weight for any
        instrument missing from the table

  category = low       if overall ≤ 15
           = moderate  if overall ≤ 45
           = high      otherwise

Dominant factors list the instruments whose own category is high.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional, Sequence

import structlog

from screening.models.enums import (
    COMPOSITE_WEIGHTS,
    FALLBACK_INSTRUMENT_WEIGHT,
    InstrumentId,
    RiskCategory,
)
from screening.scoring.result import AssessmentResult
from screening.scoring.utils import to_decimal, weighted_mean

logger = structlog.get_logger(__name__)

COMPOSITE_LOW_CUT = Decimal(15)
COMPOSITE_MODERATE_CUT = Decimal(45)

_NARRATIVE_BY_CATEGORY: dict[RiskCategory, tuple[str, ...]] = {
    RiskCategory.LOW: (
        "Maintain a healthy lifestyle",
        "Regular exercise and a balanced diet",
        "Cognitively stimulating activities",
    ),
    RiskCategory.MODERATE: (
        "Primary care consultation",
        "Neuropsychological evaluation recommended",
        "Regular monitoring every 6 months",
        "Intensified lifestyle interventions",
    ),
    RiskCategory.HIGH: (
        "Urgent specialist consultation",
        "Complete neurological evaluation",
        "Neuroimaging if indicated",
        "Close medical follow-up",
    ),
}
MENTAL_HEALTH_REFERRAL = "Mental health evaluation recommended"
MOVEMENT_DISORDER_REFERRAL = "Consultation with a movement-disorder neurologist"


@dataclass(frozen=True)
class CompositeRisk:
    """Overall risk summary across several instrument results."""

    overall_risk: Decimal
    category: RiskCategory
    dominant_factors: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "overall_risk": float(self.overall_risk),
            "category": self.category.value,
            "dominant_factors": list(self.dominant_factors),
            "recommendations": list(self.recommendations),
        }


def composite_category(overall_risk: Decimal) -> RiskCategory:
    if overall_risk <= COMPOSITE_LOW_CUT:
        return RiskCategory.LOW
    if overall_risk <= COMPOSITE_MODERATE_CUT:
        return RiskCategory.MODERATE
    return RiskCategory.HIGH


class CompositeRiskCalculator:
    """Combine per-instrument risk percentages into one summary.

    Parameters
    ----------
    weights:
        Per-instrument weights (the default table if omitted).
    fallback_weight:
        Weight for instruments missing from ``weights``.
    """

    def __init__(
        self,
        weights: Optional[Mapping[InstrumentId, float]] = None,
        fallback_weight: float = FALLBACK_INSTRUMENT_WEIGHT,
    ) -> None:
        source = COMPOSITE_WEIGHTS if weights is None else weights
        self.weights = {InstrumentId(k): Decimal(str(v)) for k, v in source.items()}
        self.fallback_weight = Decimal(str(fallback_weight))
        logger.info(
            "composite_calculator_initialized",
            weights={k.value: float(v) for k, v in self.weights.items()},
            fallback_weight=float(self.fallback_weight),
        )

    def weight_for(self, instrument: InstrumentId) -> Decimal:
        return self.weights.get(instrument, self.fallback_weight)

    def narrative(
        self,
        category: RiskCategory,
        results: Sequence[AssessmentResult],
    ) -> list[str]:
        lines = list(_NARRATIVE_BY_CATEGORY[category])
        if any(r.instrument == InstrumentId.PHQ9 and r.category != RiskCategory.LOW
               for r in results):
            lines.append(MENTAL_HEALTH_REFERRAL)
        if any(r.instrument == InstrumentId.PARKINSONS and r.category == RiskCategory.HIGH
               for r in results):
            lines.append(MOVEMENT_DISORDER_REFERRAL)
        return lines

    def combine(self, results: Sequence[AssessmentResult]) -> CompositeRisk:
        """Weighted combination of the results' risk percentages.

        Args:
            results: Completed results for one person, any instrument mix.

        Returns:
            CompositeRisk; ``0`` / low with empty lists when no results are given.
        """
        if not results:
            return CompositeRisk(overall_risk=Decimal("0.00"), category=RiskCategory.LOW)

        values = [r.risk_percentage for r in results]
        weights = [self.weight_for(r.instrument) for r in results]
        overall = to_decimal(weighted_mean(values, weights), 2)
        category = composite_category(overall)

        dominant = [
            f"{r.instrument.value.upper()}: {to_decimal(r.risk_percentage, 2)}%"
            for r in results
            if r.category == RiskCategory.HIGH
        ]

        composite = CompositeRisk(
            overall_risk=overall,
            category=category,
            dominant_factors=tuple(dominant),
            recommendations=tuple(self.narrative(category, results)),
        )
        logger.info(
            "composite_risk_calculated",
            instruments=[r.instrument.value for r in results],
            overall_risk=float(overall),
            category=category.value,
        )
        return composite
