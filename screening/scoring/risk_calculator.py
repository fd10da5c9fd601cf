"""Risk Calculator: adjusted score → risk percentage, category and factors.

Layer A (base mapping)
----------------------
  threshold / weighted_threshold:  piecewise-linear interpolation over the
                                   instrument's ordered breakpoints
  linear:                          straight line between first and last
                                   breakpoint
  custom:                          named risk strategy

  base category = category of the first risk range whose upper bound
                  is ≥ score

Layer B (demographics)
----------------------
  risk = clamp(base + Δage + Δeducation + Δgender, 0, 100)

  category = low       if risk ≤ low_cut
           = moderate  if risk ≤ moderate_cut
           = high      otherwise

Each applied delta and each instrument-specific rationale is recorded as
a RiskFactor for explainability.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Mapping, Optional, Union

import structlog

from screening.catalog.registry import InstrumentCatalog
from screening.exceptions import UnknownStrategy
from screening.models.enums import (
    FactorImpact,
    Gender,
    InstrumentId,
    RiskAlgorithm,
    RiskCategory,
)
from screening.models.instrument import DemographicBand, InstrumentDefinition, RiskMapping
from screening.models.response import ScoringContext, UserProfile
from screening.scoring.confidence import ConfidenceCalculator, ConfidenceInterval
from screening.scoring.utils import clamp, interpolate, to_decimal

logger = structlog.get_logger(__name__)

RiskStrategy = Callable[[InstrumentDefinition, Decimal], Decimal]


@dataclass(frozen=True)
class RiskFactor:
    """Named contribution to a risk estimate."""

    label: str
    impact: FactorImpact
    weight: Decimal
    description: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "impact": self.impact.value,
            "weight": float(self.weight),
            "description": self.description,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """Risk estimate for one instrument result."""

    instrument: InstrumentId
    raw_score: Decimal
    adjusted_score: Decimal
    base_risk_percentage: Decimal
    base_category: RiskCategory
    risk_percentage: Decimal
    category: RiskCategory
    confidence_interval: ConfidenceInterval
    factors: tuple[RiskFactor, ...]
    algorithm: RiskAlgorithm
    timestamp: datetime

    @property
    def negative_factor_count(self) -> int:
        return sum(1 for f in self.factors if f.impact == FactorImpact.NEGATIVE)

    def to_dict(self) -> dict:
        return {
            "instrument": self.instrument.value,
            "raw_score": float(self.raw_score),
            "adjusted_score": float(self.adjusted_score),
            "base_risk_percentage": float(self.base_risk_percentage),
            "base_category": self.base_category.value,
            "risk_percentage": float(self.risk_percentage),
            "category": self.category.value,
            "ci_lower": float(self.confidence_interval.lower),
            "ci_upper": float(self.confidence_interval.upper),
            "factors": [f.to_dict() for f in self.factors],
            "algorithm": self.algorithm.value,
            "timestamp": self.timestamp.isoformat(),
        }


# ── Instrument rationale factors ───────────────────────────────────────────
# (label, predicate(score, profile), weight, description)

_Predicate = Callable[[Decimal, UserProfile], bool]
_FactorRule = tuple[str, _Predicate, str, str]

_FACTOR_RULES: dict[InstrumentId, tuple[_FactorRule, ...]] = {
    InstrumentId.MOCA: (
        ("advanced_age", lambda s, p: p.age > 65, "0.2",
         "Age over 65 raises the likelihood of cognitive decline"),
        ("limited_education", lambda s, p: p.years_of_education <= 12, "0.15",
         "Twelve years of education or fewer"),
        ("below_normal_score", lambda s, p: s < 26, "0.4",
         "Score below the normal cut-off of 26"),
    ),
    InstrumentId.PHQ9: (
        ("significant_symptoms", lambda s, p: s > 14, "0.5",
         "Moderately severe or severe depressive symptoms"),
        ("young_adult", lambda s, p: p.age < 30, "0.1",
         "Age under 30"),
    ),
    InstrumentId.MMSE: (
        ("very_advanced_age", lambda s, p: p.age > 75, "0.25",
         "Age over 75"),
        ("advanced_age", lambda s, p: 65 < p.age <= 75, "0.15",
         "Age between 66 and 75"),
        ("below_normal_score", lambda s, p: s < 24, "0.5",
         "Score below the normal cut-off of 24"),
        ("severe_impairment_score", lambda s, p: s < 12, "0.7",
         "Score compatible with severe impairment"),
    ),
    InstrumentId.AD8: (
        ("informant_reported_change", lambda s, p: s >= 2, "0.4",
         "Two or more changes reported by the informant"),
        ("multiple_domains_affected", lambda s, p: s >= 4, "0.6",
         "Four or more changes reported by the informant"),
        ("advanced_age", lambda s, p: p.age > 70, "0.2",
         "Age over 70"),
    ),
    InstrumentId.PARKINSONS: (
        ("severe_symptoms", lambda s, p: s > 18, "0.6",
         "Symptom burden in the high band"),
        ("moderate_symptoms", lambda s, p: 8 < s <= 18, "0.3",
         "Symptom burden in the moderate band"),
        ("age_over_60", lambda s, p: p.age > 60, "0.15",
         "Age over 60"),
        ("male_sex", lambda s, p: p.gender == Gender.MALE, "0.05",
         "Higher prevalence in men"),
    ),
}


def _first_band(bands: tuple[DemographicBand, ...], value: int) -> Optional[DemographicBand]:
    for band in bands:
        if band.matches(value):
            return band
    return None


def categorize(mapping: RiskMapping, risk_percentage: Decimal) -> RiskCategory:
    """Category from the instrument's low / moderate cut points."""
    if risk_percentage <= mapping.low_cut:
        return RiskCategory.LOW
    if risk_percentage <= mapping.moderate_cut:
        return RiskCategory.MODERATE
    return RiskCategory.HIGH


class RiskCalculator:
    """Two-layer risk estimation.

    Parameters
    ----------
    catalog:
        Instrument catalog providing risk mappings and delta tables.
    confidence:
        Confidence-interval calculator (a default one if omitted).
    risk_strategies:
        Named strategies for instruments using the ``custom`` algorithm.
    """

    def __init__(
        self,
        catalog: InstrumentCatalog,
        confidence: Optional[ConfidenceCalculator] = None,
        risk_strategies: Optional[Mapping[str, RiskStrategy]] = None,
    ) -> None:
        self.catalog = catalog
        self.confidence = confidence if confidence is not None else ConfidenceCalculator()
        self.risk_strategies = dict(risk_strategies or {})
        self._algorithms: dict[RiskAlgorithm, Callable[[InstrumentDefinition, Decimal], Decimal]] = {
            RiskAlgorithm.THRESHOLD: self._interpolated,
            RiskAlgorithm.WEIGHTED_THRESHOLD: self._interpolated,
            RiskAlgorithm.LINEAR: self._linear,
            RiskAlgorithm.CUSTOM: self._custom,
        }
        logger.info("risk_calculator_initialized",
                    risk_strategies=sorted(self.risk_strategies))

    # ── Layer A ─────────────────────────────────────────────────────────────

    @staticmethod
    def _points(definition: InstrumentDefinition) -> list[tuple[Decimal, Decimal]]:
        return [(bp.score, bp.risk) for bp in definition.risk_mapping.breakpoints]

    def _interpolated(self, definition: InstrumentDefinition, score: Decimal) -> Decimal:
        return interpolate(self._points(definition), score)

    def _linear(self, definition: InstrumentDefinition, score: Decimal) -> Decimal:
        points = self._points(definition)
        return interpolate([points[0], points[-1]], score)

    def _custom(self, definition: InstrumentDefinition, score: Decimal) -> Decimal:
        name = definition.risk_mapping.strategy or ""
        strategy = self.risk_strategies.get(name)
        if strategy is None:
            raise UnknownStrategy(name)
        return strategy(definition, score)

    def base_risk(
        self,
        definition: InstrumentDefinition,
        score: Decimal,
    ) -> tuple[Decimal, RiskCategory]:
        """Layer A: risk percentage and range category for ``score``."""
        mapping = definition.risk_mapping
        risk = clamp(self._algorithms[mapping.algorithm](definition, score))

        category = mapping.ranges[-1].category
        for risk_range in mapping.ranges:
            if score <= risk_range.score_max:
                category = risk_range.category
                break
        return to_decimal(risk, 2), category

    # ── Layer B ─────────────────────────────────────────────────────────────

    @staticmethod
    def demographic_factors(
        definition: InstrumentDefinition,
        profile: UserProfile,
    ) -> list[tuple[RiskFactor, Decimal]]:
        """Applicable (factor, delta) pairs from the instrument's delta tables."""
        tables = definition.demographics
        applied = []

        age_band = _first_band(tables.age, profile.age)
        if age_band is not None and age_band.delta:
            applied.append(("age", age_band.delta, f"Age {profile.age}"))

        education_band = _first_band(tables.education, profile.years_of_education)
        if education_band is not None and education_band.delta:
            applied.append(("education", education_band.delta,
                            f"{profile.years_of_education} years of education"))

        gender_delta = tables.gender.get(profile.gender) if profile.gender else None
        if gender_delta:
            applied.append(("gender", gender_delta, f"Gender {profile.gender.value}"))

        return [
            (
                RiskFactor(
                    label=label,
                    impact=FactorImpact.NEGATIVE if delta > 0 else FactorImpact.POSITIVE,
                    weight=to_decimal(abs(delta) / Decimal(100), 4),
                    description=f"{description}: {delta:+} percentage points",
                ),
                delta,
            )
            for label, delta, description in applied
        ]

    @staticmethod
    def instrument_factors(
        instrument: InstrumentId,
        score: Decimal,
        profile: UserProfile,
    ) -> list[RiskFactor]:
        return [
            RiskFactor(
                label=label,
                impact=FactorImpact.NEGATIVE,
                weight=Decimal(weight),
                description=description,
            )
            for label, predicate, weight, description in _FACTOR_RULES.get(instrument, ())
            if predicate(score, profile)
        ]

    # ── Public API ──────────────────────────────────────────────────────────

    def calculate_risk(
        self,
        instrument_id: Union[InstrumentId, str],
        adjusted_score: Decimal,
        context: ScoringContext,
        raw_score: Optional[Decimal] = None,
    ) -> RiskAssessment:
        """Map an adjusted score to a demographically adjusted risk estimate.

        Args:
            instrument_id: Instrument the score belongs to.
            adjusted_score: Score after declared adjustments and clamping.
            context: Profile and reference instant (used as the timestamp).
            raw_score: Unadjusted score for the record (defaults to adjusted).

        Returns:
            RiskAssessment with factors and confidence interval.

        Raises:
            UnknownInstrument: If the instrument is not in the catalog.
            UnknownStrategy: If a custom algorithm names an unregistered strategy.
        """
        definition = self.catalog.get_definition(instrument_id)
        profile = context.profile
        score = Decimal(adjusted_score)

        # ── 1. Base mapping ────────────────────────────────────────────────
        base_risk, base_category = self.base_risk(definition, score)

        # ── 2. Demographic deltas ──────────────────────────────────────────
        demographic = self.demographic_factors(definition, profile)
        total_delta = sum((delta for _, delta in demographic), Decimal(0))
        risk = to_decimal(clamp(base_risk + total_delta), 2)
        category = categorize(definition.risk_mapping, risk)

        # ── 3. Confidence interval and factors ─────────────────────────────
        ci = self.confidence.calculate(
            risk, definition.id, profile, definition.risk_mapping.confidence_width,
        )
        factors = self.instrument_factors(definition.id, score, profile)
        factors.extend(factor for factor, _ in demographic)

        assessment = RiskAssessment(
            instrument=definition.id,
            raw_score=Decimal(raw_score) if raw_score is not None else score,
            adjusted_score=score,
            base_risk_percentage=base_risk,
            base_category=base_category,
            risk_percentage=risk,
            category=category,
            confidence_interval=ci,
            factors=tuple(factors),
            algorithm=definition.risk_mapping.algorithm,
            timestamp=context.reference_instant,
        )
        logger.info(
            "risk_calculated",
            instrument=definition.id.value,
            adjusted_score=float(score),
            base_risk=float(base_risk),
            risk_percentage=float(risk),
            category=category.value,
            factor_count=len(factors),
        )
        return assessment

    def empty_assessment(
        self,
        instrument_id: Union[InstrumentId, str],
        context: ScoringContext,
    ) -> RiskAssessment:
        """Assessment for a session with nothing scored: 0 %, low, no factors."""
        definition = self.catalog.get_definition(instrument_id)
        zero = Decimal(0)
        return RiskAssessment(
            instrument=definition.id,
            raw_score=zero,
            adjusted_score=zero,
            base_risk_percentage=zero,
            base_category=RiskCategory.LOW,
            risk_percentage=zero,
            category=RiskCategory.LOW,
            confidence_interval=self.confidence.calculate(
                zero, definition.id, context.profile, definition.risk_mapping.confidence_width,
            ),
            factors=(),
            algorithm=definition.risk_mapping.algorithm,
            timestamp=context.reference_instant,
        )
