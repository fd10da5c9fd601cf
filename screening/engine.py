"""Screening Engine: responses → AssessmentResult.

Orchestrates the full per-instrument pipeline and the cross-instrument
composite:

  1. Score and aggregate responses (warnings collected per call)
  2. Map the adjusted score to a risk estimate (empty sessions → 0 %, low)
  3. Interpret instrument-specific metadata
  4. Generate prioritised recommendations
"""
import dataclasses
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence, Union

import structlog

from screening.catalog.registry import InstrumentCatalog
from screening.config import Settings, get_settings
from screening.models.enums import InstrumentId
from screening.models.recommendation import Recommendation
from screening.models.response import Response, ScoringContext, UserProfile
from screening.recommendations.engine import RecommendationEngine
from screening.scoring.aggregator import ScoreAggregator
from screening.scoring.composite import CompositeRisk, CompositeRiskCalculator
from screening.scoring.diagnostics import WarningCollector
from screening.scoring.interpretation import interpret
from screening.scoring.result import AssessmentResult, CompletionInfo
from screening.scoring.risk_calculator import RiskCalculator
from screening.scoring.utils import to_decimal

logger = structlog.get_logger(__name__)


class ScreeningEngine:
    """Facade over catalog, aggregator, risk calculator and recommendations.

    Parameters
    ----------
    catalog:
        Validated instrument definitions.
    aggregator:
        Response scorer and section aggregator.
    risk_calculator:
        Two-layer risk estimation over ``catalog``.
    recommendation_engine:
        Template selection and prioritisation.
    composite:
        Cross-instrument risk combination.
    """

    def __init__(
        self,
        catalog: Optional[InstrumentCatalog] = None,
        aggregator: Optional[ScoreAggregator] = None,
        risk_calculator: Optional[RiskCalculator] = None,
        recommendation_engine: Optional[RecommendationEngine] = None,
        composite: Optional[CompositeRiskCalculator] = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else InstrumentCatalog()
        self.aggregator = aggregator if aggregator is not None else ScoreAggregator()
        self.risk_calculator = (
            risk_calculator if risk_calculator is not None else RiskCalculator(self.catalog)
        )
        self.recommendation_engine = (
            recommendation_engine if recommendation_engine is not None else RecommendationEngine()
        )
        self.composite = composite if composite is not None else CompositeRiskCalculator()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ScreeningEngine":
        """Build an engine with thresholds taken from ``settings``."""
        settings = settings if settings is not None else get_settings()
        catalog = InstrumentCatalog()
        return cls(
            catalog=catalog,
            risk_calculator=RiskCalculator(catalog),
            recommendation_engine=RecommendationEngine(
                emergency_factor_threshold=settings.emergency_factor_threshold,
                mmse_emergency_threshold=settings.mmse_emergency_threshold,
                social_engagement_age=settings.social_engagement_age,
            ),
            composite=CompositeRiskCalculator(fallback_weight=settings.composite_fallback_weight),
        )

    def score(
        self,
        instrument_id: Union[InstrumentId, str],
        responses: Sequence[Response],
        profile: UserProfile,
        reference_instant: datetime,
    ) -> AssessmentResult:
        """Score one instrument session end to end.

        Args:
            instrument_id: Instrument the responses belong to.
            responses: Captured responses in capture order.
            profile: Demographics of the person assessed.
            reference_instant: "Now" for orientation items and timestamps.

        Returns:
            AssessmentResult with risk, metadata, recommendations and warnings.

        Raises:
            UnknownInstrument: If the instrument is not in the catalog.
        """
        definition = self.catalog.get_definition(instrument_id)
        context = ScoringContext(profile=profile, reference_instant=reference_instant)
        warnings = WarningCollector(definition.id.value)

        # ── 1. Aggregate ─────────────────────────────────────────────────────
        aggregate = self.aggregator.aggregate(definition, responses, context, warnings)

        # ── 2. Risk ──────────────────────────────────────────────────────────
        if aggregate.answered == 0:
            risk = self.risk_calculator.empty_assessment(definition.id, context)
        else:
            risk = self.risk_calculator.calculate_risk(
                definition.id, aggregate.adjusted_score, context, raw_score=aggregate.raw_score,
            )

        # ── 3. Interpretation and completion ────────────────────────────────
        latest = {response.question_id: response for response in responses}
        metadata = interpret(definition, aggregate, latest)
        total = aggregate.total_questions
        completion = CompletionInfo(
            answered=aggregate.answered,
            total_questions=total,
            completion_rate=to_decimal(Decimal(aggregate.answered) / total, 4) if total else Decimal(0),
            completed_at=reference_instant,
        )

        result = AssessmentResult(
            instrument=definition.id,
            raw_score=aggregate.raw_score,
            adjusted_score=aggregate.adjusted_score,
            max_score=definition.max_score,
            section_scores=aggregate.section_scores,
            risk=risk,
            completion=completion,
            metadata=metadata,
            warnings=warnings.warnings,
        )

        # ── 4. Recommendations ───────────────────────────────────────────────
        recommendations = self.recommendation_engine.generate(result, profile)
        result = dataclasses.replace(result, recommendations=tuple(recommendations))

        logger.info(
            "instrument_scored",
            instrument=definition.id.value,
            raw_score=float(result.raw_score),
            adjusted_score=float(result.adjusted_score),
            risk_percentage=float(result.risk_percentage),
            category=result.category.value,
            answered=completion.answered,
            warnings=len(result.warnings),
        )
        return result

    def combine(self, results: Sequence[AssessmentResult]) -> CompositeRisk:
        return self.composite.combine(results)

    def composite_recommendations(
        self,
        results: Sequence[AssessmentResult],
        profile: UserProfile,
    ) -> list[Recommendation]:
        return self.recommendation_engine.generate_composite(results, profile)
