"""Recommendation Engine.

Generation order for one result
-------------------------------
  1. Emergency detection (self-harm item, MMSE below threshold, many
     negative factors with a high category) → urgent, immediate templates
  2. Instrument-specific score rules
  3. Medical templates for instrument × risk category
  4. Lifestyle templates (exercise, nutrition, sleep always; cognitive
     for cognitive instruments; social for depression, high risk or age)
  5. Merge: first occurrence of each id wins, then priority descending,
     ties by ascending follow-up interval
"""
from typing import Callable, Iterable, Optional, Sequence

import structlog

from screening.models.enums import (
    COGNITIVE_INSTRUMENTS,
    PRIORITY_RANK,
    InstrumentId,
    LifestyleCategory,
    Priority,
    RecommendationType,
    RiskCategory,
)
from screening.models.recommendation import Recommendation
from screening.models.response import UserProfile
from screening.recommendations.catalog import RecommendationCatalog
from screening.scoring.result import AssessmentResult

logger = structlog.get_logger(__name__)

_ESCALATE_ON_MULTIPLE_HIGH: dict[Priority, Priority] = {
    Priority.HIGH: Priority.URGENT,
    Priority.MEDIUM: Priority.HIGH,
}
_ESCALATE_ON_MULTIPLE_MODERATE: dict[Priority, Priority] = {
    Priority.MEDIUM: Priority.HIGH,
    Priority.LOW: Priority.MEDIUM,
}


def merge(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Deduplicate by id (first wins) and order by priority, then follow-up days."""
    unique: dict[str, Recommendation] = {}
    for rec in recommendations:
        unique.setdefault(rec.id, rec)
    return sorted(
        unique.values(),
        key=lambda rec: (-PRIORITY_RANK[rec.priority], rec.follow_up_days),
    )


def filter_by_priority(
    recommendations: Iterable[Recommendation],
    minimum: Priority,
) -> list[Recommendation]:
    """Recommendations at or above ``minimum`` priority, order preserved."""
    threshold = PRIORITY_RANK[minimum]
    return [rec for rec in recommendations if PRIORITY_RANK[rec.priority] >= threshold]


def lifestyle_only(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    return [rec for rec in recommendations if rec.type == RecommendationType.LIFESTYLE]


def medical_only(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    return [rec for rec in recommendations if rec.type == RecommendationType.MEDICAL]


class RecommendationEngine:
    """Select, prioritise and deduplicate recommendations.

    Parameters
    ----------
    catalog:
        Template source (the built-in catalog if omitted).
    emergency_factor_threshold:
        Negative factors that, with a high category, trigger an emergency.
    mmse_emergency_threshold:
        MMSE raw scores below this value trigger an emergency.
    social_engagement_age:
        Ages above this add social-engagement recommendations.
    """

    def __init__(
        self,
        catalog: Optional[RecommendationCatalog] = None,
        emergency_factor_threshold: int = 3,
        mmse_emergency_threshold: int = 10,
        social_engagement_age: int = 65,
    ) -> None:
        self.catalog = catalog if catalog is not None else RecommendationCatalog()
        self.emergency_factor_threshold = emergency_factor_threshold
        self.mmse_emergency_threshold = mmse_emergency_threshold
        self.social_engagement_age = social_engagement_age
        self._rules: dict[InstrumentId, Callable[[AssessmentResult, UserProfile], list[Recommendation]]] = {
            InstrumentId.MOCA: self._moca_rules,
            InstrumentId.PHQ9: self._phq9_rules,
            InstrumentId.MMSE: self._mmse_rules,
            InstrumentId.AD8: self._ad8_rules,
            InstrumentId.PARKINSONS: self._parkinsons_rules,
        }
        logger.info(
            "recommendation_engine_initialized",
            emergency_factor_threshold=emergency_factor_threshold,
            mmse_emergency_threshold=mmse_emergency_threshold,
            social_engagement_age=social_engagement_age,
        )

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _pick(self, rec_id: str, result: AssessmentResult, **updates) -> Recommendation:
        template = self.catalog.get(rec_id)
        return template.model_copy(update={
            "instrument": result.instrument,
            "risk_level": result.category,
            **updates,
        })

    @staticmethod
    def _stamp(templates: Iterable[Recommendation], result: AssessmentResult) -> list[Recommendation]:
        return [
            rec.model_copy(update={"instrument": result.instrument, "risk_level": result.category})
            for rec in templates
        ]

    # ── 1. Emergencies ──────────────────────────────────────────────────────

    def detect_emergencies(self, result: AssessmentResult) -> list[str]:
        """Ids of emergency templates whose trigger holds for ``result``."""
        if result.completion.answered == 0:
            return []
        triggered = []
        if result.instrument == InstrumentId.PHQ9 and result.suicidal_ideation:
            triggered.append("emergency_suicide_risk")
        if (result.instrument == InstrumentId.MMSE
                and result.raw_score < self.mmse_emergency_threshold):
            triggered.append("emergency_severe_confusion")
        if (result.category == RiskCategory.HIGH
                and result.risk.negative_factor_count >= self.emergency_factor_threshold):
            triggered.append("emergency_comprehensive_evaluation")
        return triggered

    # ── 2. Instrument rules ─────────────────────────────────────────────────

    def _moca_rules(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        recs = []
        if result.category == RiskCategory.HIGH:
            recs += [self._pick("moca_urgent_consultation", result),
                     self._pick("moca_neuroimaging", result)]
        elif result.category == RiskCategory.MODERATE:
            recs += [self._pick("moca_specialist_evaluation", result),
                     self._pick("moca_cognitive_monitoring", result)]

        recall = result.section("delayed_recall")
        if recall is not None and recall.score < 3:
            recs.append(self._pick("moca_memory_training", result))
        attention = result.section("attention")
        if attention is not None and attention.score < 4:
            recs.append(self._pick("moca_attention_exercises", result))
        return recs

    def _phq9_rules(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        recs = []
        severity = result.metadata.get("severity_level")
        if result.suicidal_ideation:
            recs.append(self._pick("phq9_suicide_risk", result))
        if result.category == RiskCategory.HIGH and severity == "severe":
            recs.append(self._pick("phq9_psychiatric_care", result))
        if result.category in (RiskCategory.HIGH, RiskCategory.MODERATE):
            recs += [self._pick("phq9_psychotherapy", result),
                     self._pick("phq9_medication_evaluation", result)]
        if severity in ("mild", "moderate"):
            recs.append(self._pick("phq9_self_help", result))
        return recs

    def _mmse_rules(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        recs = []
        if result.category == RiskCategory.HIGH:
            if result.adjusted_score < 12:
                recs += [self._pick("mmse_severe_impairment", result),
                         self._pick("mmse_safety_assessment", result)]
            else:
                recs.append(self._pick("mmse_moderate_impairment", result))
        elif result.category == RiskCategory.MODERATE:
            recs.append(self._pick("mmse_mild_impairment", result))
        if profile.age > 75:
            recs.append(self._pick("mmse_elderly_care", result))
        return recs

    def _ad8_rules(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        score = result.raw_score
        high = result.category == RiskCategory.HIGH or score >= 4
        if high:
            return [self._pick("ad8_dementia_evaluation", result),
                    self._pick("ad8_family_support", result)]
        if score >= 2 or result.category == RiskCategory.MODERATE:
            return [self._pick("ad8_dementia_evaluation", result, priority=Priority.HIGH),
                    self._pick("ad8_monitoring", result)]
        return [self._pick("ad8_prevention", result)]

    def _parkinsons_rules(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        recs = []
        score = result.adjusted_score
        if result.category == RiskCategory.HIGH or score > 18:
            recs += [self._pick("parkinsons_neurology_consultation", result),
                     self._pick("parkinsons_multidisciplinary_care", result),
                     self._pick("parkinsons_exercise_therapy", result)]
        elif result.category == RiskCategory.MODERATE or score > 8:
            recs += [self._pick("parkinsons_early_evaluation", result),
                     self._pick("parkinsons_lifestyle_modifications", result)]
        if result.metadata.get("motor_symptom_score", 0) > 10:
            recs.append(self._pick("parkinsons_motor_management", result))
        if result.metadata.get("non_motor_symptom_score", 0) > 6:
            recs.append(self._pick("parkinsons_nonmotor_management", result))
        return recs

    # ── 4. Lifestyle ────────────────────────────────────────────────────────

    def lifestyle_categories(
        self,
        result: AssessmentResult,
        profile: UserProfile,
    ) -> list[LifestyleCategory]:
        categories = [LifestyleCategory.EXERCISE, LifestyleCategory.NUTRITION, LifestyleCategory.SLEEP]
        if result.instrument in COGNITIVE_INSTRUMENTS:
            categories.append(LifestyleCategory.COGNITIVE)
        if (result.instrument == InstrumentId.PHQ9
                or result.category == RiskCategory.HIGH
                or profile.age > self.social_engagement_age):
            categories.append(LifestyleCategory.SOCIAL)
        return categories

    # ── Public API ──────────────────────────────────────────────────────────

    def generate(self, result: AssessmentResult, profile: UserProfile) -> list[Recommendation]:
        """Ordered, deduplicated recommendations for one result.

        Args:
            result: Scored instrument result.
            profile: Demographics of the person assessed.

        Returns:
            Merged recommendation list; contains an urgent entry whenever an
            emergency trigger holds.
        """
        candidates: list[Recommendation] = []

        emergencies = self.detect_emergencies(result)
        if emergencies:
            logger.warning("emergency_detected", instrument=result.instrument.value,
                           triggers=emergencies)
            candidates += [self._pick(rec_id, result) for rec_id in emergencies]

        if result.completion.answered > 0:
            rules = self._rules.get(result.instrument)
            if rules is not None:
                candidates += rules(result, profile)

        candidates += self._stamp(self.catalog.medical_for(result.instrument, result.category), result)
        candidates += self._stamp(
            self.catalog.lifestyle_for(self.lifestyle_categories(result, profile)), result,
        )

        merged = merge(candidates)
        logger.info(
            "recommendations_generated",
            instrument=result.instrument.value,
            category=result.category.value,
            count=len(merged),
            emergency=bool(emergencies),
        )
        return merged

    def generate_composite(
        self,
        results: Sequence[AssessmentResult],
        profile: UserProfile,
    ) -> list[Recommendation]:
        """Recommendations across several results for the same person.

        Adds cross-instrument templates and raises priorities when two or
        more results are high risk (high → urgent, medium → high) or, failing
        that, when two or more are moderate (medium → high, low → medium).
        """
        by_category = {c: [r for r in results if r.category == c] for c in RiskCategory}
        not_low = {r.instrument for r in results if r.category != RiskCategory.LOW}
        cognitive_not_low = not_low & COGNITIVE_INSTRUMENTS

        composite_ids = []
        if len(by_category[RiskCategory.HIGH]) >= 2:
            composite_ids.append("composite_multiple_high_risk")
        if InstrumentId.PHQ9 in not_low and cognitive_not_low:
            composite_ids.append("composite_cognitive_depression")
        if InstrumentId.PARKINSONS in not_low and cognitive_not_low:
            composite_ids.append("composite_parkinson_cognitive")
        if len(cognitive_not_low) >= 2:
            composite_ids.append("composite_multiple_cognitive")

        candidates = [self.catalog.get(rec_id) for rec_id in composite_ids]
        for result in results:
            candidates += list(result.recommendations) or self.generate(result, profile)

        if len(by_category[RiskCategory.HIGH]) >= 2:
            escalation = _ESCALATE_ON_MULTIPLE_HIGH
        elif len(by_category[RiskCategory.MODERATE]) >= 2:
            escalation = _ESCALATE_ON_MULTIPLE_MODERATE
        else:
            escalation = {}
        if escalation:
            candidates = [
                rec.model_copy(update={"priority": escalation[rec.priority]})
                if rec.priority in escalation else rec
                for rec in candidates
            ]

        merged = merge(candidates)
        logger.info("composite_recommendations_generated",
                    results=len(results), composite=composite_ids, count=len(merged))
        return merged
