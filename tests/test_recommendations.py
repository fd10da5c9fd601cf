"""Tests for recommendation selection, emergencies, merge and composites."""
import pytest

from conftest import MMSE_SCORE_9, PERFECT_MMSE, PERFECT_MOCA, phq9_answers, responses
from screening.models import (
    PRIORITY_RANK,
    InstrumentId,
    Priority,
    Recommendation,
    RecommendationCategory,
    RecommendationType,
    UserProfile,
)
from screening.recommendations import (
    RecommendationCatalog,
    RecommendationEngine,
    filter_by_priority,
    lifestyle_only,
    medical_only,
    merge,
)


def _rec(rec_id, priority, days, rec_type=RecommendationType.MEDICAL):
    return Recommendation(
        id=rec_id,
        type=rec_type,
        category=RecommendationCategory.SHORT_TERM,
        priority=priority,
        title=rec_id,
        description=rec_id,
        follow_up_days=days,
    )


def _ids(recs):
    return [r.id for r in recs]


class TestMerge:
    """Deduplication and ordering."""

    def test_first_occurrence_wins(self):
        first = _rec("a", Priority.LOW, 30)
        second = _rec("a", Priority.URGENT, 0)
        merged = merge([first, second])
        assert merged == [first]

    def test_priority_then_follow_up(self):
        merged = merge([
            _rec("low", Priority.LOW, 1),
            _rec("high_slow", Priority.HIGH, 30),
            _rec("urgent", Priority.URGENT, 7),
            _rec("high_fast", Priority.HIGH, 14),
            _rec("emergency", Priority.EMERGENCY, 0),
        ])
        assert _ids(merged) == ["emergency", "urgent", "high_fast", "high_slow", "low"]

    def test_stable_for_full_ties(self):
        merged = merge([_rec("b", Priority.MEDIUM, 30), _rec("a", Priority.MEDIUM, 30)])
        assert _ids(merged) == ["b", "a"]


class TestFilters:
    """filter_by_priority, lifestyle_only and medical_only."""

    recs = [
        _rec("u", Priority.URGENT, 0),
        _rec("m", Priority.MEDIUM, 30, RecommendationType.LIFESTYLE),
        _rec("l", Priority.LOW, 90, RecommendationType.MONITORING),
    ]

    def test_filter_by_priority(self):
        assert _ids(filter_by_priority(self.recs, Priority.MEDIUM)) == ["u", "m"]
        assert _ids(filter_by_priority(self.recs, Priority.EMERGENCY)) == []

    def test_type_filters(self):
        assert _ids(lifestyle_only(self.recs)) == ["m"]
        assert _ids(medical_only(self.recs)) == ["u"]


class TestEmergencies:
    """Emergency triggers always yield an urgent entry."""

    def test_self_harm_item(self, engine, adult_profile, reference_instant):
        result = engine.score("phq9", responses(phq9_answers(0, 0, 0, 0, 0, 0, 0, 0, 2)),
                              adult_profile, reference_instant)
        ids = _ids(result.recommendations)
        assert ids[0] == "emergency_suicide_risk"
        assert "phq9_suicide_risk" in ids
        assert result.recommendations[0].priority == Priority.URGENT
        assert result.recommendations[0].follow_up_days == 0

    def test_severe_confusion(self, engine, adult_profile, reference_instant):
        result = engine.score("mmse", responses(MMSE_SCORE_9), adult_profile, reference_instant)
        assert "emergency_severe_confusion" in engine.recommendation_engine.detect_emergencies(result)
        assert "emergency_severe_confusion" in _ids(result.recommendations)

    def test_many_negative_factors_with_high_category(self, engine, elderly_profile,
                                                      reference_instant):
        result = engine.score("moca", responses({"moca_trail_making": True}),
                              elderly_profile, reference_instant)
        assert result.risk.negative_factor_count >= 3
        assert "emergency_comprehensive_evaluation" in _ids(result.recommendations)

    def test_threshold_is_configurable(self, engine, adult_profile, reference_instant):
        result = engine.score("mmse", responses(MMSE_SCORE_9), adult_profile, reference_instant)
        lenient = RecommendationEngine(mmse_emergency_threshold=5, emergency_factor_threshold=99)
        assert lenient.detect_emergencies(result) == []

    def test_empty_session_never_triggers(self, engine, elderly_profile, reference_instant):
        result = engine.score("mmse", [], elderly_profile, reference_instant)
        assert engine.recommendation_engine.detect_emergencies(result) == []


class TestInstrumentRules:
    """Score-threshold rules per instrument."""

    def test_moca_section_rules(self, engine, adult_profile, reference_instant):
        answers = dict(PERFECT_MOCA, moca_delayed_recall={"recalled_words": ["cara"]})
        result = engine.score("moca", responses(answers), adult_profile, reference_instant)
        ids = _ids(result.recommendations)
        assert "moca_memory_training" in ids
        assert "moca_attention_exercises" not in ids

    def test_ad8_two_items_downgraded(self, engine, reference_instant):
        profile = UserProfile(age=65, years_of_education=12)
        result = engine.score("ad8", responses({"ad8_q1": 1, "ad8_q3": 1}), profile,
                              reference_instant)
        evaluation = next(r for r in result.recommendations if r.id == "ad8_dementia_evaluation")
        assert evaluation.priority == Priority.HIGH
        assert "ad8_monitoring" in _ids(result.recommendations)
        assert "ad8_family_support" not in _ids(result.recommendations)

    def test_ad8_four_items_urgent(self, engine, reference_instant):
        profile = UserProfile(age=65, years_of_education=12)
        answers = {f"ad8_q{i}": 1 for i in range(1, 5)}
        result = engine.score("ad8", responses(answers), profile, reference_instant)
        evaluation = next(r for r in result.recommendations if r.id == "ad8_dementia_evaluation")
        assert evaluation.priority == Priority.URGENT
        assert "ad8_family_support" in _ids(result.recommendations)

    def test_parkinsons_motor_management(self, engine, adult_profile, reference_instant):
        answers = {"parkinsons_tremor": 4, "parkinsons_rigidity": 4, "parkinsons_gait": 3}
        result = engine.score("parkinsons", responses(answers), adult_profile, reference_instant)
        assert result.metadata["motor_symptom_score"] == 11.0
        ids = _ids(result.recommendations)
        assert "parkinsons_motor_management" in ids
        assert "parkinsons_neurology_consultation" in ids

    def test_mmse_elderly_care(self, engine, reference_instant):
        profile = UserProfile(age=80, years_of_education=12)
        result = engine.score("mmse", responses(PERFECT_MMSE), profile, reference_instant)
        assert "mmse_elderly_care" in _ids(result.recommendations)

    def test_recommendations_stamped_with_instrument(self, engine, adult_profile,
                                                     reference_instant):
        result = engine.score("phq9", responses(phq9_answers(1, 1)), adult_profile,
                              reference_instant)
        assert {r.instrument for r in result.recommendations} == {InstrumentId.PHQ9}
        assert {r.risk_level for r in result.recommendations} == {result.category}


class TestLifestyle:
    """Lifestyle category selection."""

    def test_cognitive_instrument_gets_stimulation(self, engine, adult_profile,
                                                   reference_instant):
        result = engine.score("moca", responses(PERFECT_MOCA), adult_profile, reference_instant)
        ids = _ids(result.recommendations)
        assert "lifestyle_mental_stimulation" in ids
        assert "lifestyle_aerobic_exercise" in ids
        assert "lifestyle_sleep_hygiene" in ids
        assert "lifestyle_social_engagement" not in ids

    def test_depression_gets_social(self, engine, adult_profile, reference_instant):
        result = engine.score("phq9", responses(phq9_answers(0)), adult_profile, reference_instant)
        ids = _ids(result.recommendations)
        assert "lifestyle_social_engagement" in ids
        assert "lifestyle_mental_stimulation" not in ids

    def test_age_gets_social(self, engine, reference_instant):
        profile = UserProfile(age=70, years_of_education=16)
        result = engine.score("parkinsons", responses({"parkinsons_tremor": 0}), profile,
                              reference_instant)
        assert "lifestyle_social_engagement" in _ids(result.recommendations)


class TestOrdering:
    """Merged output invariants."""

    @pytest.mark.parametrize("instrument,answers", [
        ("phq9", phq9_answers(3, 3, 3, 3, 3, 3, 3, 3, 3)),
        ("mmse", MMSE_SCORE_9),
        ("moca", PERFECT_MOCA),
    ])
    def test_unique_and_sorted(self, engine, elderly_profile, reference_instant,
                               instrument, answers):
        result = engine.score(instrument, responses(answers), elderly_profile, reference_instant)
        recs = result.recommendations
        assert len(_ids(recs)) == len(set(_ids(recs)))
        keys = [(-PRIORITY_RANK[r.priority], r.follow_up_days) for r in recs]
        assert keys == sorted(keys)


class TestComposite:
    """Cross-instrument recommendations."""

    def test_multiple_high_risk(self, engine, adult_profile, reference_instant):
        phq9 = engine.score("phq9", responses(phq9_answers(3, 3, 3, 3, 3, 3, 3, 3, 0)),
                            adult_profile, reference_instant)
        mmse = engine.score("mmse", responses(MMSE_SCORE_9), adult_profile, reference_instant)
        recs = engine.composite_recommendations([phq9, mmse], adult_profile)
        ids = _ids(recs)
        assert "composite_multiple_high_risk" in ids
        assert "composite_cognitive_depression" in ids
        assert len(ids) == len(set(ids))
        # escalated: high → urgent, medium → high
        assert all(r.priority in (Priority.URGENT, Priority.HIGH, Priority.LOW) for r in recs)

    def test_no_composite_for_low_results(self, engine, adult_profile, reference_instant):
        moca = engine.score("moca", responses(PERFECT_MOCA), adult_profile, reference_instant)
        phq9 = engine.score("phq9", responses(phq9_answers(0)), adult_profile, reference_instant)
        recs = engine.composite_recommendations([moca, phq9], adult_profile)
        assert not any(r.id.startswith("composite_") for r in recs)

    def test_unknown_template_raises(self):
        with pytest.raises(KeyError):
            RecommendationCatalog().get("nope")
