"""End-to-end tests for ScreeningEngine, including the reference scenarios."""
import dataclasses
from decimal import Decimal

import pytest

from conftest import MMSE_SCORE_9, PERFECT_MOCA, phq9_answers, responses
from screening import ScreeningEngine
from screening.config import Settings
from screening.exceptions import UnknownInstrument
from screening.models import InstrumentId, Priority, RiskCategory, UserProfile


class TestScenarios:
    """Reference scenarios for each instrument."""

    def test_depression_high_without_self_harm(self, engine, adult_profile, reference_instant):
        result = engine.score(InstrumentId.PHQ9,
                              responses(phq9_answers(3, 3, 3, 3, 3, 3, 3, 3, 0)),
                              adult_profile, reference_instant)
        assert result.raw_score == 24
        assert result.category == RiskCategory.HIGH
        assert result.suicidal_ideation is False
        assert result.metadata["severity_level"] == "severe"

    def test_depression_self_harm_item(self, engine, adult_profile, reference_instant):
        result = engine.score(InstrumentId.PHQ9,
                              responses(phq9_answers(0, 0, 0, 0, 0, 0, 0, 0, 2)),
                              adult_profile, reference_instant)
        assert result.raw_score == 2
        assert result.suicidal_ideation is True
        assert any(r.priority == Priority.URGENT for r in result.recommendations)

    def test_mmse_below_ten_is_emergency(self, engine, adult_profile, reference_instant):
        result = engine.score(InstrumentId.MMSE, responses(MMSE_SCORE_9),
                              adult_profile, reference_instant)
        assert result.raw_score == 9
        assert result.category == RiskCategory.HIGH
        assert result.metadata["impairment_level"] == "severe"
        assert "emergency_severe_confusion" in [r.id for r in result.recommendations]

    def test_informant_two_items_moderate(self, engine, reference_instant):
        profile = UserProfile(age=65, years_of_education=12)
        result = engine.score(InstrumentId.AD8, responses({"ad8_q2": 1, "ad8_q7": 1}),
                              profile, reference_instant)
        assert result.raw_score == 2
        assert Decimal(20) <= result.risk.base_risk_percentage <= Decimal(40)
        assert result.risk.base_category == RiskCategory.MODERATE
        assert result.category == RiskCategory.MODERATE
        assert result.metadata["positive_responses"] == 2
        assert result.metadata["cognitive_impairment_likely"] is True

    def test_symptom_screen_weighted(self, engine, adult_profile, reference_instant):
        answers = {
            "parkinsons_tremor": 4,
            "parkinsons_rigidity": 4,
            "parkinsons_bradykinesia": 2,
            "parkinsons_smell": 2,
            "parkinsons_sleep": 2,
            "parkinsons_handwriting": 3,
        }
        result = engine.score(InstrumentId.PARKINSONS, responses(answers),
                              adult_profile, reference_instant)
        assert result.raw_score == 29
        assert result.risk.base_category == RiskCategory.HIGH
        assert result.metadata["declared_max_score"] == 44.0
        assert result.metadata["section_max_total"] == 41.0

    @pytest.mark.parametrize("instrument", list(InstrumentId))
    def test_empty_responses(self, engine, elderly_profile, reference_instant, instrument):
        result = engine.score(instrument, [], elderly_profile, reference_instant)
        assert result.raw_score == 0
        assert result.adjusted_score == 0
        assert result.risk_percentage == 0
        assert result.category == RiskCategory.LOW
        assert result.risk.factors == ()
        assert not any(r.id.startswith("emergency_") for r in result.recommendations)
        assert result.completion.answered == 0


class TestResultShape:
    """Completion, warnings and serialization."""

    def test_completion(self, engine, adult_profile, reference_instant):
        result = engine.score("phq9", responses(phq9_answers(1, 2, 0)), adult_profile,
                              reference_instant)
        assert result.completion.answered == 3
        assert result.completion.total_questions == 9
        assert result.completion.completion_rate == Decimal("0.3333")
        assert not result.completion.is_complete
        assert result.completion.completed_at == reference_instant

    def test_complete_session(self, engine, adult_profile, reference_instant):
        result = engine.score("moca", responses(PERFECT_MOCA), adult_profile, reference_instant)
        assert result.completion.is_complete
        assert result.max_score == 30
        assert result.metadata["drawing_analysis"]["moca_clock_drawing"] == {
            "contour": True, "numbers": True, "hands": True, "time_accuracy": True,
        }
        assert result.metadata["education_adjustment_applied"] is False

    def test_warnings_returned(self, engine, adult_profile, reference_instant):
        batch = responses({"phq9_q1": 1, "bogus": 3, "phq9_q2": 2})
        result = engine.score("phq9", batch, adult_profile, reference_instant)
        assert result.raw_score == 3
        assert [w.code for w in result.warnings] == ["unknown_question"]

    @pytest.mark.parametrize("instrument,answer", [
        ("mmse", 10**20),
        ("moca", {"day": 19, "month": 10, "year": 10**20}),
    ])
    def test_huge_date_answer_becomes_warning(self, engine, adult_profile, reference_instant,
                                              instrument, answer):
        batch = responses({f"{instrument}_date": answer, f"{instrument}_year": 2026})
        result = engine.score(instrument, batch, adult_profile, reference_instant)
        assert [w.code for w in result.warnings] == ["invalid_answer"]
        assert result.warnings[0].question_id == f"{instrument}_date"
        assert result.completion.answered == 2

    def test_unknown_instrument(self, engine, adult_profile, reference_instant):
        with pytest.raises(UnknownInstrument):
            engine.score("gds", [], adult_profile, reference_instant)

    def test_to_dict(self, engine, adult_profile, reference_instant):
        result = engine.score("phq9", responses(phq9_answers(3, 3)), adult_profile,
                              reference_instant)
        data = result.to_dict()
        assert data["instrument"] == "phq9"
        assert data["raw_score"] == 6.0
        assert data["risk"]["category"] == result.category.value
        assert data["completion"]["completed_at"] == reference_instant.isoformat()
        assert all(isinstance(r["priority"], str) for r in data["recommendations"])

    def test_results_are_immutable(self, engine, adult_profile, reference_instant):
        result = engine.score("phq9", [], adult_profile, reference_instant)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.raw_score = Decimal(5)

    def test_metadata_is_read_only(self, engine, adult_profile, reference_instant):
        result = engine.score("moca", responses(PERFECT_MOCA), adult_profile, reference_instant)
        with pytest.raises(TypeError):
            result.metadata["education_adjustment_applied"] = True
        with pytest.raises(TypeError):
            result.metadata["drawing_analysis"]["moca_clock_drawing"] = {}
        data = result.to_dict()
        assert type(data["metadata"]) is dict
        assert type(data["metadata"]["drawing_analysis"]) is dict
        data["metadata"]["extra"] = 1
        assert "extra" not in result.metadata


class TestFromSettings:
    """Engine wiring from Settings."""

    def test_thresholds_from_settings(self):
        settings = Settings(mmse_emergency_threshold=5, social_engagement_age=80,
                            composite_fallback_weight=0.2)
        engine = ScreeningEngine.from_settings(settings)
        assert engine.recommendation_engine.mmse_emergency_threshold == 5
        assert engine.recommendation_engine.social_engagement_age == 80
        assert engine.composite.fallback_weight == Decimal("0.2")

    def test_mmse_threshold_applies(self, adult_profile, reference_instant):
        engine = ScreeningEngine.from_settings(Settings(mmse_emergency_threshold=5))
        result = engine.score("mmse", responses(MMSE_SCORE_9), adult_profile, reference_instant)
        assert "emergency_severe_confusion" not in [r.id for r in result.recommendations]
