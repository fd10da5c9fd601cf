"""Property-based tests for scoring, risk and recommendations.

Uses Hypothesis to verify:
  Aggregation:
    1. test_adjusted_score_bounded   – 0 ≤ adjusted ≤ max for any answers
    2. test_duplicates_last_wins     – only the last answer per question counts
  Risk:
    3. test_cognitive_monotonic      – higher score ⇒ lower or equal risk
    4. test_symptom_monotonic        – higher score ⇒ higher or equal risk
    5. test_risk_bounded             – 0 ≤ risk ≤ 100, CI contains the estimate
  Engine:
    6. test_deterministic            – same inputs ⇒ identical result
    7. test_self_harm_always_urgent  – item 9 > 0 ⇒ an urgent recommendation
    8. test_no_duplicate_ids         – merged recommendations have unique ids
  Utilities:
    9. test_weighted_mean_bounds
   10. test_interpolate_within_endpoints
"""
from datetime import datetime, timezone
from decimal import Decimal

from hypothesis import HealthCheck, given, settings as h_settings
from hypothesis import strategies as st

from screening.catalog import InstrumentCatalog
from screening.engine import ScreeningEngine
from screening.models import (
    Gender,
    InstrumentId,
    Priority,
    Response,
    ScoringContext,
    UserProfile,
)
from screening.scoring.aggregator import ScoreAggregator
from screening.scoring.risk_calculator import RiskCalculator
from screening.scoring.utils import interpolate, weighted_mean

# ── Hypothesis configuration ──────────────────────────────────────────────────
h_settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
h_settings.load_profile("ci")

CATALOG = InstrumentCatalog()
ENGINE = ScreeningEngine(catalog=CATALOG)
RISK = RiskCalculator(CATALOG)
AGGREGATOR = ScoreAggregator()
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


# ── Strategy helpers ──────────────────────────────────────────────────────────

_profile = st.builds(
    UserProfile,
    age=st.integers(min_value=18, max_value=110),
    years_of_education=st.integers(min_value=0, max_value=30),
    gender=st.sampled_from([None, Gender.MALE, Gender.FEMALE, Gender.OTHER]),
)
_option_answer = st.one_of(st.none(), st.integers(min_value=-2, max_value=6))
_phq9_items = st.lists(st.integers(min_value=0, max_value=3), min_size=9, max_size=9)
_option_instrument = st.sampled_from([InstrumentId.PHQ9, InstrumentId.AD8, InstrumentId.PARKINSONS])


def _score_range(instrument: InstrumentId, steps: int = 4):
    """Scores from min to max in 1/steps increments."""
    definition = CATALOG.get_definition(instrument)
    top = int(definition.max_score) * steps
    return st.integers(min_value=0, max_value=top).map(lambda n: Decimal(n) / steps)


def _phq9_responses(items):
    return [Response(question_id=f"phq9_q{i}", answer=v) for i, v in enumerate(items, start=1)]


# ── Aggregation ───────────────────────────────────────────────────────────────

class TestAggregationProperties:
    """Property-based tests for ScoreAggregator."""

    @given(instrument=_option_instrument, profile=_profile, data=st.data())
    def test_adjusted_score_bounded(self, instrument, profile, data):
        definition = CATALOG.get_definition(instrument)
        answers = [
            Response(question_id=q.id, answer=data.draw(_option_answer))
            for q in definition.questions
        ]
        context = ScoringContext(profile=profile, reference_instant=NOW)
        result = AGGREGATOR.aggregate(definition, answers, context)
        assert definition.scoring.min_score <= result.adjusted_score <= definition.max_score

    @given(first=_phq9_items, last=_phq9_items)
    def test_duplicates_last_wins(self, first, last):
        definition = CATALOG.get_definition(InstrumentId.PHQ9)
        context = ScoringContext(profile=UserProfile(age=40, years_of_education=12),
                                 reference_instant=NOW)
        result = AGGREGATOR.aggregate(
            definition, _phq9_responses(first) + _phq9_responses(last), context,
        )
        assert result.raw_score == sum(last)


# ── Risk ──────────────────────────────────────────────────────────────────────

class TestRiskProperties:
    """Property-based tests for RiskCalculator."""

    @given(instrument=st.sampled_from([InstrumentId.MOCA, InstrumentId.MMSE]),
           profile=_profile, data=st.data())
    def test_cognitive_monotonic(self, instrument, profile, data):
        scores = _score_range(instrument)
        low, high = sorted([data.draw(scores), data.draw(scores)])
        context = ScoringContext(profile=profile, reference_instant=NOW)
        assert (RISK.calculate_risk(instrument, high, context).risk_percentage
                <= RISK.calculate_risk(instrument, low, context).risk_percentage)

    @given(instrument=st.sampled_from([InstrumentId.PHQ9, InstrumentId.PARKINSONS]),
           profile=_profile, data=st.data())
    def test_symptom_monotonic(self, instrument, profile, data):
        scores = _score_range(instrument)
        low, high = sorted([data.draw(scores), data.draw(scores)])
        context = ScoringContext(profile=profile, reference_instant=NOW)
        assert (RISK.calculate_risk(instrument, high, context).risk_percentage
                >= RISK.calculate_risk(instrument, low, context).risk_percentage)

    @given(instrument=st.sampled_from(list(InstrumentId)), profile=_profile, data=st.data())
    def test_risk_bounded(self, instrument, profile, data):
        score = data.draw(_score_range(instrument))
        context = ScoringContext(profile=profile, reference_instant=NOW)
        assessment = RISK.calculate_risk(instrument, score, context)
        ci = assessment.confidence_interval
        assert Decimal(0) <= assessment.risk_percentage <= Decimal(100)
        assert Decimal(0) <= ci.lower <= assessment.risk_percentage <= ci.upper <= Decimal(100)


# ── Engine ────────────────────────────────────────────────────────────────────

class TestEngineProperties:
    """Property-based tests for ScreeningEngine."""

    @h_settings(max_examples=50)
    @given(items=_phq9_items, profile=_profile)
    def test_deterministic(self, items, profile):
        first = ENGINE.score("phq9", _phq9_responses(items), profile, NOW)
        second = ENGINE.score("phq9", _phq9_responses(items), profile, NOW)
        assert first == second
        assert first.to_dict() == second.to_dict()

    @h_settings(max_examples=50)
    @given(items=_phq9_items, item9=st.integers(min_value=1, max_value=3), profile=_profile)
    def test_self_harm_always_urgent(self, items, item9, profile):
        items[8] = item9
        result = ENGINE.score("phq9", _phq9_responses(items), profile, NOW)
        assert result.suicidal_ideation
        assert any(r.priority == Priority.URGENT for r in result.recommendations)

    @h_settings(max_examples=50)
    @given(instrument=_option_instrument, profile=_profile, data=st.data())
    def test_no_duplicate_ids(self, instrument, profile, data):
        definition = CATALOG.get_definition(instrument)
        answers = [
            Response(question_id=q.id, answer=data.draw(st.integers(min_value=0, max_value=4)))
            for q in definition.questions
        ]
        result = ENGINE.score(instrument, answers, profile, NOW)
        ids = [r.id for r in result.recommendations]
        assert len(ids) == len(set(ids))


# ── Utility properties ────────────────────────────────────────────────────────

class TestUtilityProperties:
    """Property-based tests for scoring utilities."""

    @given(
        pairs=st.lists(
            st.tuples(
                st.decimals(min_value=0, max_value=100, places=2),
                st.decimals(min_value="0.01", max_value=1, places=2),
            ),
            min_size=1,
            max_size=6,
        )
    )
    def test_weighted_mean_bounds(self, pairs):
        values = [v for v, _ in pairs]
        weights = [w for _, w in pairs]
        mean = weighted_mean(values, weights)
        assert min(values) - Decimal("0.0001") <= mean <= max(values) + Decimal("0.0001")

    @given(x=st.decimals(min_value=-10, max_value=40, places=2))
    def test_interpolate_within_endpoints(self, x):
        points = [(Decimal(0), Decimal(95)), (Decimal(17), Decimal(40)), (Decimal(30), Decimal(1))]
        y = interpolate(points, x)
        assert Decimal(1) <= y <= Decimal(95)
