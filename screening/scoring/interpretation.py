"""Instrument-specific interpretation added to a result's metadata.

PHQ-9 severity bands
--------------------
  0-4 minimal · 5-9 mild · 10-14 moderate · 15-19 moderately severe · 20-27 severe

MMSE impairment bands
---------------------
  24-30 normal · 18-23 mild · 12-17 moderate · 0-11 severe
"""
from decimal import Decimal
from typing import Any, Callable, Mapping

from screening.catalog.phq9 import SUICIDE_ITEM_ID
from screening.exceptions import InvalidAnswer
from screening.models.enums import InstrumentId
from screening.models.instrument import CustomRule, InstrumentDefinition
from screening.models.response import Response
from screening.scoring.aggregator import AggregateScore
from screening.scoring.strategies import analyze_drawing

Interpreter = Callable[[InstrumentDefinition, AggregateScore, Mapping[str, Response]], dict]

_PHQ9_SEVERITY = (
    (Decimal(4), "minimal"),
    (Decimal(9), "mild"),
    (Decimal(14), "moderate"),
    (Decimal(19), "moderately_severe"),
)
_PHQ9_IMPAIRMENT = (
    (Decimal(4), "none"),
    (Decimal(9), "mild"),
    (Decimal(14), "moderate"),
)
_MMSE_IMPAIRMENT = (
    (Decimal(24), "normal"),
    (Decimal(18), "mild"),
    (Decimal(12), "moderate"),
)


def _band_up(score: Decimal, bands, fallback: str) -> str:
    for upper, label in bands:
        if score <= upper:
            return label
    return fallback


def _band_down(score: Decimal, bands, fallback: str) -> str:
    for lower, label in bands:
        if score >= lower:
            return label
    return fallback


def phq9_severity(score: Decimal) -> str:
    return _band_up(score, _PHQ9_SEVERITY, "severe")


def _interpret_phq9(definition, aggregate, responses) -> dict:
    score = aggregate.raw_score
    return {
        "severity_level": phq9_severity(score),
        "suicidal_ideation": aggregate.item_scores.get(SUICIDE_ITEM_ID, Decimal(0)) > 0,
        "functional_impairment": _band_up(score, _PHQ9_IMPAIRMENT, "severe"),
    }


def _interpret_moca(definition, aggregate, responses) -> dict:
    drawings: dict[str, Any] = {}
    for question in definition.questions:
        rule = question.rule
        response = responses.get(question.id)
        if response is None or not isinstance(rule, CustomRule):
            continue
        if rule.strategy != "drawing_heuristic":
            continue
        try:
            drawings[question.id] = analyze_drawing(response.answer, rule.params.get("features", ()))
        except InvalidAnswer:
            continue
    return {
        "education_adjustment_applied": bool(aggregate.applied_adjustments),
        "drawing_analysis": drawings,
    }


def _interpret_mmse(definition, aggregate, responses) -> dict:
    return {"impairment_level": _band_down(aggregate.adjusted_score, _MMSE_IMPAIRMENT, "severe")}


def _interpret_ad8(definition, aggregate, responses) -> dict:
    positives = sum(1 for points in aggregate.item_scores.values() if points > 0)
    return {
        "positive_responses": positives,
        "cognitive_impairment_likely": positives >= 2,
        "domain_scores": {s.section_id: float(s.score) for s in aggregate.section_scores},
    }


def _interpret_parkinsons(definition, aggregate, responses) -> dict:
    sections = {s.section_id: float(s.score) for s in aggregate.section_scores}
    return {
        "motor_symptom_score": sections.get("motor", 0.0),
        "non_motor_symptom_score": sections.get("non_motor", 0.0),
        "daily_activities_score": sections.get("daily_activities", 0.0),
        "declared_max_score": float(definition.scoring.max_score),
        "section_max_total": float(definition.scoring.section_max_total),
    }


INTERPRETERS: dict[InstrumentId, Interpreter] = {
    InstrumentId.MOCA: _interpret_moca,
    InstrumentId.PHQ9: _interpret_phq9,
    InstrumentId.MMSE: _interpret_mmse,
    InstrumentId.AD8: _interpret_ad8,
    InstrumentId.PARKINSONS: _interpret_parkinsons,
}


def interpret(
    definition: InstrumentDefinition,
    aggregate: AggregateScore,
    responses: Mapping[str, Response],
) -> dict:
    """Metadata for ``definition``; empty for instruments without an interpreter."""
    interpreter = INTERPRETERS.get(definition.id)
    return interpreter(definition, aggregate, responses) if interpreter else {}
