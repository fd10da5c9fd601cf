"""Aggregator: responses → section scores → raw and adjusted score.

Formula
-------
  sum:           raw = Σ section_score_i
  weighted_sum:  raw = Σ section_score_i × weight_i

  adjusted = clamp(raw + Σ applicable adjustments, min_score, max_score)

Adjustments are skipped when no response could be scored, so an empty
session stays at zero.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from screening.models.instrument import InstrumentDefinition, Question
from screening.models.response import Response, ScoringContext
from screening.scoring.diagnostics import WarningCollector
from screening.scoring.response_scorer import ResponseScorer, is_blank
from screening.scoring.utils import clamp, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SectionScore:
    """Score for one declared section."""

    section_id: str
    score: Decimal
    max_score: Decimal
    weight: Decimal = Decimal(1)

    @property
    def weighted_score(self) -> Decimal:
        return self.score * self.weight

    def to_dict(self) -> dict:
        return {
            "section_id": self.section_id,
            "score": float(self.score),
            "max_score": float(self.max_score),
            "weight": float(self.weight),
            "weighted_score": float(self.weighted_score),
        }


@dataclass(frozen=True)
class AggregateScore:
    """Aggregation output for one instrument."""

    instrument: str
    raw_score: Decimal
    adjusted_score: Decimal
    min_score: Decimal
    max_score: Decimal
    section_scores: tuple[SectionScore, ...]
    item_scores: dict[str, Decimal] = field(default_factory=dict)
    applied_adjustments: tuple[str, ...] = ()
    answered: int = 0
    total_questions: int = 0

    def section(self, section_id: str) -> Optional[SectionScore]:
        for section in self.section_scores:
            if section.section_id == section_id:
                return section
        return None

    def to_dict(self) -> dict:
        return {
            "instrument": self.instrument,
            "raw_score": float(self.raw_score),
            "adjusted_score": float(self.adjusted_score),
            "max_score": float(self.max_score),
            "answered": self.answered,
            "total_questions": self.total_questions,
            "applied_adjustments": list(self.applied_adjustments),
        }


def resolve_section(definition: InstrumentDefinition, question: Question) -> Optional[str]:
    """Explicit section first, then the first section whose marker occurs in the id."""
    if question.section is not None:
        return question.section
    for section in definition.sections:
        if any(marker in question.id for marker in section.markers):
            return section.id
    return None


class ScoreAggregator:
    """Group scored responses into sections and total them.

    Parameters
    ----------
    scorer:
        Response scorer used for each response (a default one if omitted).
    """

    def __init__(self, scorer: Optional[ResponseScorer] = None) -> None:
        self.scorer = scorer if scorer is not None else ResponseScorer()
        logger.info("score_aggregator_initialized")

    def aggregate(
        self,
        definition: InstrumentDefinition,
        responses: Sequence[Response],
        context: ScoringContext,
        warnings: Optional[WarningCollector] = None,
    ) -> AggregateScore:
        """Score every response and build section, raw and adjusted scores.

        Args:
            definition: Instrument being scored.
            responses: Captured responses, in capture order.
            context: Profile and reference instant.
            warnings: Collector for non-fatal issues.

        Returns:
            AggregateScore with clamped adjusted score.
        """
        warnings = warnings if warnings is not None else WarningCollector(definition.id.value)

        # ── 1. Latest response per question ──────────────────────────────────
        latest: dict[str, Response] = {}
        for response in responses:
            if response.question_id in latest:
                warnings.warn("duplicate_response",
                              "question answered more than once; keeping the last answer",
                              response.question_id)
            latest[response.question_id] = response

        # ── 2. Score and assign to sections ─────────────────────────────────
        totals: dict[str, Decimal] = {s.id: Decimal(0) for s in definition.sections}
        item_scores: dict[str, Decimal] = {}
        answered = 0
        for question_id, response in latest.items():
            question = definition.get_question(question_id)
            if question is None:
                warnings.warn("unknown_question", "response references no catalog question",
                              question_id)
                continue
            section_id = resolve_section(definition, question)
            if section_id is None:
                warnings.warn("unassigned_section", "question matches no section", question_id)
                continue
            points = self.scorer.score(response, question, context, warnings)
            item_scores[question_id] = points
            totals[section_id] += points
            if not is_blank(response.answer):
                answered += 1

        # ── 3. Section scores and raw score ──────────────────────────────────
        config = definition.scoring
        section_scores = []
        for entry in config.sections:
            score = totals.get(entry.section_id, Decimal(0))
            if score > entry.max_score:
                warnings.warn("section_over_max",
                              f"section '{entry.section_id}' scored {score} above its "
                              f"maximum {entry.max_score}")
            section_scores.append(SectionScore(
                section_id=entry.section_id,
                score=score,
                max_score=entry.max_score,
                weight=entry.weight,
            ))

        if config.formula == "weighted_sum":
            raw = sum((s.weighted_score for s in section_scores), Decimal(0))
        else:
            raw = sum((s.score for s in section_scores), Decimal(0))

        # ── 4. Declared adjustments ──────────────────────────────────────────
        adjusted = raw
        applied = []
        if answered > 0:
            profile = context.profile
            for adjustment in config.adjustments:
                if adjustment.applies_to(getattr(profile, adjustment.field)):
                    adjusted += adjustment.points
                    applied.append(adjustment.description or adjustment.field)

        # ── 5. Clamp ─────────────────────────────────────────────────────────
        adjusted = clamp(adjusted, config.min_score, config.max_score)

        result = AggregateScore(
            instrument=definition.id.value,
            raw_score=to_decimal(raw, 2),
            adjusted_score=to_decimal(adjusted, 2),
            min_score=config.min_score,
            max_score=config.max_score,
            section_scores=tuple(section_scores),
            item_scores=item_scores,
            applied_adjustments=tuple(applied),
            answered=answered,
            total_questions=len(definition.questions),
        )
        logger.info("score_aggregated", **result.to_dict())
        return result
