"""Assessment result returned for one scored instrument."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

from screening.models.enums import InstrumentId, RiskCategory
from screening.models.recommendation import Recommendation
from screening.scoring.aggregator import SectionScore
from screening.scoring.diagnostics import ScoringWarning
from screening.scoring.risk_calculator import RiskAssessment


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class CompletionInfo:
    """How much of the instrument the response set covered."""

    answered: int
    total_questions: int
    completion_rate: Decimal
    completed_at: datetime

    @property
    def is_complete(self) -> bool:
        return self.total_questions > 0 and self.answered >= self.total_questions

    def to_dict(self) -> dict:
        return {
            "answered": self.answered,
            "total_questions": self.total_questions,
            "completion_rate": float(self.completion_rate),
            "is_complete": self.is_complete,
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass(frozen=True)
class AssessmentResult:
    """Complete scoring outcome for one instrument and one person."""

    instrument: InstrumentId
    raw_score: Decimal
    adjusted_score: Decimal
    max_score: Decimal
    section_scores: tuple[SectionScore, ...]
    risk: RiskAssessment
    completion: CompletionInfo
    recommendations: tuple[Recommendation, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)
    warnings: tuple[ScoringWarning, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        object.__setattr__(self, "section_scores", tuple(self.section_scores))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def category(self) -> RiskCategory:
        return self.risk.category

    @property
    def risk_percentage(self) -> Decimal:
        return self.risk.risk_percentage

    @property
    def suicidal_ideation(self) -> bool:
        return bool(self.metadata.get("suicidal_ideation", False))

    def section(self, section_id: str) -> Optional[SectionScore]:
        for section in self.section_scores:
            if section.section_id == section_id:
                return section
        return None

    def to_dict(self) -> dict:
        return {
            "instrument": self.instrument.value,
            "raw_score": float(self.raw_score),
            "adjusted_score": float(self.adjusted_score),
            "max_score": float(self.max_score),
            "section_scores": [s.to_dict() for s in self.section_scores],
            "risk": self.risk.to_dict(),
            "completion": self.completion.to_dict(),
            "recommendations": [r.model_dump(mode="json") for r in self.recommendations],
            "metadata": _thaw(self.metadata),
            "warnings": [w.to_dict() for w in self.warnings],
        }
