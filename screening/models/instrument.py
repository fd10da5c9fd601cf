"""Instrument definition models.

Definitions are plain data: every per-question behaviour that is not a
simple option value or lookup table is referenced by *name* (a formula
or strategy key) and resolved by the scorer at evaluation time.
"""
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .enums import Gender, InstrumentId, RiskAlgorithm, RiskCategory


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class QuestionOption(_Frozen):
    """A selectable answer with its point value."""
    value: Union[int, str]
    score: Decimal
    label: str = ""


# ── Scoring rules (tagged by ``type``) ─────────────────────────────────────

class DirectRule(_Frozen):
    """Score is the selected option's value, or ``points`` when no options."""
    type: Literal["direct"] = "direct"
    points: Decimal = Decimal(1)


class LookupRule(_Frozen):
    """Normalized text looked up in a table of accepted answers."""
    type: Literal["lookup"] = "lookup"
    table: dict[str, Decimal]
    match: Literal["exact", "contains"] = "exact"
    accent_insensitive: bool = False


class CalculatedRule(_Frozen):
    """Named formula evaluated over the structured answer."""
    type: Literal["calculated"] = "calculated"
    formula: str
    params: dict[str, Any] = Field(default_factory=dict)


class CustomRule(_Frozen):
    """Named strategy resolved through the strategy registry."""
    type: Literal["custom"] = "custom"
    strategy: str
    params: dict[str, Any] = Field(default_factory=dict)


ScoringRule = Annotated[
    Union[DirectRule, LookupRule, CalculatedRule, CustomRule],
    Field(discriminator="type"),
]


class Question(_Frozen):
    """One scorable item of an instrument."""
    id: str
    text: str = ""
    rule: Optional[ScoringRule] = None
    options: tuple[QuestionOption, ...] = ()
    section: Optional[str] = None


class Section(_Frozen):
    """A named group of questions.

    ``markers`` are question-id fragments used to assign questions that
    carry no explicit ``section``.
    """
    id: str
    name: str
    markers: tuple[str, ...] = ()


# ── Scoring configuration ───────────────────────────────────────────────────

class SectionScoring(_Frozen):
    section_id: str
    max_score: Decimal = Field(..., ge=0)
    weight: Decimal = Field(default=Decimal(1), gt=0)


class ScoreAdjustment(_Frozen):
    """Additive adjustment applied when a profile field meets a threshold."""
    field: Literal["age", "years_of_education"]
    operator: Literal["<", "<=", ">", ">=", "=="]
    threshold: int
    points: Decimal
    description: str = ""

    def applies_to(self, value: int) -> bool:
        if self.operator == "<":
            return value < self.threshold
        if self.operator == "<=":
            return value <= self.threshold
        if self.operator == ">":
            return value > self.threshold
        if self.operator == ">=":
            return value >= self.threshold
        return value == self.threshold


class ScoringConfig(_Frozen):
    min_score: Decimal = Decimal(0)
    max_score: Decimal
    sections: tuple[SectionScoring, ...]
    adjustments: tuple[ScoreAdjustment, ...] = ()
    formula: Literal["sum", "weighted_sum"] = "sum"

    @property
    def section_max_total(self) -> Decimal:
        return sum((s.max_score for s in self.sections), Decimal(0))


# ── Risk mapping ────────────────────────────────────────────────────────────

class RiskRange(_Frozen):
    """Score band with its category and nominal risk at either end."""
    category: RiskCategory
    score_min: Decimal
    score_max: Decimal
    risk_from: Decimal = Field(..., ge=0, le=100)
    risk_to: Decimal = Field(..., ge=0, le=100)


class RiskBreakpoint(_Frozen):
    score: Decimal
    risk: Decimal = Field(..., ge=0, le=100)


class RiskMapping(_Frozen):
    """How a score becomes a risk percentage and category.

    ``breakpoints`` are ordered by ascending score; ``low_cut`` and
    ``moderate_cut`` re-derive the category after demographic deltas.
    """
    algorithm: RiskAlgorithm
    ranges: tuple[RiskRange, ...]
    breakpoints: tuple[RiskBreakpoint, ...]
    low_cut: Decimal
    moderate_cut: Decimal
    confidence_width: Decimal = Decimal(10)
    strategy: Optional[str] = None


class DemographicBand(_Frozen):
    """Inclusive value band carrying a percentage-point delta."""
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    delta: Decimal

    def matches(self, value: int) -> bool:
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True


class DemographicAdjustments(_Frozen):
    """Ordered delta tables; the first matching band wins."""
    age: tuple[DemographicBand, ...] = ()
    education: tuple[DemographicBand, ...] = ()
    gender: dict[Gender, Decimal] = Field(default_factory=dict)


class InstrumentDefinition(_Frozen):
    """Complete, read-only definition of one screening instrument."""
    id: InstrumentId
    name: str
    description: str = ""
    sections: tuple[Section, ...]
    questions: tuple[Question, ...]
    scoring: ScoringConfig
    risk_mapping: RiskMapping
    demographics: DemographicAdjustments = DemographicAdjustments()

    _questions_by_id: dict[str, Question] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._questions_by_id = {q.id: q for q in self.questions}

    @property
    def max_score(self) -> Decimal:
        return self.scoring.max_score

    def get_question(self, question_id: str) -> Optional[Question]:
        return self._questions_by_id.get(question_id)

    def section_scoring(self, section_id: str) -> Optional[SectionScoring]:
        for entry in self.scoring.sections:
            if entry.section_id == section_id:
                return entry
        return None
