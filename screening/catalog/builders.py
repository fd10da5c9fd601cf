"""Small constructors that keep the instrument data modules readable."""
from decimal import Decimal
from typing import Optional, Sequence, Union

from screening.models.enums import RiskCategory
from screening.models.instrument import (
    DemographicBand,
    DirectRule,
    Question,
    QuestionOption,
    RiskBreakpoint,
    RiskRange,
)

Number = Union[int, str]


def d(value: Number) -> Decimal:
    return Decimal(str(value))


def options(labels: Sequence[str]) -> tuple[QuestionOption, ...]:
    """Options scored 0 … n-1 in order."""
    return tuple(
        QuestionOption(value=i, score=Decimal(i), label=label)
        for i, label in enumerate(labels)
    )


def option_question(
    question_id: str,
    text: str,
    labels: Sequence[str],
    section: Optional[str] = None,
) -> Question:
    return Question(
        id=question_id,
        text=text,
        rule=DirectRule(),
        options=options(labels),
        section=section,
    )


def breakpoints(*pairs: tuple[Number, Number]) -> tuple[RiskBreakpoint, ...]:
    return tuple(RiskBreakpoint(score=d(s), risk=d(r)) for s, r in pairs)


def risk_range(
    category: RiskCategory,
    scores: tuple[Number, Number],
    risks: tuple[Number, Number],
) -> RiskRange:
    return RiskRange(
        category=category,
        score_min=d(scores[0]),
        score_max=d(scores[1]),
        risk_from=d(risks[0]),
        risk_to=d(risks[1]),
    )


def band(
    delta: Number,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> DemographicBand:
    return DemographicBand(min_value=min_value, max_value=max_value, delta=d(delta))
