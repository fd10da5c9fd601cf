"""Response Scorer: points for one response under its question's rule.

Dispatch
--------
  direct      → value of the matching option (or ``points`` without options)
  lookup      → normalized text looked up in the rule's table
  calculated  → named formula from the formula registry
  custom      → named strategy from the strategy registry

Unknown formula or strategy names, unreadable answers and missing rules
never raise: they score 0 and record a warning.
"""
from decimal import Decimal
from typing import Any, Callable, Optional

import structlog

from screening.exceptions import InvalidAnswer
from screening.models.enums import ScoringRuleType
from screening.models.instrument import (
    CalculatedRule,
    CustomRule,
    DirectRule,
    LookupRule,
    Question,
)
from screening.models.response import Response, ScoringContext
from screening.scoring.diagnostics import WarningCollector
from screening.scoring.formulas import default_formulas
from screening.scoring.registry import ScoringFunctionRegistry
from screening.scoring.strategies import default_strategies
from screening.scoring.utils import as_number, clamp, normalize_text

logger = structlog.get_logger(__name__)

_Handler = Callable[[Any, Any, Question, ScoringContext, WarningCollector], Decimal]


def is_blank(answer: Any) -> bool:
    """True for answers that carry nothing to score."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    return False


class ResponseScorer:
    """Score single responses.

    Parameters
    ----------
    formulas:
        Registry for ``calculated`` rules (defaults to the built-ins).
    strategies:
        Registry for ``custom`` rules (defaults to the built-ins).
    """

    def __init__(
        self,
        formulas: Optional[ScoringFunctionRegistry] = None,
        strategies: Optional[ScoringFunctionRegistry] = None,
    ) -> None:
        self.formulas = formulas if formulas is not None else default_formulas()
        self.strategies = strategies if strategies is not None else default_strategies()
        self._handlers: dict[ScoringRuleType, _Handler] = {
            ScoringRuleType.DIRECT: self._score_direct,
            ScoringRuleType.LOOKUP: self._score_lookup,
            ScoringRuleType.CALCULATED: self._score_calculated,
            ScoringRuleType.CUSTOM: self._score_custom,
        }
        logger.info(
            "response_scorer_initialized",
            formulas=self.formulas.names(),
            strategies=self.strategies.names(),
        )

    @property
    def supported_rule_types(self) -> frozenset[ScoringRuleType]:
        return frozenset(self._handlers)

    def score(
        self,
        response: Response,
        question: Question,
        context: ScoringContext,
        warnings: Optional[WarningCollector] = None,
    ) -> Decimal:
        """Score one response.

        Args:
            response: The captured answer.
            question: Catalog question the response belongs to.
            context: Profile and reference instant.
            warnings: Collector for non-fatal issues (a private one is used if omitted).

        Returns:
            Points awarded (0 when the rule is missing or the answer unusable).
        """
        warnings = warnings if warnings is not None else WarningCollector()
        rule = question.rule
        if rule is None:
            warnings.warn("missing_rule", "question has no scoring rule", question.id)
            return Decimal(0)
        if is_blank(response.answer):
            return Decimal(0)

        handler = self._handlers[ScoringRuleType(rule.type)]
        try:
            return handler(response.answer, rule, question, context, warnings)
        except InvalidAnswer as exc:
            warnings.warn("invalid_answer", str(exc), question.id)
            return Decimal(0)

    # ── Handlers ────────────────────────────────────────────────────────────

    def _score_direct(
        self,
        answer: Any,
        rule: DirectRule,
        question: Question,
        context: ScoringContext,
        warnings: WarningCollector,
    ) -> Decimal:
        if question.options:
            wanted = as_number(answer)
            for option in question.options:
                value = as_number(option.value)
                if wanted is not None and value is not None:
                    if wanted == value:
                        return option.score
                elif normalize_text(option.value) == normalize_text(answer):
                    return option.score
            return Decimal(0)

        if isinstance(answer, bool):
            return rule.points if answer else Decimal(0)
        number = as_number(answer)
        if number is not None:
            return clamp(number, Decimal(0), rule.points)
        if isinstance(answer, str):
            return rule.points
        raise InvalidAnswer(f"cannot score {type(answer).__name__} answer directly")

    def _score_lookup(
        self,
        answer: Any,
        rule: LookupRule,
        question: Question,
        context: ScoringContext,
        warnings: WarningCollector,
    ) -> Decimal:
        if not isinstance(answer, (str, int)):
            raise InvalidAnswer("lookup answers must be text")
        text = normalize_text(answer, rule.accent_insensitive)
        table = {normalize_text(k, rule.accent_insensitive): v for k, v in rule.table.items()}
        if text in table:
            return table[text]
        if rule.match == "contains":
            for key, points in table.items():
                if key and key in text:
                    return points
        return Decimal(0)

    def _score_calculated(
        self,
        answer: Any,
        rule: CalculatedRule,
        question: Question,
        context: ScoringContext,
        warnings: WarningCollector,
    ) -> Decimal:
        formula = self.formulas.get(rule.formula)
        if formula is None:
            warnings.warn("unknown_formula", f"formula '{rule.formula}' is not registered", question.id)
            return Decimal(0)
        return formula(answer, rule.params, context)

    def _score_custom(
        self,
        answer: Any,
        rule: CustomRule,
        question: Question,
        context: ScoringContext,
        warnings: WarningCollector,
    ) -> Decimal:
        strategy = self.strategies.get(rule.strategy)
        if strategy is None:
            warnings.warn("unknown_strategy", f"strategy '{rule.strategy}' is not registered", question.id)
            return Decimal(0)
        return strategy(answer, rule.params, context)
