"""Named formulas for ``calculated`` scoring rules.

Formulas
--------
  serial_subtraction:
      expected_i = start − step × i            (i = 1 … count)
      correct    = #{ i : answer_i == expected_i }   (positional)
      points     = points_table[correct]  if a table is declared
                 = correct                 otherwise

  word_count_threshold:
      points = points  if distinct words ≥ min_words  else 0

  count_threshold:
      points = points  if count ≥ min_count  else 0
"""
import re
from decimal import Decimal
from typing import Any, Mapping

from screening.exceptions import InvalidAnswer
from screening.models.response import ScoringContext
from screening.scoring.registry import ScoringFunctionRegistry
from screening.scoring.utils import as_number, normalize_text

_WORD_SPLIT = re.compile(r"[\s,;]+")


def _sequence(answer: Any, keys: tuple[str, ...] = ("values", "responses")) -> list:
    if isinstance(answer, dict):
        for key in keys:
            if key in answer:
                answer = answer[key]
                break
        else:
            raise InvalidAnswer(f"expected one of {keys} in structured answer")
    if isinstance(answer, (list, tuple)):
        return list(answer)
    if isinstance(answer, str):
        return [part for part in _WORD_SPLIT.split(answer) if part]
    if answer is None:
        return []
    return [answer]


def serial_subtraction(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    start = int(params.get("start", 100))
    step = int(params.get("step", 7))
    count = int(params.get("count", 5))
    expected = [Decimal(start - step * i) for i in range(1, count + 1)]

    given = _sequence(answer)[:count]
    correct = sum(
        1 for value, target in zip(given, expected) if as_number(value) == target
    )

    table = params.get("points_table")
    if table:
        return Decimal(str(table[min(correct, len(table) - 1)]))
    return Decimal(correct)


def word_count_threshold(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    min_words = int(params.get("min_words", 11))
    points = Decimal(str(params.get("points", 1)))
    words = {normalize_text(w) for w in _sequence(answer, ("words",)) if str(w).strip()}
    return points if len(words) >= min_words else Decimal(0)


def count_threshold(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    key = params.get("key", "correct_responses")
    if isinstance(answer, dict):
        answer = answer.get(key)
    count = as_number(answer)
    if count is None:
        raise InvalidAnswer(f"expected a numeric count for '{key}'")
    points = Decimal(str(params.get("points", 1)))
    return points if count >= Decimal(str(params.get("min_count", 1))) else Decimal(0)


def default_formulas() -> ScoringFunctionRegistry:
    """Registry holding every built-in formula."""
    return ScoringFunctionRegistry(
        "formula",
        {
            "serial_subtraction": serial_subtraction,
            "word_count_threshold": word_count_threshold,
            "count_threshold": count_threshold,
        },
    )
