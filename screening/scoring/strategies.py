"""Named strategies for ``custom`` scoring rules.

Strategies cover answers that need more than an option value or a lookup
table: word recall, multi-step commands, temporal orientation and the
placeholder drawing heuristic. Orientation checks compare against the
reference instant carried by the scoring context, never the wall clock.
"""
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from screening.exceptions import InvalidAnswer
from screening.models.response import ScoringContext
from screening.scoring.registry import ScoringFunctionRegistry
from screening.scoring.utils import as_number, normalize_text

_WORD_SPLIT = re.compile(r"[\s,;]+")

# ── Localized calendar names (accent-free, case-folded) ─────────────────────
MONTH_NAMES: dict[str, int] = {
    # es
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4, "mayo": 5, "junio": 6,
    "julio": 7, "agosto": 8, "septiembre": 9, "setiembre": 9, "octubre": 10,
    "noviembre": 11, "diciembre": 12,
    # en
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
}

# Monday == 0, matching date.weekday()
WEEKDAY_NAMES: dict[str, int] = {
    "lunes": 0, "martes": 1, "miercoles": 2, "jueves": 3, "viernes": 4,
    "sabado": 5, "domingo": 6,
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3, "friday": 4,
    "saturday": 5, "sunday": 6,
}

SEASON_NAMES: dict[str, str] = {
    "primavera": "spring", "verano": "summer", "otono": "autumn", "invierno": "winter",
    "spring": "spring", "summer": "summer", "autumn": "autumn", "fall": "autumn",
    "winter": "winter",
}

# Northern-hemisphere meteorological seasons
_SEASON_BY_MONTH: dict[int, str] = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "autumn", 10: "autumn", 11: "autumn",
}
_OPPOSITE_SEASON = {"winter": "summer", "summer": "winter", "spring": "autumn", "autumn": "spring"}


def _points(params: Mapping[str, Any]) -> Decimal:
    return Decimal(str(params.get("points", 1)))


def _reference_date(context: ScoringContext) -> date:
    return context.reference_instant.date()


def _words(answer: Any, keys: Iterable[str]) -> list[str]:
    if isinstance(answer, dict):
        for key in keys:
            if key in answer:
                answer = answer[key]
                break
        else:
            raise InvalidAnswer(f"expected one of {tuple(keys)} in structured answer")
    if isinstance(answer, str):
        return [w for w in _WORD_SPLIT.split(answer) if w]
    if isinstance(answer, (list, tuple, set)):
        return [str(w) for w in answer if str(w).strip()]
    if answer is None:
        return []
    raise InvalidAnswer("expected a word list")


# ── Memory ──────────────────────────────────────────────────────────────────

def recall_match(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    """Case-insensitive, order-independent intersection with the target words."""
    accent_insensitive = bool(params.get("accent_insensitive", False))
    targets = {normalize_text(w, accent_insensitive) for w in params.get("target_words", ())}
    given = {
        normalize_text(w, accent_insensitive)
        for w in _words(answer, params.get("answer_keys", ("recalled_words", "words")))
    }
    return Decimal(len(targets & given))


def multi_step_instruction(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    """Partial credit: one point per distinct completed step, capped."""
    max_steps = int(params.get("max_steps", 3))
    if isinstance(answer, dict):
        answer = answer.get("completed_steps", [])
    if not isinstance(answer, (list, tuple, set)):
        count = as_number(answer)
        if count is None:
            raise InvalidAnswer("expected a list of completed steps")
        return Decimal(max(0, min(int(count), max_steps)))

    completed = {normalize_text(step) for step in answer if str(step).strip()}
    declared = params.get("steps")
    if declared:
        completed &= {normalize_text(step) for step in declared}
    return Decimal(min(len(completed), max_steps))


# ── Orientation ─────────────────────────────────────────────────────────────

def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _candidate_dates(answer: Any, today: date) -> list[date]:
    if isinstance(answer, datetime):
        return [answer.date()]
    if isinstance(answer, date):
        return [answer]
    if isinstance(answer, dict):
        try:
            return [date(
                int(answer.get("year", today.year)),
                int(answer.get("month", today.month)),
                int(answer["day"]),
            )]
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidAnswer(f"unreadable date: {answer!r}") from exc
    if isinstance(answer, str) and "-" in answer:
        try:
            return [date.fromisoformat(answer.strip()[:10])]
        except ValueError as exc:
            raise InvalidAnswer(f"unreadable date: {answer!r}") from exc

    day = as_number(answer)
    if day is None or day != day.to_integral_value() or not 1 <= day <= 31:
        raise InvalidAnswer(f"unreadable day of month: {answer!r}")
    candidates = []
    for offset in (-1, 0, 1):
        year, month = _shift_month(today.year, today.month, offset)
        try:
            candidates.append(date(year, month, int(day)))
        except ValueError:
            continue
    return candidates


def orientation_date(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    """Correct when the stated date is within ``tolerance_days`` of today."""
    tolerance = int(params.get("tolerance_days", 1))
    today = _reference_date(context)
    candidates = _candidate_dates(answer, today)
    if any(abs((candidate - today).days) <= tolerance for candidate in candidates):
        return _points(params)
    return Decimal(0)


def orientation_month(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    number = as_number(answer)
    if number is None:
        month = MONTH_NAMES.get(normalize_text(answer, accent_insensitive=True))
    elif number == number.to_integral_value():
        month = int(number)
    else:
        month = None
    if month is None:
        return Decimal(0)
    return _points(params) if month == _reference_date(context).month else Decimal(0)


def orientation_year(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    year = as_number(answer)
    if year is None:
        raise InvalidAnswer(f"unreadable year: {answer!r}")
    return _points(params) if year == _reference_date(context).year else Decimal(0)


def orientation_weekday(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    weekday = WEEKDAY_NAMES.get(normalize_text(answer, accent_insensitive=True))
    if weekday is None:
        return Decimal(0)
    return _points(params) if weekday == _reference_date(context).weekday() else Decimal(0)


def orientation_season(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    season = SEASON_NAMES.get(normalize_text(answer, accent_insensitive=True))
    if season is None:
        return Decimal(0)
    expected = _SEASON_BY_MONTH[_reference_date(context).month]
    if params.get("hemisphere", "north") == "south":
        expected = _OPPOSITE_SEASON[expected]
    return _points(params) if season == expected else Decimal(0)


# ── Language ────────────────────────────────────────────────────────────────

def sentence_writing(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    """A sentence of at least ``min_length`` characters with terminal punctuation."""
    text = str(answer or "").strip()
    min_length = int(params.get("min_length", 6))
    if len(text) >= min_length and text[-1] in ".!?":
        return _points(params)
    return Decimal(0)


# ── Drawing (placeholder heuristic) ─────────────────────────────────────────

def stroke_count(answer: Any) -> int:
    if isinstance(answer, dict):
        if "stroke_count" in answer:
            count = as_number(answer["stroke_count"])
            if count is None:
                raise InvalidAnswer("stroke_count must be numeric")
            return int(count)
        answer = answer.get("strokes", [])
    if isinstance(answer, (list, tuple)):
        return len(answer)
    count = as_number(answer)
    if count is None:
        raise InvalidAnswer("expected drawing strokes")
    return int(count)


def analyze_drawing(answer: Any, features: Iterable[Mapping[str, Any]]) -> dict[str, bool]:
    """Feature presence by stroke count; stands in for real image analysis."""
    strokes = stroke_count(answer)
    return {str(f["name"]): strokes > int(f["min_strokes"]) for f in features}


def drawing_heuristic(answer: Any, params: Mapping[str, Any], context: ScoringContext) -> Decimal:
    features = analyze_drawing(answer, params.get("features", ()))
    max_points = int(params.get("max_points", len(features)))
    return Decimal(min(sum(features.values()), max_points))


def default_strategies(extra: Optional[Mapping[str, Any]] = None) -> ScoringFunctionRegistry:
    """Registry holding every built-in strategy, plus ``extra`` entries."""
    registry = ScoringFunctionRegistry(
        "strategy",
        {
            "recall_match": recall_match,
            "multi_step_instruction": multi_step_instruction,
            "orientation_date": orientation_date,
            "orientation_month": orientation_month,
            "orientation_year": orientation_year,
            "orientation_weekday": orientation_weekday,
            "orientation_season": orientation_season,
            "sentence_writing": sentence_writing,
            "drawing_heuristic": drawing_heuristic,
        },
    )
    for name, fn in (extra or {}).items():
        registry.register(name, fn)
    return registry
