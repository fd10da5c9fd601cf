"""Decimal and text utilities shared by the scoring pipeline.

All score and risk calculations use Decimal arithmetic with explicit
ROUND_HALF_UP quantization so that identical inputs always serialize to
identical results.
"""
import re
import unicodedata
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Optional, Sequence, Tuple

_WHITESPACE = re.compile(r"\s+")


def to_decimal(value: Any, places: int = 4) -> Decimal:
    """Convert a number to Decimal with explicit precision and ROUND_HALF_UP rounding.

    Args:
        value: Numeric value to convert (int, float, str or Decimal).
        places: Number of decimal places to quantize to.

    Returns:
        Decimal with the specified precision.
    """
    if isinstance(value, Decimal):
        return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places,
        rounding=ROUND_HALF_UP,
    )


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal(0),
    max_val: Decimal = Decimal(100),
) -> Decimal:
    """Clamp a Decimal value to [min_val, max_val].

    Args:
        value: Value to clamp.
        min_val: Lower bound (default 0).
        max_val: Upper bound (default 100).

    Returns:
        Clamped Decimal.
    """
    return max(min_val, min(max_val, value))


def weighted_mean(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """Calculate the weighted mean normalized by the total weight present.

        mean = Σ v_i × w_i / Σ w_i

    Args:
        values: Values to average.
        weights: Corresponding weights (need not sum to 1.0).

    Returns:
        Weighted mean, quantized to 4 decimal places; 0 for empty input.

    Raises:
        ValueError: If lengths differ.
    """
    if len(values) != len(weights):
        raise ValueError("Values and weights must have the same length")
    if not values:
        return Decimal(0)
    total_weight = sum(weights, Decimal(0))
    if total_weight == Decimal(0):
        return Decimal(0)
    total = sum((v * w for v, w in zip(values, weights)), Decimal(0))
    return (total / total_weight).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)


def interpolate(points: Sequence[Tuple[Decimal, Decimal]], x: Decimal) -> Decimal:
    """Piecewise-linear interpolation over points sorted by ascending x.

    Values outside the covered range take the nearest end point.

    Raises:
        ValueError: If no points are given.
    """
    if not points:
        raise ValueError("At least one breakpoint is required")
    if x <= points[0][0]:
        return points[0][1]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if x <= x1:
            if x1 == x0:
                return y1
            return y0 + (x - x0) / (x1 - x0) * (y1 - y0)
    return points[-1][1]


def as_number(value: Any) -> Optional[Decimal]:
    """Best-effort numeric reading of an answer (bool → 0/1, numeric text → number)."""
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, (int, Decimal)):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except ArithmeticError:
            return None
    else:
        return None
    return number if number.is_finite() else None


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(value: Any, accent_insensitive: bool = False) -> str:
    """Case-fold, trim and collapse whitespace; optionally drop accents."""
    text = _WHITESPACE.sub(" ", str(value)).strip().casefold()
    if accent_insensitive:
        text = strip_accents(text)
    return text
