"""Fixed-width confidence intervals around a risk percentage.

Formula
-------
  half_width = base_width(instrument)
             + 3   if age < 40 or age > 80
             + 2   if years_of_education < 8 or > 18

  CI = clamp(risk ± half_width, 0, 100)

Well-validated scales carry narrower base widths (8 points) than the
informant interview (12) and the symptom-severity screen (15).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

import structlog

from screening.models.enums import InstrumentId
from screening.models.response import UserProfile
from screening.scoring.utils import clamp, to_decimal

logger = structlog.get_logger(__name__)

_DEFAULT_WIDTH: Decimal = Decimal(10)

# Central demographic ranges; outside them the interval widens
_AGE_RANGE: tuple[int, int] = (40, 80)
_AGE_WIDENING: Decimal = Decimal(3)
_EDUCATION_RANGE: tuple[int, int] = (8, 18)
_EDUCATION_WIDENING: Decimal = Decimal(2)


@dataclass(frozen=True)
class ConfidenceInterval:
    """Risk-percentage interval."""

    point_estimate: Decimal
    lower: Decimal
    upper: Decimal
    half_width: Decimal

    @property
    def ci_width(self) -> Decimal:
        return self.upper - self.lower

    def to_dict(self) -> dict:
        return {
            "point_estimate": float(self.point_estimate),
            "ci_lower": float(self.lower),
            "ci_upper": float(self.upper),
            "half_width": float(self.half_width),
            "ci_width": float(self.ci_width),
        }


class ConfidenceCalculator:
    """Calculate confidence intervals for risk percentages.

    Parameters
    ----------
    base_widths:
        Per-instrument half widths overriding the ones in the risk mapping.
    """

    def __init__(self, base_widths: Optional[Mapping[InstrumentId, float]] = None) -> None:
        self.base_widths = {
            InstrumentId(k): to_decimal(v, 2) for k, v in (base_widths or {}).items()
        }
        logger.info("confidence_calculator_initialized",
                    overrides=sorted(k.value for k in self.base_widths))

    def half_width(
        self,
        instrument: InstrumentId,
        profile: UserProfile,
        default_width: Optional[Decimal] = None,
    ) -> Decimal:
        width = self.base_widths.get(instrument, default_width or _DEFAULT_WIDTH)
        if not _AGE_RANGE[0] <= profile.age <= _AGE_RANGE[1]:
            width += _AGE_WIDENING
        if not _EDUCATION_RANGE[0] <= profile.years_of_education <= _EDUCATION_RANGE[1]:
            width += _EDUCATION_WIDENING
        return width

    def calculate(
        self,
        risk_percentage: Decimal,
        instrument: InstrumentId,
        profile: UserProfile,
        default_width: Optional[Decimal] = None,
    ) -> ConfidenceInterval:
        """Calculate the interval for one risk estimate.

        Args:
            risk_percentage: Point estimate in [0, 100].
            instrument: Instrument the estimate belongs to.
            profile: Demographics that may widen the interval.
            default_width: Base half width from the instrument's risk mapping.

        Returns:
            ConfidenceInterval bounded to [0, 100].
        """
        half = self.half_width(instrument, profile, default_width)
        ci = ConfidenceInterval(
            point_estimate=risk_percentage,
            lower=to_decimal(clamp(risk_percentage - half), 2),
            upper=to_decimal(clamp(risk_percentage + half), 2),
            half_width=half,
        )
        logger.debug("confidence_interval_calculated", instrument=instrument.value, **ci.to_dict())
        return ci
