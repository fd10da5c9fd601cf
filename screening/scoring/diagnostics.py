"""Per-invocation collection of non-fatal scoring warnings.

Every warning is appended to the collector owned by the current scoring
call and mirrored to the structured log, so data-quality issues reach
both the caller (via ``AssessmentResult.warnings``) and log aggregation.
"""
from dataclasses import dataclass
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScoringWarning:
    """A data-quality issue found while scoring."""

    code: str
    message: str
    instrument: Optional[str] = None
    question_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "instrument": self.instrument,
            "question_id": self.question_id,
        }


class WarningCollector:
    """Buffer of warnings for one scoring call. Not shared between calls."""

    def __init__(self, instrument: Optional[str] = None) -> None:
        self.instrument = instrument
        self._warnings: list[ScoringWarning] = []

    def warn(self, code: str, message: str, question_id: Optional[str] = None) -> None:
        warning = ScoringWarning(
            code=code,
            message=message,
            instrument=self.instrument,
            question_id=question_id,
        )
        self._warnings.append(warning)
        logger.warning("scoring_warning", **warning.to_dict())

    @property
    def warnings(self) -> tuple[ScoringWarning, ...]:
        return tuple(self._warnings)

    def codes(self) -> list[str]:
        return [w.code for w in self._warnings]

    def __len__(self) -> int:
        return len(self._warnings)
