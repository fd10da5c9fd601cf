"""Per-invocation inputs: responses, user profile and scoring context."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import Gender


class Response(BaseModel):
    """One answer as captured by the assessment session."""
    model_config = ConfigDict(frozen=True)

    question_id: str = Field(..., min_length=1)
    answer: Any = None
    timestamp: Optional[datetime] = None


class UserProfile(BaseModel):
    """Demographics that feed score adjustments and risk deltas."""
    model_config = ConfigDict(frozen=True)

    age: int = Field(..., ge=0, le=130)
    years_of_education: int = Field(..., ge=0, le=30)
    gender: Optional[Gender] = None
    language: str = Field(default="es", min_length=2, max_length=5)


class ScoringContext(BaseModel):
    """Profile plus the reference instant used for orientation checks."""
    model_config = ConfigDict(frozen=True)

    profile: UserProfile
    reference_instant: datetime
