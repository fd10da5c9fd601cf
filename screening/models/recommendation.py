"""Recommendation models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    InstrumentId,
    Priority,
    RecommendationCategory,
    RecommendationType,
    RiskCategory,
)


class Resource(BaseModel):
    """Supporting material attached to a recommendation."""
    model_config = ConfigDict(frozen=True)

    title: str
    kind: str = Field(default="website", description="phone | website | document")
    detail: str = ""


class Recommendation(BaseModel):
    """A single actionable recommendation."""
    model_config = ConfigDict(frozen=True)

    id: str
    instrument: Optional[InstrumentId] = None
    risk_level: Optional[RiskCategory] = None
    type: RecommendationType
    category: RecommendationCategory
    priority: Priority
    title: str
    description: str
    action_steps: tuple[str, ...] = ()
    resources: tuple[Resource, ...] = ()
    follow_up_days: int = Field(default=30, ge=0)
    evidence_level: Optional[str] = Field(default=None, description="A | B | C")
