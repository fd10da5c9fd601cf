"""Clinical screening scoring and risk-assessment engine."""
from screening.engine import ScreeningEngine

__all__ = ["ScreeningEngine"]
