"""Exception types raised by the screening engine.

Scoring-time data problems (unknown question ids, malformed answers,
unresolved formulas) are not exceptions: they are collected as
``ScoringWarning`` entries on the result. The errors below cover misuse
of the engine itself.
"""


class ScreeningError(Exception):
    """Base class for screening engine errors."""


class UnknownInstrument(ScreeningError, LookupError):
    """Raised when an instrument id is not present in the catalog."""

    def __init__(self, instrument_id: str) -> None:
        self.instrument_id = instrument_id
        super().__init__(f"Unknown instrument: {instrument_id}")


class CatalogError(ScreeningError, ValueError):
    """Raised when an instrument definition violates a catalog invariant."""


class UnknownStrategy(ScreeningError, LookupError):
    """Raised when a named risk strategy cannot be resolved."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown strategy: {name}")


class InvalidAnswer(ScreeningError, ValueError):
    """Raised by formulas and strategies for answers they cannot read.

    The response scorer turns this into an ``invalid_answer`` warning and
    awards zero points.
    """
