"""Named registry of scoring functions.

Questions reference formulas and strategies by string key; the registry
resolves the key to a pure function ``fn(answer, params, context)``
returning a Decimal number of points.
"""
from decimal import Decimal
from typing import Any, Callable, Iterator, Mapping, Optional

from screening.models.response import ScoringContext

ScoringFunction = Callable[[Any, Mapping[str, Any], ScoringContext], Decimal]


class ScoringFunctionRegistry:
    """Read-mostly mapping from names to scoring functions.

    Parameters
    ----------
    kind:
        Human label used in error messages ("formula", "strategy").
    functions:
        Initial name → function entries.
    """

    def __init__(
        self,
        kind: str,
        functions: Optional[Mapping[str, ScoringFunction]] = None,
    ) -> None:
        self.kind = kind
        self._functions: dict[str, ScoringFunction] = {}
        for name, fn in (functions or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: ScoringFunction) -> None:
        """Add a function under ``name``.

        Raises:
            ValueError: If the name is already registered.
        """
        if name in self._functions:
            raise ValueError(f"{self.kind} '{name}' is already registered")
        self._functions[name] = fn

    def get(self, name: str) -> Optional[ScoringFunction]:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._functions)
