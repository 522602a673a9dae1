"""Intelligence Layer - Strategy chain and resolver."""

from pinpoint.layers.intelligence.outcome import (
    AmbiguousMatch,
    NoMatch,
    ResolutionOutcome,
    ResolutionSuccess,
    StrategyResult,
)
from pinpoint.layers.intelligence.resolver import LocatorResolver, resolve

__all__ = [
    "AmbiguousMatch",
    "LocatorResolver",
    "NoMatch",
    "ResolutionOutcome",
    "ResolutionSuccess",
    "StrategyResult",
    "resolve",
]
