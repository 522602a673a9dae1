from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pinpoint.layers.intelligence.outcome import StrategyResult

if TYPE_CHECKING:
    from pinpoint.core.locator import LocatorSpec
    from pinpoint.layers.intelligence.resolver import ResolutionContext


class LocatorStrategy(ABC):
    """Abstract base class for locator strategies."""

    strategy_id: str = ""

    @abstractmethod
    def resolve(self, spec: "LocatorSpec", context: "ResolutionContext") -> StrategyResult:
        """
        Find candidate nodes for a spec.

        Args:
            spec: What to find.
            context: The current resolution call (root, scope, anchors).

        Returns:
            StrategyResult: Candidates in document order, or a skipped
            result when the spec gives this strategy nothing to work with.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
