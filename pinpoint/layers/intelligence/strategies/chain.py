"""
StrategyChain - ordered list of locator strategies.

Builds the configured strategies in priority order. Adding a strategy means
registering a factory here and listing its id in ResolverConfig.
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional

from pinpoint.core.config import ResolverConfig
from .attribute import GenericAttributeLocator, IdLocator, NameLocator, TestAttributeLocator
from .base import LocatorStrategy
from .builtin import ToolBuiltinLocator
from .path import AnchoredPathLocator, IndexedPathLocator

logger = logging.getLogger(__name__)


def _reserved(config: ResolverConfig) -> List[str]:
    return ["id", "name", *config.test_attributes]


_FACTORIES: Dict[str, Callable[[ResolverConfig], LocatorStrategy]] = {
    "builtin": lambda config: ToolBuiltinLocator(config.builtin_handlers),
    "id": lambda config: IdLocator(),
    "test_attribute": lambda config: TestAttributeLocator(config.test_attributes),
    "name": lambda config: NameLocator(),
    "attribute": lambda config: GenericAttributeLocator(_reserved(config), config.generic_attributes),
    "anchored_path": lambda config: AnchoredPathLocator(),
    "indexed_path": lambda config: IndexedPathLocator(),
}


class StrategyChain:
    """Strategies in the order the resolver tries them."""

    def __init__(self, strategies: List[LocatorStrategy]):
        self.strategies = list(strategies)

    @classmethod
    def from_config(cls, config: Optional[ResolverConfig] = None) -> "StrategyChain":
        config = config or ResolverConfig()
        strategies = [_FACTORIES[strategy_id](config) for strategy_id in config.strategy_order]
        logger.debug(f"[StrategyChain] Built chain: {[s.strategy_id for s in strategies]}")
        return cls(strategies)

    @property
    def ids(self) -> List[str]:
        return [s.strategy_id for s in self.strategies]

    def __iter__(self) -> Iterator[LocatorStrategy]:
        return iter(self.strategies)

    def __len__(self) -> int:
        return len(self.strategies)
