"""
Resolver configuration.

The strategy order is configuration, not policy: hosts that distrust their
tool's built-in locators can move `builtin` below `id`, or drop it.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from pinpoint.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

STRATEGY_IDS: Tuple[str, ...] = (
    "builtin",
    "id",
    "test_attribute",
    "name",
    "attribute",
    "anchored_path",
    "indexed_path",
)

DEFAULT_TEST_ATTRIBUTES: Tuple[str, ...] = ("data-testid", "data-test", "data-qa", "data-cy")

ENV_STRATEGY_ORDER = "PINPOINT_STRATEGY_ORDER"
ENV_TEST_ATTRIBUTES = "PINPOINT_TEST_ATTRIBUTES"


@dataclass
class ResolverConfig:
    """Configuration for the strategy chain."""
    strategy_order: Tuple[str, ...] = STRATEGY_IDS
    test_attributes: Tuple[str, ...] = DEFAULT_TEST_ATTRIBUTES
    generic_attributes: Optional[Tuple[str, ...]] = None  # None: any attribute not claimed above
    builtin_handlers: Optional[Dict[str, Callable]] = None  # None: Selenium-style link text handlers

    def __post_init__(self) -> None:
        self.strategy_order = tuple(_normalize(self.strategy_order))
        self.test_attributes = tuple(_normalize(self.test_attributes))
        if self.generic_attributes is not None:
            self.generic_attributes = tuple(_normalize(self.generic_attributes))
        self.validate()

    def validate(self) -> None:
        """
        Check the strategy order.

        Raises:
            ConfigError: on unknown, duplicate or missing strategy ids
        """
        if not self.strategy_order:
            raise ConfigError("strategy_order must name at least one strategy")
        unknown = [s for s in self.strategy_order if s not in STRATEGY_IDS]
        if unknown:
            raise ConfigError(f"Unknown strategies {unknown}; expected any of {list(STRATEGY_IDS)}")
        duplicates = sorted({s for s in self.strategy_order if self.strategy_order.count(s) > 1})
        if duplicates:
            raise ConfigError(f"Strategies listed more than once: {duplicates}")
        if "id" in self.test_attributes or "name" in self.test_attributes:
            raise ConfigError("test_attributes cannot include 'id' or 'name'")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ResolverConfig":
        """
        Build a config from PINPOINT_* environment variables.

        Both variables are comma-separated lists. Keyword overrides win.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        order = environ.get(ENV_STRATEGY_ORDER, "").strip()
        if order:
            values["strategy_order"] = _split(order)
            logger.info(f"[ResolverConfig] Strategy order from environment: {order}")

        test_attrs = environ.get(ENV_TEST_ATTRIBUTES, "").strip()
        if test_attrs:
            values["test_attributes"] = _split(test_attrs)

        values.update(overrides)
        return cls(**values)

    def to_dict(self) -> Dict[str, object]:
        return {
            "strategy_order": list(self.strategy_order),
            "test_attributes": list(self.test_attributes),
            "generic_attributes": list(self.generic_attributes) if self.generic_attributes is not None else None,
            "builtin_handlers": sorted(self.builtin_handlers) if self.builtin_handlers is not None else None,
        }


def _split(raw: str) -> List[str]:
    return [part for part in (p.strip() for p in raw.split(",")) if part]


def _normalize(values: Iterable[str]) -> List[str]:
    if isinstance(values, str):
        values = _split(values)
    return [v.strip().lower() for v in values if v and v.strip()]
