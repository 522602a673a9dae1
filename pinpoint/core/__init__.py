"""Core module - Locator specs, configuration and driver management."""

from pinpoint.core.locator import LocatorSpec, parse_locator
from pinpoint.core.config import ResolverConfig

__all__ = ["LocatorSpec", "ResolverConfig", "parse_locator"]
