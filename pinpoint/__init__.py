"""
Pinpoint - Locator Resolution Engine

Resolves logical element descriptions to exactly one node of a document
tree using a prioritized chain of locator strategies, and explains which
strategy matched or why none did.
"""

__version__ = "0.4.0"

from pinpoint.core.locator import AttributePredicate, LocatorSpec, MatchMode, parse_locator
from pinpoint.core.config import ResolverConfig
from pinpoint.core.exceptions import DetachedNodeError, InvalidLocatorError, PinpointError, ResolutionError
from pinpoint.layers.intelligence import (
    AmbiguousMatch,
    LocatorResolver,
    NoMatch,
    ResolutionOutcome,
    ResolutionSuccess,
    resolve,
)
from pinpoint.layers.sense import Document, Node, snapshot_from_html

__all__ = [
    "AmbiguousMatch",
    "AttributePredicate",
    "DetachedNodeError",
    "Document",
    "InvalidLocatorError",
    "LocatorResolver",
    "LocatorSpec",
    "MatchMode",
    "NoMatch",
    "Node",
    "PinpointError",
    "ResolutionError",
    "ResolutionOutcome",
    "ResolutionSuccess",
    "ResolverConfig",
    "parse_locator",
    "resolve",
    "snapshot_from_html",
    "__version__",
]
