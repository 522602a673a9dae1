"""
Exceptions raised by the locator resolution engine.

Failed resolutions (no match, ambiguous match) are returned as outcomes,
not raised. Only conditions that invalidate the current call are exceptions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pinpoint.layers.intelligence.outcome import ResolutionOutcome


class PinpointError(Exception):
    """Base exception for all Pinpoint errors."""

    pass


class DetachedNodeError(PinpointError):
    """The document snapshot went stale while it was being queried."""

    pass


class InvalidLocatorError(PinpointError, ValueError):
    """A LocatorSpec or locator string cannot be used for resolution."""

    pass


class ConfigError(PinpointError, ValueError):
    """Resolver configuration is malformed."""

    pass


class SnapshotError(PinpointError):
    """A live page could not be captured into a document snapshot."""

    pass


class ResolutionError(PinpointError):
    """Resolution ended without a unique node where one was required."""

    def __init__(self, outcome: "ResolutionOutcome"):
        self.outcome = outcome
        super().__init__(outcome.summary())
