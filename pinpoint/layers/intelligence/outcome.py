"""
Resolution outcomes.

Every strategy attempt is recorded as a StrategyResult so that a failed
resolution can say exactly which strategies ran and what each one found.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pinpoint.core.exceptions import ResolutionError
from pinpoint.layers.sense.tree import Node


@dataclass
class StrategyResult:
    """Outcome of applying one strategy."""
    strategy: str
    nodes: List[Node] = field(default_factory=list)
    applicable: bool = True  # False when the spec gave the strategy nothing to work with
    narrowed_count: Optional[int] = None  # Candidates left after anchoring to the ancestor
    detail: str = ""

    @property
    def count(self) -> int:
        """Candidate count after any anchoring."""
        return self.narrowed_count if self.narrowed_count is not None else len(self.nodes)

    @classmethod
    def skipped(cls, strategy: str, detail: str) -> "StrategyResult":
        return cls(strategy=strategy, applicable=False, detail=detail)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "applicable": self.applicable,
            "candidates": len(self.nodes),
            "narrowed": self.narrowed_count,
            "detail": self.detail,
        }


@dataclass
class ResolutionOutcome:
    """Base outcome; check `success` or the concrete type."""
    attempts: List[StrategyResult]

    success = False
    kind = "outcome"

    @property
    def strategies_attempted(self) -> List[str]:
        return [a.strategy for a in self.attempts if a.applicable]

    def summary(self) -> str:
        raise NotImplementedError

    def unwrap(self) -> Node:
        """Return the resolved node or raise ResolutionError."""
        raise ResolutionError(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.kind,
            "summary": self.summary(),
            "attempts": [a.to_dict() for a in self.attempts],
        }


@dataclass
class ResolutionSuccess(ResolutionOutcome):
    node: Node = None
    strategy: str = ""

    success = True
    kind = "success"

    def summary(self) -> str:
        return f"Resolved {self.node.describe()} at {self.node.selector!r} via {self.strategy}"

    def unwrap(self) -> Node:
        return self.node

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["strategy"] = self.strategy
        data["node"] = self.node.to_dict()
        return data


@dataclass
class AmbiguousMatch(ResolutionOutcome):
    candidate_count: int = 0

    kind = "ambiguous"

    def summary(self) -> str:
        tried = ", ".join(self.strategies_attempted) or "none"
        return f"Ambiguous: {self.candidate_count} candidates, no strategy narrowed to one (tried: {tried})"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["candidate_count"] = self.candidate_count
        return data


@dataclass
class NoMatch(ResolutionOutcome):
    kind = "no_match"

    def summary(self) -> str:
        tried = ", ".join(self.strategies_attempted) or "none"
        return f"No match (tried: {tried})"
