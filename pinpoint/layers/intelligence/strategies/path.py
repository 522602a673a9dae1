"""
Path strategies, tried after every attribute strategy.

AnchoredPathLocator searches below a uniquely resolved ancestor.
IndexedPathLocator picks the n-th candidate and is the last resort.
"""

from typing import TYPE_CHECKING, List

from pinpoint.layers.intelligence.outcome import StrategyResult
from pinpoint.layers.sense.tree import Node, descendants
from .base import LocatorStrategy

if TYPE_CHECKING:
    from pinpoint.core.locator import LocatorSpec
    from pinpoint.layers.intelligence.resolver import ResolutionContext


class AnchoredPathLocator(LocatorStrategy):
    strategy_id = "anchored_path"

    def resolve(self, spec: "LocatorSpec", context: "ResolutionContext") -> StrategyResult:
        if spec.ancestor is None:
            return StrategyResult.skipped(self.strategy_id, "no ancestor constraint")

        anchor = context.resolve_anchor(spec.ancestor)
        if not anchor.success:
            return StrategyResult(
                strategy=self.strategy_id,
                detail=f"ancestor {spec.ancestor} unresolved: {anchor.kind}",
            )

        nodes = [node for node in descendants(anchor.node) if context.matches_spec(node, spec)]
        return StrategyResult(
            strategy=self.strategy_id,
            nodes=nodes,
            detail=f"anchored at {anchor.node.selector}",
        )


class IndexedPathLocator(LocatorStrategy):
    strategy_id = "indexed_path"

    def resolve(self, spec: "LocatorSpec", context: "ResolutionContext") -> StrategyResult:
        if spec.index is None:
            return StrategyResult.skipped(self.strategy_id, "no index given")

        candidates: List[Node]
        scope = "document"
        if spec.ancestor is not None:
            anchor = context.resolve_anchor(spec.ancestor)
            if anchor.success:
                candidates = [n for n in descendants(anchor.node) if context.matches_spec(n, spec)]
                scope = anchor.node.selector
            else:
                candidates = context.search(spec)
        else:
            candidates = context.search(spec)

        if spec.index >= len(candidates):
            return StrategyResult(
                strategy=self.strategy_id,
                detail=f"index {spec.index} out of range ({len(candidates)} candidates in {scope})",
            )
        return StrategyResult(
            strategy=self.strategy_id,
            nodes=[candidates[spec.index]],
            detail=f"index {spec.index} of {len(candidates)} in {scope}",
        )
