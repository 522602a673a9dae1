"""
LocatorResolver - prioritized strategy resolution.

Tries each strategy in priority order and stops at the first one that
yields exactly one node. A strategy that finds several candidates gets one
more chance when the spec names an ancestor: the ancestor is resolved
(once per call) and the candidates are narrowed to its descendants.
"""

import logging
from typing import Dict, List, Optional, Union

from pinpoint.core.config import ResolverConfig
from pinpoint.core.locator import LocatorSpec, MatchMode, parse_locator
from pinpoint.layers.sense.tree import Document, Node, descendants, is_descendant, matches
from .outcome import AmbiguousMatch, NoMatch, ResolutionOutcome, ResolutionSuccess, StrategyResult
from .strategies.chain import StrategyChain

logger = logging.getLogger(__name__)


class ResolutionContext:
    """
    State for one resolve() call: the root, scope lookups and anchor cache.

    Discarded when the call returns, so nothing is shared between calls.
    """

    def __init__(self, root: Node, resolver: "LocatorResolver"):
        self.root = root
        self._resolver = resolver
        self._anchors: Dict[int, ResolutionOutcome] = {}
        self._scopes: Dict[int, List[Node]] = {}

    def matches_spec(self, node: Node, spec: LocatorSpec) -> bool:
        """Tag, predicate and text tests, ignoring ancestor and index."""
        if not spec.accepts_tag(node.tag):
            return False
        if spec.predicate is not None and not matches(node, spec.predicate):
            return False
        if spec.text:
            wanted = " ".join(spec.text.split())
            text = node.text_content
            if spec.text_mode is MatchMode.CONTAINS:
                return wanted in text
            return text == wanted
        return True

    def scope_roots(self, spec: LocatorSpec) -> List[Node]:
        """
        Nodes whose subtrees may hold the target.

        Without an ancestor constraint this is the root. Otherwise it is
        every node matching the ancestor spec, outermost first, so the
        returned subtrees never overlap.
        """
        if spec.ancestor is None:
            return [self.root]
        key = id(spec.ancestor)
        if key not in self._scopes:
            containers = self.search(spec.ancestor)
            self._scopes[key] = [
                node for node in containers
                if not any(is_descendant(node, other) for other in containers if other is not node)
            ]
        return self._scopes[key]

    def scope_nodes(self, spec: LocatorSpec) -> List[Node]:
        """In-scope nodes accepted by the spec's tag, in document order."""
        return [
            node
            for scope in self.scope_roots(spec)
            for node in descendants(scope)
            if spec.accepts_tag(node.tag)
        ]

    def search(self, spec: LocatorSpec) -> List[Node]:
        """In-scope nodes matching the spec, in document order."""
        return [
            node
            for scope in self.scope_roots(spec)
            for node in descendants(scope)
            if self.matches_spec(node, spec)
        ]

    def resolve_anchor(self, spec: LocatorSpec) -> ResolutionOutcome:
        """Resolve an ancestor spec through the full chain, once per call."""
        key = id(spec)
        if key not in self._anchors:
            self._anchors[key] = self._resolver._resolve(spec, self)
        return self._anchors[key]


class LocatorResolver:
    """
    Resolve a LocatorSpec to a single node.

    Example:
        >>> resolver = LocatorResolver()
        >>> outcome = resolver.resolve(LocatorSpec.where("id", "signup"), document)
        >>> if outcome.success:
        ...     print(outcome.node.selector, outcome.strategy)
    """

    def __init__(
        self,
        config: Optional[ResolverConfig] = None,
        chain: Optional[StrategyChain] = None,
    ):
        """
        Initialize the resolver.

        Args:
            config: Strategy order and attribute sets (defaults apply if None)
            chain: Prebuilt strategy chain; overrides config when given
        """
        self.config = config or ResolverConfig()
        self.chain = chain or StrategyChain.from_config(self.config)

    def resolve(
        self,
        spec: Union[LocatorSpec, str],
        root: Union[Node, Document],
    ) -> ResolutionOutcome:
        """
        Resolve a spec against a tree.

        Args:
            spec: LocatorSpec, or a locator string for parse_locator
            root: Document snapshot or the node to search below

        Returns:
            ResolutionSuccess, AmbiguousMatch or NoMatch

        Raises:
            DetachedNodeError: if the snapshot goes stale during the call
            InvalidLocatorError: if a locator string cannot be parsed
        """
        if isinstance(spec, str):
            spec = parse_locator(spec)
        if isinstance(root, Document):
            root = root.root

        document = root.document
        if document is not None:
            # One probe per call; traversals only check the stale flag
            document.ensure_live(probe=True)
            if document.truncated:
                logger.warning(f"[LocatorResolver] {document!r} is truncated; a unique match may not be unique on the page")

        context = ResolutionContext(root, self)
        outcome = self._resolve(spec, context)
        logger.info(f"[LocatorResolver] {spec}: {outcome.summary()}")
        return outcome

    def _resolve(self, spec: LocatorSpec, context: ResolutionContext) -> ResolutionOutcome:
        attempts: List[StrategyResult] = []
        ambiguous_count: Optional[int] = None

        for strategy in self.chain:
            result = strategy.resolve(spec, context)
            attempts.append(result)
            if not result.applicable:
                logger.debug(f"[LocatorResolver] {strategy.strategy_id}: skipped ({result.detail})")
                continue

            candidates = result.nodes
            if len(candidates) > 1 and spec.ancestor is not None:
                anchor = context.resolve_anchor(spec.ancestor)
                if anchor.success:
                    candidates = [node for node in candidates if is_descendant(node, anchor.node)]
                    result.narrowed_count = len(candidates)

            logger.debug(f"[LocatorResolver] {strategy.strategy_id}: {len(result.nodes)} candidates"
                         + (f", {result.narrowed_count} after anchoring" if result.narrowed_count is not None else ""))

            if len(candidates) == 1:
                return ResolutionSuccess(attempts=attempts, node=candidates[0], strategy=strategy.strategy_id)
            if len(candidates) > 1 and ambiguous_count is None:
                ambiguous_count = len(candidates)

        if ambiguous_count is not None:
            return AmbiguousMatch(attempts=attempts, candidate_count=ambiguous_count)
        return NoMatch(attempts=attempts)


def resolve(
    spec: Union[LocatorSpec, str],
    root: Union[Node, Document],
    config: Optional[ResolverConfig] = None,
) -> ResolutionOutcome:
    """Resolve with a one-off resolver."""
    return LocatorResolver(config).resolve(spec, root)
