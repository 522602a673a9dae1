"""
Tool built-in locators.

Automation tools ship their own locator mechanisms (Selenium's link text,
Playwright's role selectors, ...). They are plugged in here as named
handlers so the resolver's control flow never depends on which tool hosts it.

A handler is called as `handler(spec, nodes)` where `nodes` are the
in-scope nodes accepted by the spec's tag. It returns the matching nodes,
or None when the spec is not something the handler understands.
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

from pinpoint.core.locator import MatchMode
from pinpoint.layers.intelligence.outcome import StrategyResult
from pinpoint.layers.sense.tree import Node, matches
from .base import LocatorStrategy

if TYPE_CHECKING:
    from pinpoint.core.locator import LocatorSpec
    from pinpoint.layers.intelligence.resolver import ResolutionContext

logger = logging.getLogger(__name__)

BuiltinHandler = Callable[["LocatorSpec", Iterable[Node]], Optional[List[Node]]]


def _by_text(spec: "LocatorSpec", nodes: Iterable[Node], tag: Optional[str] = None) -> List[Node]:
    wanted = " ".join(spec.text.split())
    found = []
    for node in nodes:
        if tag is not None and node.tag != tag:
            continue
        if spec.predicate is not None and not matches(node, spec.predicate):
            continue
        text = node.text_content
        if (spec.text_mode is MatchMode.EXACT and text == wanted) or (spec.text_mode is MatchMode.CONTAINS and wanted in text):
            found.append(node)
    return found


def _link_text(spec: "LocatorSpec", nodes: Iterable[Node], mode: MatchMode) -> Optional[List[Node]]:
    if not spec.text or spec.text_mode is not mode or spec.tag not in (None, "a"):
        return None
    return _by_text(spec, nodes, tag="a")


def link_text(spec: "LocatorSpec", nodes: Iterable[Node]) -> Optional[List[Node]]:
    """Anchors whose visible text equals spec.text (Selenium's By.LINK_TEXT)."""
    return _link_text(spec, nodes, MatchMode.EXACT)


def partial_link_text(spec: "LocatorSpec", nodes: Iterable[Node]) -> Optional[List[Node]]:
    """Anchors whose visible text contains spec.text (By.PARTIAL_LINK_TEXT)."""
    return _link_text(spec, nodes, MatchMode.CONTAINS)


def element_text(spec: "LocatorSpec", nodes: Iterable[Node]) -> Optional[List[Node]]:
    """
    Elements of spec.tag whose visible text equals (or contains) spec.text.

    Covers text specs for any tag but `a`, like Playwright's `button:has-text()`.
    """
    if not spec.text or spec.tag in (None, "a"):
        return None
    return _by_text(spec, nodes)


DEFAULT_HANDLERS: Dict[str, BuiltinHandler] = {
    "link_text": link_text,
    "partial_link_text": partial_link_text,
    "element_text": element_text,
}


class ToolBuiltinLocator(LocatorStrategy):
    """Runs the first handler that understands the spec."""

    strategy_id = "builtin"

    def __init__(self, handlers: Optional[Dict[str, BuiltinHandler]] = None):
        self.handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def resolve(self, spec: "LocatorSpec", context: "ResolutionContext") -> StrategyResult:
        if not self.handlers:
            return StrategyResult.skipped(self.strategy_id, "no built-in handlers configured")

        nodes = context.scope_nodes(spec)
        for name, handler in self.handlers.items():
            found = handler(spec, nodes)
            if found is None:
                continue
            logger.debug(f"[ToolBuiltinLocator] Handler '{name}' found {len(found)} candidates")
            # Handlers may return duplicates or any order; keep document order
            unique = {id(node): node for node in found}
            ordered = sorted(unique.values(), key=lambda n: n.position)
            return StrategyResult(strategy=self.strategy_id, nodes=ordered, detail=name)

        return StrategyResult.skipped(self.strategy_id, "no built-in handler applies")

    def __repr__(self) -> str:
        return f"ToolBuiltinLocator({list(self.handlers)})"
