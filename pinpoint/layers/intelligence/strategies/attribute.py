"""
Attribute strategies: id, test attribute, name and everything else.

Each strategy claims a set of attribute names. A spec whose predicate names
an attribute the strategy does not claim is skipped, so a spec for
`id=signup` is only ever answered by IdLocator.
"""

from typing import TYPE_CHECKING, Iterable, Optional

from pinpoint.layers.intelligence.outcome import StrategyResult
from .base import LocatorStrategy

if TYPE_CHECKING:
    from pinpoint.core.locator import LocatorSpec
    from pinpoint.layers.intelligence.resolver import ResolutionContext


class AttributeLocator(LocatorStrategy):
    """Shared search for strategies keyed on a single attribute."""

    def claims(self, attribute: str) -> bool:
        raise NotImplementedError

    def resolve(self, spec: "LocatorSpec", context: "ResolutionContext") -> StrategyResult:
        if spec.predicate is None:
            return StrategyResult.skipped(self.strategy_id, "no attribute predicate")
        if not self.claims(spec.predicate.name):
            return StrategyResult.skipped(self.strategy_id, f"'{spec.predicate.name}' not handled here")

        nodes = context.search(spec)
        return StrategyResult(
            strategy=self.strategy_id,
            nodes=nodes,
            detail=f"{spec.tag or '*'}{spec.predicate}",
        )


class IdLocator(AttributeLocator):
    strategy_id = "id"

    def claims(self, attribute: str) -> bool:
        return attribute == "id"


class TestAttributeLocator(AttributeLocator):
    """Attributes added for automation, e.g. data-testid."""

    strategy_id = "test_attribute"
    __test__ = False  # not a pytest class

    def __init__(self, attributes: Iterable[str]):
        self.attributes = tuple(attributes)

    def claims(self, attribute: str) -> bool:
        return attribute in self.attributes

    def __repr__(self) -> str:
        return f"TestAttributeLocator({list(self.attributes)})"


class NameLocator(AttributeLocator):
    strategy_id = "name"

    def claims(self, attribute: str) -> bool:
        return attribute == "name"


class GenericAttributeLocator(AttributeLocator):
    """
    Placeholder, type, class and any other attribute.

    With `allowed` set, only those attributes are claimed.
    """

    strategy_id = "attribute"

    def __init__(self, reserved: Iterable[str], allowed: Optional[Iterable[str]] = None):
        self.reserved = frozenset(reserved)
        self.allowed = frozenset(allowed) if allowed is not None else None

    def claims(self, attribute: str) -> bool:
        if attribute in self.reserved:
            return False
        return self.allowed is None or attribute in self.allowed
