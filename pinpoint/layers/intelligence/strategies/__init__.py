from .base import LocatorStrategy
from .attribute import GenericAttributeLocator, IdLocator, NameLocator, TestAttributeLocator
from .builtin import ToolBuiltinLocator
from .path import AnchoredPathLocator, IndexedPathLocator
from .chain import StrategyChain

__all__ = [
    "AnchoredPathLocator",
    "GenericAttributeLocator",
    "IdLocator",
    "IndexedPathLocator",
    "LocatorStrategy",
    "NameLocator",
    "StrategyChain",
    "TestAttributeLocator",
    "ToolBuiltinLocator",
]
