"""
Document Tree - Read-only snapshot of a DOM-like tree.

A Document owns its node graph. Nodes keep a weak reference to their parent
and strong references to their children, so the tree only owns the
parent-to-child direction. Once a Document is built its nodes are frozen,
and every traversal step checks that the Document has not gone stale. The
staleness probe, which may call into a browser, is only asked through
`Document.ensure_live(probe=True)`.
"""

from collections import Counter
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Optional, TYPE_CHECKING
import itertools
import re
import weakref

from pinpoint.core.exceptions import DetachedNodeError

if TYPE_CHECKING:
    from pinpoint.core.locator import AttributePredicate


_generations = itertools.count(1)
_SAFE_ID = re.compile(r"^[A-Za-z_][\w-]*$")


@dataclass(eq=False)
class Node:
    """
    One element in the document tree.

    Equality and hashing are by identity: two inputs with identical
    attributes are still two different nodes.

    Once the node belongs to a Document, its fields are read-only:
    `attributes` becomes a mapping proxy and `children` a tuple.
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""  # Direct text content of this element
    children: List["Node"] = field(default_factory=list, repr=False)
    position: int = -1  # Document order, assigned when the Document is built
    selector: str = ""  # CSS path, assigned when the Document is built

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        self._parent_ref: Optional[weakref.ref] = None
        self._document: Optional["Document"] = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _NODE_FIELDS and self.__dict__.get("_document") is not None:
            raise AttributeError(f"Cannot set {name!r} on a node that belongs to a document snapshot")
        super().__setattr__(name, value)

    @property
    def parent(self) -> Optional["Node"]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def document(self) -> Optional["Document"]:
        return self._document

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name.lower())

    @property
    def text_content(self) -> str:
        """Whitespace-normalized text of this element and its descendants."""
        parts = [self.text]
        for child in self.children:
            parts.append(child.text_content)
        return " ".join(" ".join(parts).split())

    def append(self, child: "Node") -> "Node":
        """
        Attach a child while the tree is still being built.

        Raises:
            ValueError: if the node is frozen or the link would form a cycle
        """
        if self._document is not None:
            raise ValueError("Cannot modify a node that belongs to a document snapshot")
        if child is self:
            raise ValueError("A node cannot be its own child")
        if child.parent is not None:
            raise ValueError(f"<{child.tag}> already has a parent")
        cursor = self.parent
        while cursor is not None:
            if cursor is child:
                raise ValueError("Appending an ancestor would create a cycle")
            cursor = cursor.parent
        child._parent_ref = weakref.ref(self)
        self.children.append(child)
        return child

    def describe(self) -> str:
        """Short HTML-like label used in reports and logs."""
        shown = {k: v for k, v in self.attributes.items() if k in ("id", "name", "class", "type", "placeholder", "data-testid")}
        attrs = "".join(f' {k}="{v}"' for k, v in shown.items())
        return f"<{self.tag}{attrs}>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "position": self.position,
            "selector": self.selector,
            "attributes": dict(self.attributes),
            "text": self.text_content[:80],
        }

    def __str__(self) -> str:
        return self.describe()


_NODE_FIELDS = frozenset(f.name for f in fields(Node))


class Document:
    """
    A snapshot of a page's element tree.

    Args:
        root: Root node; must not already belong to another document
        source: Where the snapshot came from (file name, URL), for diagnostics
        probe: Optional callable returning True while the underlying page
            still matches this snapshot
        truncated: The source held more elements than the snapshot. Ids are
            then not known to be unique, so selectors never anchor on them.
    """

    def __init__(
        self,
        root: Node,
        source: str = "",
        probe: Optional[Callable[[], bool]] = None,
        truncated: bool = False,
    ):
        if root.parent is not None:
            raise ValueError("Document root must not have a parent")
        self.root = root
        self.source = source
        self.truncated = truncated
        self.generation = next(_generations)
        self._probe = probe
        self._stale = False
        self._nodes: List[Node] = []
        self._freeze()

    def _freeze(self) -> None:
        seen = set()
        for position, node in enumerate(self._walk()):
            if id(node) in seen:
                raise ValueError(f"Node {node.describe()} appears twice in the tree")
            seen.add(id(node))
            if node._document is not None:
                raise ValueError(f"Node {node.describe()} already belongs to a document")
            node.position = position
            node.attributes = MappingProxyType(dict(node.attributes))
            node.children = tuple(node.children)
            self._nodes.append(node)

        unique_ids = set()
        if not self.truncated:
            counts = Counter(node.get_attribute("id") for node in self._nodes)
            unique_ids = {element_id for element_id, count in counts.items() if element_id and count == 1}
        for node in self._nodes:
            node.selector = _css_path(node, unique_ids)
            node._document = self

    def _walk(self) -> Iterator[Node]:
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        """Mark the snapshot stale; later queries raise DetachedNodeError."""
        self._stale = True

    def ensure_live(self, probe: bool = False) -> None:
        """
        Raise DetachedNodeError if the snapshot is stale.

        Args:
            probe: Also ask the staleness probe (may call into a browser)
        """
        if not self._stale and probe and self._probe is not None and not self._probe():
            self._stale = True
        if self._stale:
            label = f" ({self.source})" if self.source else ""
            raise DetachedNodeError(f"Document snapshot #{self.generation}{label} is stale")

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"Document(#{self.generation}, nodes={len(self._nodes)}, source={self.source!r})"


class Descendants:
    """
    Lazy depth-first sequence of a node's descendants, parents before children.

    Every call to iter() restarts the traversal. The starting node itself is
    not included.
    """

    def __init__(self, root: Node):
        self.root = root

    def __iter__(self) -> Iterator[Node]:
        document = self.root.document
        stack = list(reversed(self.root.children))
        while stack:
            if document is not None:
                document.ensure_live()
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def descendants(root: Node) -> Descendants:
    """Return the restartable descendant sequence of root."""
    return Descendants(root)


def matches(node: Node, predicate: "AttributePredicate") -> bool:
    """Check a node's attribute against a predicate."""
    if node.document is not None:
        node.document.ensure_live()
    return predicate.evaluate(node.get_attribute(predicate.name))


def is_descendant(node: Node, ancestor: Node) -> bool:
    """True if ancestor is a proper ancestor of node."""
    cursor = node.parent
    while cursor is not None:
        if cursor is ancestor:
            return True
        cursor = cursor.parent
    return False


def _css_path(node: Node, unique_ids: set) -> str:
    """
    Build a CSS selector for exactly this node.

    The path is anchored at the nearest element whose id is unique in the
    document, or runs from the root when there is none.
    """
    path = []
    cursor: Optional[Node] = node
    while cursor is not None:
        element_id = cursor.get_attribute("id")
        if element_id in unique_ids and _SAFE_ID.match(element_id):
            path.insert(0, f"{cursor.tag}#{element_id}")
            break
        parent = cursor.parent
        if parent is None:
            path.insert(0, cursor.tag)
            break
        same_tag = [sibling for sibling in parent.children if sibling.tag == cursor.tag]
        if len(same_tag) > 1:
            nth = next(i for i, sibling in enumerate(same_tag, 1) if sibling is cursor)
            path.insert(0, f"{cursor.tag}:nth-of-type({nth})")
        else:
            path.insert(0, cursor.tag)
        cursor = parent
    return " > ".join(path)
