"""
Live Snapshot - Capture a Document from a running browser page.

Serializes the page's element tree in a single JavaScript pass and plants
a token plus a MutationObserver in the page. The Document's staleness probe
checks that the token is still there and nothing has changed since, so a
re-render or navigation turns into DetachedNodeError instead of a wrong
answer.
"""

import logging
import uuid
from typing import Any, Dict, Optional, TYPE_CHECKING

from selenium.common.exceptions import WebDriverException

from pinpoint.core.exceptions import SnapshotError
from pinpoint.layers.sense.tree import Document, Node

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


class LiveSnapshotter:
    """
    Builds Document snapshots from a Selenium WebDriver.

    Example:
        >>> snapshotter = LiveSnapshotter(driver)
        >>> document = snapshotter.capture()
        >>> outcome = resolver.resolve(spec, document)
    """

    MAX_NODES = 5000

    def __init__(self, driver: "WebDriver", max_nodes: int = MAX_NODES, strict: bool = False):
        """
        Initialize the snapshotter.

        Args:
            driver: Selenium WebDriver
            max_nodes: Serialization stops after this many elements
            strict: Raise SnapshotError instead of warning when the page
                has more than max_nodes elements
        """
        self.driver = driver
        self.max_nodes = max_nodes
        self.strict = strict

    def capture(self) -> Document:
        """
        Snapshot the current page.

        Raises:
            SnapshotError: if the script fails or returns something unusable,
                or (strict mode) the page exceeds max_nodes
        """
        token = uuid.uuid4().hex
        try:
            result = self.driver.execute_script(self._get_snapshot_script(), token, self.max_nodes)
        except WebDriverException as e:
            raise SnapshotError(f"Snapshot script failed: {e.msg or e}") from e

        tree = result.get("tree") if isinstance(result, dict) else None
        if not isinstance(tree, dict) or "tag" not in tree:
            raise SnapshotError(f"Snapshot script returned {type(result).__name__}, expected an element tree")

        source = self._current_url()
        truncated = bool(result.get("truncated"))
        if truncated:
            message = f"{source or 'Page'} has more than {self.max_nodes} elements; snapshot is truncated"
            if self.strict:
                raise SnapshotError(message)
            logger.warning(f"[LiveSnapshotter] {message}")

        root = self._build(tree)
        document = Document(
            root,
            source=source,
            probe=lambda: self._is_unchanged(token),
            truncated=truncated,
        )
        logger.info(f"[LiveSnapshotter] Captured {len(document)} elements from {source or 'page'}")
        return document

    def _build(self, data: Dict[str, Any]) -> Node:
        node = Node(
            tag=str(data.get("tag") or "unknown"),
            attributes={str(k).lower(): str(v) for k, v in (data.get("attributes") or {}).items()},
            text=str(data.get("text") or ""),
        )
        for child in data.get("children") or []:
            node.append(self._build(child))
        return node

    def _is_unchanged(self, token: str) -> bool:
        try:
            return bool(self.driver.execute_script(
                "const s = window.__pinpointSnapshot;"
                "return !!s && s.token === arguments[0] && !s.dirty;",
                token,
            ))
        except WebDriverException as e:
            logger.warning(f"[LiveSnapshotter] Staleness probe failed, treating snapshot as stale: {e.msg or e}")
            return False

    def _current_url(self) -> str:
        try:
            return self.driver.current_url or ""
        except WebDriverException:
            return ""

    def _get_snapshot_script(self) -> str:
        """Get the JavaScript that serializes the tree and arms the observer."""
        return r"""
        const token = arguments[0];
        const maxNodes = arguments[1];
        let count = 0;
        let truncated = false;

        const serialize = (el) => {
            count++;
            const attrs = {};
            for (const attr of Array.from(el.attributes)) {
                attrs[attr.name] = attr.value;
            }
            let text = "";
            for (const child of Array.from(el.childNodes)) {
                if (child.nodeType === Node.TEXT_NODE) text += child.textContent;
            }
            const children = [];
            for (const child of Array.from(el.children)) {
                if (count >= maxNodes) {
                    truncated = true;
                    break;
                }
                children.push(serialize(child));
            }
            return {
                tag: el.tagName.toLowerCase(),
                attributes: attrs,
                text: text.replace(/\s+/g, " ").trim(),
                children: children
            };
        };

        const tree = serialize(document.documentElement);

        if (window.__pinpointObserver) window.__pinpointObserver.disconnect();
        window.__pinpointSnapshot = { token: token, dirty: false };
        window.__pinpointObserver = new MutationObserver(() => {
            if (window.__pinpointSnapshot) window.__pinpointSnapshot.dirty = true;
        });
        window.__pinpointObserver.observe(document.documentElement, {
            subtree: true, childList: true, attributes: true, characterData: true
        });

        return { tree: tree, truncated: truncated, count: count };
        """
