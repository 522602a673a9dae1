"""Sense Layer - Document snapshots and read-only tree access."""

from pinpoint.layers.sense.tree import Document, Node, descendants, is_descendant, matches
from pinpoint.layers.sense.html_snapshot import snapshot_from_file, snapshot_from_html

__all__ = [
    "Document",
    "Node",
    "descendants",
    "is_descendant",
    "matches",
    "snapshot_from_file",
    "snapshot_from_html",
]
