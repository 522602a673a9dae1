"""
HTML Snapshot - Build a Document from markup.

Parses HTML with BeautifulSoup and converts the element tree into Nodes.
Fragments without an <html> element are wrapped in a synthetic one so
every document is single-rooted.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Doctype

from pinpoint.layers.sense.tree import Document, Node

logger = logging.getLogger(__name__)


def snapshot_from_html(markup: str, source: str = "<string>", parser: str = "html.parser") -> Document:
    """
    Parse markup into a Document snapshot.

    Args:
        markup: HTML text
        source: Label recorded on the Document for diagnostics
        parser: BeautifulSoup tree builder

    Returns:
        Document rooted at the <html> element
    """
    soup = BeautifulSoup(markup, parser)
    top_level = [child for child in soup.children if isinstance(child, Tag)]

    if len(top_level) == 1 and top_level[0].name == "html":
        root = _convert(top_level[0])
    else:
        root = Node(tag="html")
        for child in soup.children:
            if isinstance(child, Tag):
                root.append(_convert(child))

    document = Document(root, source=source)
    logger.debug(f"[HtmlSnapshot] Parsed {len(document)} elements from {source}")
    return document


def snapshot_from_file(path: Union[str, Path], encoding: Optional[str] = "utf-8") -> Document:
    """Read an HTML file and parse it into a Document."""
    path = Path(path)
    markup = path.read_text(encoding=encoding)
    return snapshot_from_html(markup, source=str(path))


def _convert(tag: Tag) -> Node:
    node = Node(tag=tag.name, attributes=_attributes(tag), text=_own_text(tag))
    for child in tag.children:
        if isinstance(child, Tag):
            node.append(_convert(child))
    return node


def _attributes(tag: Tag) -> dict:
    attributes = {}
    for name, value in tag.attrs.items():
        # BeautifulSoup returns multi-valued attributes (class, rel) as lists
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attributes[name.lower()] = "" if value is None else str(value)
    return attributes


def _own_text(tag: Tag) -> str:
    parts = [
        str(child)
        for child in tag.children
        if isinstance(child, NavigableString) and not isinstance(child, (Comment, Doctype))
    ]
    return " ".join(" ".join(parts).split())
