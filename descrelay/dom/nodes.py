# descrelay/dom/nodes.py
"""
Read-only node model the flattener walks.

A Node is either a text node (literal characters) or an element with
children. Anchor elements carry their target already resolved to an
absolute URL, the way a browser exposes `a.href`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

TEXT = "text"
ELEMENT = "element"

_SKIP_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)
_SKIP_TAGS = {"script", "style", "noscript", "template"}


@dataclass
class Node:
    kind: str
    tag: str = ""
    text: str = ""
    href: Optional[str] = None
    children: List["Node"] = field(default_factory=list)

    @property
    def is_anchor(self) -> bool:
        return self.kind == ELEMENT and self.tag == "a"

    def text_content(self) -> str:
        if self.kind == TEXT:
            return self.text
        return "".join(c.text_content() for c in self.children)


def text_node(text: str) -> Node:
    return Node(kind=TEXT, text=text)


def element(tag: str, *children: Node, href: Optional[str] = None) -> Node:
    return Node(kind=ELEMENT, tag=tag.lower(), href=href, children=list(children))


def from_soup(tag: Tag, base_url: str = "") -> Node:
    """Convert a BeautifulSoup subtree into Nodes, resolving anchor targets."""
    href = None
    if tag.name == "a" and tag.get("href") is not None:
        href = urljoin(base_url, tag["href"].strip()) if base_url else tag["href"].strip()
    node = Node(kind=ELEMENT, tag=(tag.name or "").lower(), href=href)
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name in _SKIP_TAGS:
                continue
            node.children.append(from_soup(child, base_url))
        elif isinstance(child, NavigableString) and not isinstance(child, _SKIP_STRINGS):
            node.children.append(text_node(str(child)))
    return node


def parse_element(html: str, base_url: str = "") -> Optional[Node]:
    """Parse one element's outerHTML and return that element as a Node."""
    soup = BeautifulSoup(html or "", "html.parser")
    first = soup.find()
    if first is None:
        return None
    return from_soup(first, base_url)
