# descrelay/dom/flatten.py
from __future__ import annotations

from typing import List

from .nodes import Node, TEXT


def _walk(node: Node, out: List[str]) -> None:
    for child in node.children:
        if child.kind == TEXT:
            out.append(child.text)
        elif child.is_anchor:
            if child.href:
                out.append(child.href + " ")
            _walk(child, out)
        else:
            _walk(child, out)


def flatten(root: Node) -> str:
    """
    Depth-first, document-order text of `root`'s children.
    Anchors contribute their target URL plus one space before their label.
    """
    out: List[str] = []
    _walk(root, out)
    return "".join(out).strip()
