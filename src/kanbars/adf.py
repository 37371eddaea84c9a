"""Plain-text extraction from Atlassian Document Format (ADF) trees."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Block nodes whose text ends with a line break
CONTAINER_TYPES = frozenset(
    {
        "paragraph",
        "heading",
        "blockquote",
        "codeBlock",
        "bulletList",
        "orderedList",
        "listItem",
        "panel",
    }
)


def _children(node: Mapping[str, Any]) -> list[Any]:
    content = node.get("content")
    return content if isinstance(content, list) else []


def _walk(node: Any, out: list[str]) -> None:
    if not isinstance(node, Mapping):
        return
    node_type = node.get("type")
    if not isinstance(node_type, str):
        return

    if node_type == "text":
        text = node.get("text")
        if isinstance(text, str):
            out.append(text)
    elif node_type == "hardBreak":
        out.append("\n")
    elif node_type in CONTAINER_TYPES:
        children = _children(node)
        for child in children:
            _walk(child, out)
        if children:
            out.append("\n")
    else:
        for child in _children(node):
            _walk(child, out)


def extract_text(doc: Mapping[str, Any]) -> str | None:
    """Flatten an ADF document into text; None when it holds no text."""
    out: list[str] = []
    for node in _children(doc):
        _walk(node, out)
    text = "".join(out)
    if not text:
        return None
    return text.strip()
