"""HTML serialization for sanitized trees."""

from __future__ import annotations

from .constants import NEWLINE_STRIPPING_ELEMENTS, RAWTEXT_ELEMENTS, VOID_ELEMENTS
from .node import Comment, Element, Node, ParentNode, Text


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _choose_attr_quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return "'"
    return '"'


def _escape_attr_value(value: str, quote_char: str) -> str:
    value = value.replace("&", "&amp;")
    if quote_char == '"':
        return value.replace('"', "&quot;")
    return value.replace("'", "&#39;")


def serialize_start_tag(name: str, attrs: dict[str, str] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        value_str = "" if value is None else str(value)
        quote = _choose_attr_quote(value_str)
        parts.extend([" ", key, "=", quote, _escape_attr_value(value_str, quote), quote])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def _is_void(element: Element) -> bool:
    return element.namespace is None and element.name in VOID_ELEMENTS


def _starts_with_newline(element: Element) -> bool:
    if element.namespace is not None or element.name not in NEWLINE_STRIPPING_ELEMENTS or not element.children:
        return False
    first = element.children[0]
    return isinstance(first, Text) and first.data.startswith("\n")


def _text_to_html(node: Text) -> str:
    parent = node.parent
    if isinstance(parent, Element) and parent.namespace is None and parent.name in RAWTEXT_ELEMENTS:
        # Raw text is not entity-decoded on re-parse, so escaping would change
        # it. Only text that would end the element early gets escaped.
        if f"</{parent.name}" not in node.data.lower():
            return node.data
    return _escape_text(node.data)


def to_html(node: Node) -> str:
    """Convert a node (and its subtree) to an HTML string.

    Fragments and documents render their children only. Void elements never get
    an end tag and non-void elements always do.
    """
    parts: list[str] = []
    # Entries are either nodes to open or pre-rendered end tags.
    stack: list[Node | str] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        if isinstance(item, Text):
            parts.append(_text_to_html(item))
        elif isinstance(item, Comment):
            parts.append(f"<!--{item.data}-->")
        elif isinstance(item, Element):
            parts.append(serialize_start_tag(item.name, item.attrs))
            if _is_void(item):
                continue
            if _starts_with_newline(item):
                parts.append("\n")
            stack.append(serialize_end_tag(item.name))
            stack.extend(reversed(item.children))
        elif isinstance(item, ParentNode):
            stack.extend(reversed(item.children))
    return "".join(parts)
