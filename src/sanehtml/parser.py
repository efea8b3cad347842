"""Fragment parsing on top of html5lib.

html5lib implements the standard HTML parsing algorithm, including recovery
from malformed markup, so `parse_fragment` never fails on bad input. Its
token stream is replayed into the package's own mutable node tree.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import html5lib
from html5lib.constants import E, namespaces, prefixes

from .errors import ParseError
from .node import Comment, DocumentFragment, Element, ParentNode, Text

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

_TREEBUILDER = html5lib.getTreeBuilder("etree")
_WALKER = html5lib.getTreeWalker("etree")

_FOREIGN_NAMESPACES = {
    namespaces["svg"]: "svg",
    namespaces["mathml"]: "math",
}


def _attribute_name(key: tuple[str | None, str] | str) -> str:
    if isinstance(key, str):
        return key
    namespace, name = key
    if namespace is None:
        return name
    prefix = prefixes.get(namespace)
    if prefix is None or prefix == name:
        return name
    return f"{prefix}:{name}"


def _convert_attributes(data: Mapping[Any, str] | None) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for key, value in (data or {}).items():
        attrs.setdefault(_attribute_name(key), value if value is not None else "")
    return attrs


def _append_text(parent: ParentNode, data: str) -> None:
    if parent.children and isinstance(parent.children[-1], Text):
        parent.children[-1].data += data
        return
    parent.append_child(Text(data))


def _build_tree(fragment: DocumentFragment, tokens: Iterable[dict[str, Any]]) -> None:
    stack: list[ParentNode] = [fragment]
    for token in tokens:
        kind = token["type"]
        if kind == "StartTag" or kind == "EmptyTag":
            namespace = _FOREIGN_NAMESPACES.get(token["namespace"])
            element = Element(
                token["name"],
                _convert_attributes(token["data"]),
                namespace=namespace,
                preserve_attr_case=namespace is not None,
            )
            stack[-1].append_child(element)
            if kind == "StartTag":
                stack.append(element)
        elif kind == "EndTag":
            if len(stack) > 1:
                stack.pop()
        elif kind == "Characters" or kind == "SpaceCharacters":
            _append_text(stack[-1], token["data"])
        elif kind == "Comment":
            stack[-1].append_child(Comment(token["data"]))
        # Doctype tokens cannot occur in a fragment; serializer errors are ignored.


def _convert_errors(raw_errors: Iterable[tuple[Any, str, Any]]) -> list[ParseError]:
    errors: list[ParseError] = []
    for position, code, datavars in raw_errors:
        line, column = position if isinstance(position, tuple) else (None, None)
        template = E.get(code)
        try:
            message = template % (datavars or {}) if template else code
        except (KeyError, TypeError, ValueError):
            message = code
        errors.append(ParseError(code, line=line, column=column, message=message))
    return errors


def parse_fragment(markup: str, *, collect_errors: bool = False) -> DocumentFragment:
    """Parse a markup fragment (not a full document) into a `DocumentFragment`.

    With `collect_errors=True` the recoverable parse errors are attached to
    `fragment.errors`.
    """
    if not isinstance(markup, str):
        msg = f"markup must be a str, not {type(markup).__name__}"
        raise TypeError(msg)

    parser = html5lib.HTMLParser(tree=_TREEBUILDER, namespaceHTMLElements=True)
    etree_fragment = parser.parseFragment(markup)

    fragment = DocumentFragment()
    _build_tree(fragment, _WALKER(etree_fragment))

    if collect_errors:
        fragment.errors = _convert_errors(parser.errors)
        logger.debug("Parsed fragment with %d recoverable error(s)", len(fragment.errors))
    return fragment
