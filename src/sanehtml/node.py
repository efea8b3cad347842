"""Mutable DOM-like tree produced by the parser and edited by the sanitizer."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .constants import HTML_WHITESPACE

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .errors import ParseError

_CLASS_SPLIT_RE = re.compile(f"[{re.escape(HTML_WHITESPACE)}]+")


def split_class_tokens(value: str) -> list[str]:
    """Split a class attribute value on ASCII whitespace, dropping empty tokens."""
    return [token for token in _CLASS_SPLIT_RE.split(value) if token]


class Node:
    """Base class for every node in the tree.

    - name: "#text", "#comment", "#document-fragment" or the element tag name
    - parent: the containing node, or None for a detached node or the root
    """

    __slots__ = ("name", "parent")

    def __init__(self, name: str) -> None:
        self.name = name
        self.parent: ParentNode | None = None


class Text(Node):
    __slots__ = ("data",)

    def __init__(self, data: str) -> None:
        super().__init__("#text")
        self.data = data

    def __repr__(self) -> str:
        return f"Text({self.data[:30]!r})"


class Comment(Node):
    __slots__ = ("data",)

    def __init__(self, data: str) -> None:
        super().__init__("#comment")
        self.data = data

    def __repr__(self) -> str:
        return f"Comment({self.data[:30]!r})"


class ParentNode(Node):
    """A node with an ordered, index-addressable list of children."""

    __slots__ = ("children",)

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.children: list[Node] = []

    def _would_create_circular_reference(self, child: Node) -> bool:
        current: Node | None = self
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def _adopt(self, child: Node) -> None:
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.name} as child of {self.name} would create circular reference"
            raise ValueError(msg)
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self

    def index_of(self, child: Node) -> int:
        """Position of `child` in this node's child list (identity, not equality)."""
        for i, node in enumerate(self.children):
            if node is child:
                return i
        msg = f"{child!r} is not a child of {self!r}"
        raise ValueError(msg)

    def append_child(self, child: Node) -> None:
        self._adopt(child)
        self.children.append(child)

    def remove_child(self, child: Node) -> None:
        """Remove a child node and clear its parent link."""
        self.remove_child_at(self.index_of(child))

    def remove_child_at(self, index: int) -> Node:
        """Remove the child at `index` and return it, detached."""
        child = self.children.pop(index)
        child.parent = None
        return child

    def detach_children(self) -> list[Node]:
        """Empty the child list and return the former children, all detached."""
        children = self.children
        self.children = []
        for child in children:
            child.parent = None
        return children

    def replace_child_at(self, index: int, nodes: Iterable[Node]) -> list[Node]:
        """Splice detached `nodes` into the position `index`, preserving order.

        The child previously at `index` ends up detached. Returns the inserted
        nodes.
        """
        new_nodes = list(nodes)
        for node in new_nodes:
            if node.parent is not None or self._would_create_circular_reference(node):
                msg = f"Cannot splice {node!r} into {self!r}"
                raise ValueError(msg)
        old = self.children[index]
        self.children[index : index + 1] = new_nodes
        old.parent = None
        for node in new_nodes:
            node.parent = self
        return new_nodes


class Element(ParentNode):
    """An element node.

    - name: tag name as produced by the parser (lower-case for HTML)
    - namespace: None for HTML, "svg" or "math" for foreign elements
    - attrs: ordered mapping of attribute name to value
    """

    __slots__ = ("attrs", "namespace")

    def __init__(
        self,
        name: str,
        attrs: dict[str, str] | None = None,
        namespace: str | None = None,
        *,
        preserve_attr_case: bool = False,
    ) -> None:
        if not name:
            msg = "Empty tag name passed to Element constructor"
            raise ValueError(msg)
        super().__init__(name)
        self.namespace = namespace
        # Keep the first occurrence of each attribute. Foreign (svg/math)
        # attributes keep their adjusted case, e.g. viewBox.
        kept: dict[str, str] = {}
        for key, value in (attrs or {}).items():
            kept.setdefault(key if preserve_attr_case else key.lower(), value)
        self.attrs = kept

    def __repr__(self) -> str:
        return f"Element(<{self.name}>, children={len(self.children)})"

    @property
    def tag(self) -> str:
        """Canonical tag used for policy comparisons (upper-case)."""
        return self.name.upper()

    @property
    def classes(self) -> list[str]:
        """Live class tokens, in attribute order."""
        return split_class_tokens(self.attrs.get("class", ""))

    def retain_classes(self, keep: Iterable[str]) -> None:
        """Reduce the class list to tokens present in `keep`.

        Duplicate tokens collapse to their first occurrence. When nothing is
        left the attribute is dropped.
        """
        allowed = set(keep)
        kept: list[str] = []
        seen: set[str] = set()
        for token in self.classes:
            if token in allowed and token not in seen:
                seen.add(token)
                kept.append(token)
        if kept:
            self.attrs["class"] = " ".join(kept)
        else:
            self.attrs.pop("class", None)


class DocumentFragment(ParentNode):
    """Root of a parsed fragment."""

    __slots__ = ("errors",)

    def __init__(self) -> None:
        super().__init__("#document-fragment")
        self.errors: list[ParseError] = []

    def __repr__(self) -> str:
        return f"DocumentFragment(children={len(self.children)})"
