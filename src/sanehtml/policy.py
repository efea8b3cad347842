"""Sanitization policy: which tags and attributes survive, and how.

`SanitizePolicy` is a strategy object. Its default behavior is driven by the
static tables in `sanehtml.constants` and the per-element validators below;
each optional callback replaces one part of that behavior wholesale rather
than composing with it. Subclasses may override the strategy methods
(`allows_tag`, `resolve_attribute`, `removes_content`, `link_rel`) directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar

from .constants import ALLOWED_ELEMENTS, ALWAYS_ALLOWED_ATTRIBUTES, REMOVE_CONTENT_ELEMENTS
from .node import split_class_tokens
from .urls import is_navigational_url, is_resource_url

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""


class DecisionAction(_StrEnum):
    UNCHANGED = "unchanged"
    EDIT = "edit"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class AttributeDecision:
    """Outcome of evaluating one attribute.

    `value` is only meaningful for EDIT, where it replaces the attribute value.
    """

    action: DecisionAction
    value: str = ""

    UNCHANGED: ClassVar[DecisionAction] = DecisionAction.UNCHANGED
    EDIT: ClassVar[DecisionAction] = DecisionAction.EDIT
    REMOVE: ClassVar[DecisionAction] = DecisionAction.REMOVE

    @classmethod
    def unchanged(cls) -> AttributeDecision:
        return _UNCHANGED

    @classmethod
    def edit(cls, value: str) -> AttributeDecision:
        return cls(DecisionAction.EDIT, str(value))

    @classmethod
    def remove(cls) -> AttributeDecision:
        return _REMOVE


_UNCHANGED = AttributeDecision(DecisionAction.UNCHANGED)
_REMOVE = AttributeDecision(DecisionAction.REMOVE)


def _always_allowed(_value: str) -> bool:
    return True


_CITE_VALIDATORS: Mapping[str, Callable[[str], bool]] = MappingProxyType({"cite": is_resource_url})

# Extra attributes accepted on specific elements, keyed by canonical tag.
ELEMENT_ATTRIBUTE_VALIDATORS: Mapping[str, Mapping[str, Callable[[str], bool]]] = MappingProxyType(
    {
        "A": MappingProxyType({"href": is_navigational_url}),
        "IMG": MappingProxyType({"src": is_resource_url, "longdesc": is_resource_url}),
        "DIV": MappingProxyType({"itemscope": _always_allowed, "itemtype": _always_allowed}),
        "BLOCKQUOTE": _CITE_VALIDATORS,
        "DEL": _CITE_VALIDATORS,
        "INS": _CITE_VALIDATORS,
        "Q": _CITE_VALIDATORS,
    }
)


def is_attribute_allowed(tag: str, name: str, value: str) -> bool:
    """Default table lookup for attributes other than id and class."""
    name = name.lower()
    if name in ALWAYS_ALLOWED_ATTRIBUTES:
        return True
    validators = ELEMENT_ATTRIBUTE_VALIDATORS.get(tag.upper())
    if validators is None:
        return False
    validator = validators.get(name)
    if validator is None:
        return False
    return bool(validator(value))


def _check_callable(name: str, value: object) -> None:
    if value is not None and not callable(value):
        msg = f"{name} must be callable or None, not {type(value).__name__}"
        raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class SanitizePolicy:
    """Options controlling a sanitize pass.

    - allow_element_id(id): keep an `id` value. Absent means ids are stripped.
    - allow_class_name(token): keep one class token. Absent means classes are stripped.
    - add_link_rel(href): `rel` tokens to set on links; None or empty leaves them.
    - allow_tag(tag): replaces the default tag allow-list. Tags are upper-case.
    - allow_attribute(tag, name, value): replaces the whole attribute policy,
      including id/class handling. Must return an `AttributeDecision`.
    - remove_content_tag(tag): which disallowed tags lose their content even
      when `remove_contents` is False. Replaces the default list.
    - remove_contents: whether disallowed tags take their content with them
      (default) or are unwrapped in place.
    """

    allow_element_id: Callable[[str], bool] | None = None
    allow_class_name: Callable[[str], bool] | None = None
    add_link_rel: Callable[[str], Sequence[str] | None] | None = None
    allow_tag: Callable[[str], bool] | None = None
    allow_attribute: Callable[[str, str, str], AttributeDecision] | None = None
    remove_content_tag: Callable[[str], bool] | None = None
    remove_contents: bool = True

    def __post_init__(self) -> None:
        for field_name in (
            "allow_element_id",
            "allow_class_name",
            "add_link_rel",
            "allow_tag",
            "allow_attribute",
            "remove_content_tag",
        ):
            _check_callable(field_name, getattr(self, field_name))
        if not isinstance(self.remove_contents, bool):
            object.__setattr__(self, "remove_contents", bool(self.remove_contents))

    # -----------------
    # Tags
    # -----------------

    def allows_tag(self, tag: str) -> bool:
        tag = tag.upper()
        if self.allow_tag is not None:
            return bool(self.allow_tag(tag))
        return tag in ALLOWED_ELEMENTS

    def removes_content(self, tag: str) -> bool:
        """Whether a disallowed `tag` is deleted with its subtree (else unwrapped)."""
        if self.remove_contents:
            return True
        tag = tag.upper()
        if self.remove_content_tag is not None:
            return bool(self.remove_content_tag(tag))
        return tag in REMOVE_CONTENT_ELEMENTS

    # -----------------
    # Attributes
    # -----------------

    def resolve_attribute(self, tag: str, name: str, value: str) -> AttributeDecision:
        tag = tag.upper()
        if self.allow_attribute is not None:
            decision = self.allow_attribute(tag, name, value)
            if not isinstance(decision, AttributeDecision):
                msg = f"allow_attribute must return an AttributeDecision, not {type(decision).__name__}"
                raise TypeError(msg)
            return decision

        lowered = name.lower()
        if lowered == "id":
            if self.allow_element_id is None:
                return _REMOVE
            return _UNCHANGED if self.allow_element_id(value) else _REMOVE

        if lowered == "class":
            if self.allow_class_name is None:
                return _REMOVE
            kept = [token for token in split_class_tokens(value) if self.allow_class_name(token)]
            if not kept:
                return _REMOVE
            return AttributeDecision.edit(" ".join(kept))

        return _UNCHANGED if is_attribute_allowed(tag, lowered, value) else _REMOVE

    # -----------------
    # Links
    # -----------------

    def link_rel(self, tag: str, href: str) -> list[str] | None:
        """`rel` tokens to set on a surviving element, or None to leave it alone.

        Only applies to links under the default tag allow-list.
        """
        if self.allow_tag is not None or self.add_link_rel is None or tag.upper() != "A":
            return None
        rels = self.add_link_rel(href)
        if not rels:
            return None
        return [str(rel) for rel in rels]


DEFAULT_POLICY: SanitizePolicy = SanitizePolicy()
