from .constants import ALLOWED_ELEMENTS, ALWAYS_ALLOWED_ATTRIBUTES, REMOVE_CONTENT_ELEMENTS
from .errors import ParseError
from .node import Comment, DocumentFragment, Element, Node, Text
from .parser import parse_fragment
from .policy import (
    DEFAULT_POLICY,
    ELEMENT_ATTRIBUTE_VALIDATORS,
    AttributeDecision,
    DecisionAction,
    SanitizePolicy,
)
from .sanitize import sanitize, sanitize_tree
from .serialize import to_html
from .urls import is_navigational_url, is_resource_url

__all__ = [
    "ALLOWED_ELEMENTS",
    "ALWAYS_ALLOWED_ATTRIBUTES",
    "DEFAULT_POLICY",
    "ELEMENT_ATTRIBUTE_VALIDATORS",
    "REMOVE_CONTENT_ELEMENTS",
    "AttributeDecision",
    "Comment",
    "DecisionAction",
    "DocumentFragment",
    "Element",
    "Node",
    "ParseError",
    "SanitizePolicy",
    "Text",
    "is_navigational_url",
    "is_resource_url",
    "parse_fragment",
    "sanitize",
    "sanitize_tree",
    "to_html",
]
