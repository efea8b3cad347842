"""Policy-driven sanitization of parsed markup.

In a single pass the walker visits every element of a fragment exactly once,
last child first, using an explicit work stack. Each node is judged against the policy before
any of its descendants are pushed, so a node removed from the tree is never
visited again, and children spliced into a parent by an unwrap are pushed as
fresh work items.

Callback exceptions are not caught: a partially sanitized tree is never
serialized.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .constants import WRAPPER_TAG
from .node import DocumentFragment, Element, ParentNode, split_class_tokens
from .parser import parse_fragment
from .policy import DEFAULT_POLICY, DecisionAction, SanitizePolicy
from .serialize import to_html

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .policy import AttributeDecision

logger = logging.getLogger(__name__)

# Unwrapping can leave nesting (an `a` inside an `a`, a `p` inside a `p`) that
# the parser restructures when the output is read back. `sanitize` re-runs
# until the markup is stable, at most this many extra times.
_MAX_EXTRA_PASSES = 4


def _filter_attributes(element: Element, tag: str, policy: SanitizePolicy) -> None:
    for name, value in list(element.attrs.items()):
        decision = policy.resolve_attribute(tag, name, value)
        action = decision.action
        if action is DecisionAction.REMOVE:
            del element.attrs[name]
            logger.debug("Removed attribute %s from <%s>", name, element.name)
        elif action is DecisionAction.EDIT:
            if name.lower() == "class":
                element.retain_classes(split_class_tokens(decision.value))
            else:
                element.attrs[name] = decision.value
            logger.debug("Edited attribute %s on <%s>", name, element.name)


def _apply_link_rel(element: Element, tag: str, policy: SanitizePolicy) -> None:
    href = element.attrs.get("href")
    if href is None:
        return
    rels = policy.link_rel(tag, href)
    if rels:
        element.attrs["rel"] = " ".join(rels)
        logger.debug("Set rel=%r on <%s>", element.attrs["rel"], element.name)


def _unwrap(parent: ParentNode, index: int, element: Element) -> tuple[ParentNode, range]:
    """Splice `element`'s children into `parent` at `index`.

    Returns the node now holding the children and their positions in it.
    Directly under a fragment root, several children are kept together in a
    single wrapper element so the fragment keeps one node in that position.
    The wrapper is not judged by the policy: it keeps output compatible with
    existing sanitized content, even under an `allow_tag` that rejects `div`.
    """
    children = element.detach_children()
    if isinstance(parent, DocumentFragment) and len(children) > 1:
        wrapper = Element(WRAPPER_TAG)
        parent.replace_child_at(index, [wrapper])
        for child in children:
            wrapper.append_child(child)
        return wrapper, range(len(children))
    parent.replace_child_at(index, children)
    return parent, range(index, index + len(children))


def sanitize_tree(root: ParentNode, policy: SanitizePolicy = DEFAULT_POLICY) -> ParentNode:
    """Sanitize the descendants of `root` in place and return `root`.

    `root` itself is never judged: it is the fragment (or a container element)
    whose content is being cleaned.
    """
    # Work items are (parent, index) pairs. Siblings are pushed in order and
    # popped last first, and every edit only shifts positions at or after the
    # one being judged, so a popped index still addresses its node.
    stack: list[tuple[ParentNode, int]] = [(root, i) for i in range(len(root.children))]
    while stack:
        parent, index = stack.pop()
        node = parent.children[index]
        if not isinstance(node, Element):
            continue

        tag = node.tag
        if not policy.allows_tag(tag):
            if policy.removes_content(tag):
                parent.remove_child_at(index)
                logger.debug("Dropped <%s> and its content", node.name)
            else:
                holder, positions = _unwrap(parent, index, node)
                logger.debug("Unwrapped <%s>, kept %d child node(s)", node.name, len(positions))
                stack.extend((holder, i) for i in positions)
            continue

        _filter_attributes(node, tag, policy)
        _apply_link_rel(node, tag, policy)
        stack.extend((node, i) for i in range(len(node.children)))
    return root


def _build_policy(
    policy: SanitizePolicy | None,
    *,
    allow_element_id: Callable[[str], bool] | None,
    allow_class_name: Callable[[str], bool] | None,
    add_link_rel: Callable[[str], Sequence[str] | None] | None,
    allow_tag: Callable[[str], bool] | None,
    allow_attribute: Callable[[str, str, str], AttributeDecision] | None,
    remove_content_tag: Callable[[str], bool] | None,
    remove_contents: bool,
) -> SanitizePolicy:
    options = SanitizePolicy(
        allow_element_id=allow_element_id,
        allow_class_name=allow_class_name,
        add_link_rel=add_link_rel,
        allow_tag=allow_tag,
        allow_attribute=allow_attribute,
        remove_content_tag=remove_content_tag,
        remove_contents=remove_contents,
    )
    if policy is None:
        return DEFAULT_POLICY if options == DEFAULT_POLICY else options
    if not isinstance(policy, SanitizePolicy):
        msg = f"policy must be a SanitizePolicy, not {type(policy).__name__}"
        raise TypeError(msg)
    if options != DEFAULT_POLICY:
        msg = "Pass either policy= or individual sanitize options, not both"
        raise TypeError(msg)
    return policy


def _sanitize_once(markup: str, policy: SanitizePolicy) -> str:
    fragment = parse_fragment(markup)
    sanitize_tree(fragment, policy)
    return to_html(fragment)


def sanitize(
    markup: str,
    *,
    allow_element_id: Callable[[str], bool] | None = None,
    allow_class_name: Callable[[str], bool] | None = None,
    add_link_rel: Callable[[str], Sequence[str] | None] | None = None,
    allow_tag: Callable[[str], bool] | None = None,
    allow_attribute: Callable[[str, str, str], AttributeDecision] | None = None,
    remove_content_tag: Callable[[str], bool] | None = None,
    remove_contents: bool = True,
    policy: SanitizePolicy | None = None,
) -> str:
    """Sanitize an untrusted HTML fragment and return safe markup.

    The keyword options build a `SanitizePolicy`; alternatively pass a
    prebuilt (or subclassed) policy as `policy=`. Omitting `allow_element_id`
    or `allow_class_name` strips every id or class.

    The result is re-parsed and sanitized again until it no longer changes,
    so sanitizing the output a second time returns it unchanged. Callbacks
    may therefore see the same tag or attribute more than once.

    Any exception raised by a callback propagates; treat it as a rejection
    of the input, never as a reason to use the original markup.
    """
    effective = _build_policy(
        policy,
        allow_element_id=allow_element_id,
        allow_class_name=allow_class_name,
        add_link_rel=add_link_rel,
        allow_tag=allow_tag,
        allow_attribute=allow_attribute,
        remove_content_tag=remove_content_tag,
        remove_contents=remove_contents,
    )
    result = _sanitize_once(markup, effective)
    for _ in range(_MAX_EXTRA_PASSES):
        again = _sanitize_once(result, effective)
        if again == result:
            break
        logger.debug("Output changed on re-parse, sanitizing again")
        result = again
    else:
        logger.warning("Output still changing after %d extra passes", _MAX_EXTRA_PASSES)
    return result
