"""URL classification for URL-valued attributes.

Both validators are pure and total: a URL that cannot be parsed is simply
classified as unsafe, never reported as an error.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from .constants import NAVIGATIONAL_SCHEMES, RESOURCE_SCHEMES

# Browsers strip leading/trailing C0 controls and spaces and drop tab/newline
# characters anywhere in a URL before resolving it. Do the same so that
# `java\tscript:` is judged by the scheme a browser would see.
_C0_CONTROL_OR_SPACE = "".join(chr(i) for i in range(0x21))
_REMOVED_CHARS = str.maketrans("", "", "\t\n\r")


def url_scheme(url: str) -> str | None:
    """Return the lower-cased scheme of `url`, "" when it has none.

    Returns None when `url` is not parseable as a URI reference.
    """
    cleaned = str(url).strip(_C0_CONTROL_OR_SPACE).translate(_REMOVED_CHARS)
    try:
        parts = urlsplit(cleaned)
        # Port parsing is lazy; force it so malformed authorities fail here.
        _ = parts.port
    except ValueError:
        return None
    return parts.scheme.lower()


def _has_allowed_scheme(url: str, schemes: frozenset[str]) -> bool:
    scheme = url_scheme(url)
    if scheme is None:
        return False
    return scheme == "" or scheme in schemes


def is_navigational_url(url: str) -> bool:
    """Whether `url` is safe as a hyperlink target (http, https, mailto or relative)."""
    return _has_allowed_scheme(url, NAVIGATIONAL_SCHEMES)


def is_resource_url(url: str) -> bool:
    """Whether `url` is safe as an embedded resource (http, https or relative)."""
    return _has_allowed_scheme(url, RESOURCE_SCHEMES)
