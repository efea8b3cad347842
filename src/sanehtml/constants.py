"""
HTML constants and default policy tables used by the sanitizer.

Element names in the policy tables are upper-case (the canonical tag form used
for every tag comparison); attribute names are lower-case. Parser-facing sets
(void and raw-text elements) use the lower-case names the parser produces.

Usage:
    from sanehtml.constants import ALLOWED_ELEMENTS, VOID_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#raw-text-elements
"""

# HTML Element Sets
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose text content is not entity-decoded by the parser and must be
# serialized verbatim.
RAWTEXT_ELEMENTS = frozenset(
    {
        "iframe",
        "noembed",
        "noframes",
        "plaintext",
        "script",
        "style",
        "xmp",
    }
)

# The parser drops a newline directly after these start tags, so the serializer
# re-emits one when the content itself starts with a newline.
NEWLINE_STRIPPING_ELEMENTS = frozenset({"listing", "pre", "textarea"})

# Container used to keep a single root when several children are spliced into
# the top level of a fragment.
WRAPPER_TAG = "div"

# Default allow-list, modeled after the GitHub markup sanitization filter.
ALLOWED_ELEMENTS = frozenset(
    {
        # Headings
        "H1",
        "H2",
        "H3",
        "H4",
        "H5",
        "H6",
        "H7",
        "H8",
        # Text-level semantics
        "A",
        "ABBR",
        "B",
        "BDO",
        "BR",
        "CITE",
        "CODE",
        "DFN",
        "EM",
        "I",
        "KBD",
        "MARK",
        "Q",
        "S",
        "SAMP",
        "SMALL",
        "SPAN",
        "STRIKE",
        "STRONG",
        "SUB",
        "SUP",
        "TIME",
        "TT",
        "VAR",
        "WBR",
        # Ruby annotations
        "RP",
        "RT",
        "RUBY",
        # Grouping
        "BLOCKQUOTE",
        "DIV",
        "FIGCAPTION",
        "FIGURE",
        "HR",
        "P",
        "PRE",
        # Edits
        "DEL",
        "INS",
        # Lists
        "DD",
        "DL",
        "DT",
        "LI",
        "OL",
        "UL",
        # Tables
        "CAPTION",
        "TABLE",
        "TBODY",
        "TD",
        "TFOOT",
        "TH",
        "THEAD",
        "TR",
        # Media and interactive containers
        "DETAILS",
        "IMG",
        "SUMMARY",
    }
)

# Allowed on every permitted element. Event handlers and `style` are left out.
ALWAYS_ALLOWED_ATTRIBUTES = frozenset(
    {
        "abbr",
        "accept",
        "accept-charset",
        "accesskey",
        "action",
        "align",
        "alt",
        "aria-describedby",
        "aria-hidden",
        "aria-label",
        "aria-labelledby",
        "axis",
        "border",
        "cellpadding",
        "cellspacing",
        "char",
        "charoff",
        "charset",
        "checked",
        "clear",
        "color",
        "cols",
        "colspan",
        "compact",
        "coords",
        "datetime",
        "dir",
        "disabled",
        "enctype",
        "for",
        "frame",
        "headers",
        "height",
        "hreflang",
        "hspace",
        "ismap",
        "itemprop",
        "label",
        "lang",
        "maxlength",
        "media",
        "method",
        "multiple",
        "name",
        "nohref",
        "noshade",
        "nowrap",
        "open",
        "prompt",
        "readonly",
        "rel",
        "rev",
        "rows",
        "rowspan",
        "rules",
        "scope",
        "selected",
        "shape",
        "size",
        "span",
        "start",
        "summary",
        "tabindex",
        "target",
        "title",
        "type",
        "usemap",
        "valign",
        "value",
        "vspace",
        "width",
    }
)

# Disallowed elements whose content is dropped even when the caller asked to
# keep the content of removed tags. Their payload is code, styling, embedded
# documents or foreign markup, never prose.
REMOVE_CONTENT_ELEMENTS = frozenset(
    {
        "APPLET",
        "EMBED",
        "FRAME",
        "FRAMESET",
        "IFRAME",
        "MATH",
        "NOEMBED",
        "NOFRAMES",
        "NOSCRIPT",
        "OBJECT",
        "PLAINTEXT",
        "SCRIPT",
        "STYLE",
        "SVG",
        "TEMPLATE",
        "TEXTAREA",
        "TITLE",
        "XMP",
    }
)

# Schemes accepted by the URL validators.
NAVIGATIONAL_SCHEMES = frozenset({"http", "https", "mailto"})
RESOURCE_SCHEMES = frozenset({"http", "https"})

# HTML whitespace used to split class attribute tokens.
HTML_WHITESPACE = " \t\n\f\r"
