"""Command-line entry point: sanitize markup from a file or stdin.

Usage:
    python -m sanehtml comment.html
    echo '<p onclick="x()">hi</p>' | sanehtml --keep-contents
"""

from __future__ import annotations

import argparse
import logging
import re
import sys

from .policy import SanitizePolicy
from .sanitize import sanitize

logger = logging.getLogger("sanehtml")


def _full_match_predicate(pattern: str | None):
    if pattern is None:
        return None
    regex = re.compile(pattern)
    return lambda value: regex.fullmatch(value) is not None


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sanehtml",
        description="Remove script-capable markup from untrusted HTML",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="File to sanitize (default: read stdin)",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write sanitized markup to this file instead of stdout",
    )
    parser.add_argument(
        "--keep-contents",
        action="store_true",
        help="Unwrap disallowed tags instead of dropping their content",
    )
    parser.add_argument(
        "--allow-id",
        metavar="REGEX",
        default=None,
        help="Keep id attributes whose value fully matches REGEX",
    )
    parser.add_argument(
        "--allow-class",
        metavar="REGEX",
        default=None,
        help="Keep class tokens that fully match REGEX",
    )
    parser.add_argument(
        "--link-rel",
        metavar="TOKEN",
        nargs="+",
        default=None,
        help="Set rel to these tokens on every link that keeps its href",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every sanitization decision to stderr",
    )
    return parser


def build_policy(args: argparse.Namespace) -> SanitizePolicy:
    rels = list(args.link_rel) if args.link_rel else None
    return SanitizePolicy(
        allow_element_id=_full_match_predicate(args.allow_id),
        allow_class_name=_full_match_predicate(args.allow_class),
        add_link_rel=(lambda _href: rels) if rels else None,
        remove_contents=not args.keep_contents,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        policy = build_policy(args)
    except re.error as exc:
        parser.error(f"invalid pattern: {exc}")

    try:
        if args.input == "-":
            markup = sys.stdin.read()
        else:
            with open(args.input, encoding="utf-8") as f:
                markup = f.read()
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.input, exc)
        return 1

    result = sanitize(markup, policy=policy)

    try:
        if args.output is None:
            sys.stdout.write(result)
        else:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result)
    except OSError as exc:
        logger.error("Cannot write %s: %s", args.output, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
