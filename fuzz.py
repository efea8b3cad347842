#!/usr/bin/env python3
"""
Random fuzzer for the sanitizer.
Generates malformed and hostile HTML and checks that sanitizing it never
crashes, never hangs, is stable when run twice, and never lets a disallowed
tag or attribute through.
"""

import argparse
import random
import string
import sys
import time
import traceback

from sanehtml import (
    ALLOWED_ELEMENTS,
    ALWAYS_ALLOWED_ATTRIBUTES,
    ELEMENT_ATTRIBUTE_VALIDATORS,
    Element,
    SanitizePolicy,
    parse_fragment,
    sanitize,
)

TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "th", "ul", "ol", "li",
    "form", "input", "button", "select", "option", "textarea", "script", "style",
    "title", "meta", "link", "br", "hr", "h1", "h2", "iframe", "object", "embed",
    "video", "audio", "source", "svg", "math", "template", "noscript", "pre",
    "code", "blockquote", "q", "del", "ins", "details", "summary", "frameset",
    "frame", "noframes", "plaintext", "xmp", "listing", "image", "base", "font",
]

RAW_TEXT_TAGS = ["script", "style", "xmp", "iframe", "noembed", "noframes", "noscript"]
FORMATTING_TAGS = ["a", "b", "code", "em", "font", "i", "s", "small", "strike", "strong", "tt", "u"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value", "type",
    "onclick", "onload", "onerror", "onmouseover", "data-x", "aria-label", "cite",
    "longdesc", "itemscope", "itemtype", "rel", "formaction", "srcdoc", "xlink:href",
]

HOSTILE_URLS = [
    "javascript:alert(1)",
    "JaVaScRiPt:alert(1)",
    " javascript:alert(1)",
    "java\tscript:alert(1)",
    "java\nscript:alert(1)",
    "\x01javascript:alert(1)",
    "javascript&colon;alert(1)",
    "&#106;avascript:alert(1)",
    "vbscript:msgbox(1)",
    "data:text/html,<script>alert(1)</script>",
    "data:image/svg+xml;base64,PHN2Zz4=",
    "http://[::1",
    "//example.com/x",
    "https://example.com/x",
    "mailto:a@example.com",
    "/relative/path",
    "#frag",
]

SPECIAL_CHARS = [
    "\x00", "\x01", "\x0b", "\x0c", "\x7f",
    "�", " ", " ", "​", "﻿",
]

ENTITIES = [
    "&amp;", "&lt;", "&gt;", "&quot;", "&apos;", "&nbsp;",
    "&", "&amp", "&#", "&#x", "&#x3c;", "&#60;", "&lt", "&unknown;",
    "&#0;", "&#x110000;",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def fuzz_tag_name():
    """Generate tag names, mostly real ones."""
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS) + random_string(1, 3),
        lambda: random_string(1, 8),
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),
    ]
    return random.choice(strategies)()


def fuzz_attribute_value(name):
    if name in ("href", "src", "cite", "longdesc", "formaction", "xlink:href"):
        return random.choice(HOSTILE_URLS)
    strategies = [
        lambda: random_string(0, 30),
        lambda: random.choice(ENTITIES),
        lambda: "<script>alert(1)</script>",
        lambda: '"><img src=x onerror=alert(1)>',
        lambda: " ".join(random_string(1, 6) for _ in range(random.randint(0, 5))),
        lambda: random.choice(HOSTILE_URLS),
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate an attribute, hostile or not, with a random quoting style."""
    name = random.choice(ATTRIBUTES) if random.random() < 0.8 else "on" + random_string(2, 8)
    if random.random() < 0.2:
        name = name.upper()
    value = fuzz_attribute_value(name.lower())
    quote_styles = [('="', '"'), ("='", "'"), ("=", ""), ("", ""), ('="', "")]
    quote_start, quote_end = random.choice(quote_styles)
    if quote_start == "":
        return name
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closing = random.choice([">", "/>", " >", "", ">>"])
    return f"<{tag} {attrs}{closing}"


def fuzz_close_tag():
    tag = fuzz_tag_name()
    variants = [f"</{tag}>", f"</ {tag}>", f"</{tag}", f"</{tag} x>", f"<//{tag}>"]
    return random.choice(variants)


def fuzz_comment():
    content = random_string(0, 30)
    variants = [
        f"<!--{content}-->",
        f"<!--{content}",
        f"<!--{content}--!>",
        "<!-->",
        "<!--->",
        f"<!--{content}--><script>alert(1)</script>",
        f"<!{content}>",
        f"<?{content}?>",
        f"<![CDATA[{content}]]>",
    ]
    return random.choice(variants)


def fuzz_text():
    strategies = [
        lambda: random_string(1, 40),
        lambda: random.choice(ENTITIES),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" + random_string(1, 5),
        lambda: random_string() + ">" + random_string(),
        lambda: "\n" * random.randint(1, 3),
    ]
    return random.choice(strategies)()


def fuzz_raw_text():
    """Raw text elements, including content that tries to break out."""
    tag = random.choice(RAW_TEXT_TAGS)
    content = random_string(0, 30)
    variants = [
        f"<{tag}>{content}</{tag}>",
        f"<{tag}>{content}",
        f"<{tag}></{tag[:-1]}><img src=x onerror=alert(1)></{tag}>",
        f"<{tag}><!-- </{tag}> --><b>{content}</b>",
        f"<{tag.upper()}>{content}</{tag}>",
        "<script>var s = '</' + 'script>';</script>",
        f"<noscript><p title=\"</noscript><img src=x onerror=alert(1)>\">{content}</p></noscript>",
    ]
    return random.choice(variants)


def fuzz_foreign():
    """SVG and MathML, including breakouts back into HTML."""
    content = random_string(0, 20)
    variants = [
        f"<svg><script>{content}</script></svg>",
        "<svg onload=alert(1)><circle/></svg>",
        f"<svg><a xlink:href='javascript:alert(1)'>{content}</a></svg>",
        f"<svg><foreignObject><p>{content}</p></foreignObject></svg>",
        f"<svg><p>{content}</p></svg>",
        f"<math><mi xlink:href='javascript:alert(1)'>{content}</mi></math>",
        f"<math><mtext><table><mglyph><style><img src=x onerror=alert(1)>{content}",
        f"<svg></p><style><a id='</style><img src=1 onerror=alert(1)>'>",
    ]
    return random.choice(variants)


def fuzz_misnesting():
    """Adoption agency and foster parenting triggers."""
    formatting = random.choice(FORMATTING_TAGS)
    block = random.choice(["div", "p", "blockquote", "form", "font"])
    text = random_string(1, 8)
    variants = [
        f"<{formatting}>{text}<{block}>more</{formatting}>{text}</{block}>",
        f"<{formatting}><{block}>1</{formatting}><{block}>2</{formatting}>",
        f"<table>{text}<tr><td>cell</td></tr></table>",
        f"<table><{block}>foster</{block}><tr><td>{text}</td></tr></table>",
        f"<table><script>{text}</script><tr><td>cell</td></tr></table>",
        f"<p><{block}><p>{text}</p></{block}></p>",
        f"<ul><li>{text}<li><{block}>{text}</ul>",
        f"<a href='/x'><table><a href='/y'>{text}</table>",
        f"<{formatting}><table><{formatting}>{text}</table></{formatting}>",
    ]
    return random.choice(variants)


def fuzz_nested_structure(depth=0, max_depth=8):
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()
    tag = random.choice(TAGS)
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 2)))
    children = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    if random.random() < 0.2:
        return f"<{tag} {attrs}>{children}"
    return f"<{tag} {attrs}>{children}</{tag}>"


def fuzz_deeply_nested():
    depth = random.randint(100, 400)
    tag = random.choice(["div", "span", "font", "b", "custom"])
    return f"<{tag}>" * depth + "content" + f"</{tag}>" * random.choice([depth, depth // 2])


def generate_fuzzed_html():
    """Generate one fuzzed fragment."""
    parts = []
    for _ in range(random.randint(1, 15)):
        generator = random.choices(
            [
                fuzz_open_tag,
                fuzz_close_tag,
                fuzz_comment,
                fuzz_text,
                fuzz_raw_text,
                fuzz_foreign,
                fuzz_misnesting,
                fuzz_nested_structure,
                fuzz_deeply_nested,
            ],
            weights=[20, 8, 5, 15, 6, 6, 6, 10, 1],
        )[0]
        parts.append(generator())
    return "".join(parts)


def find_leaks(output):
    """Return a description of every disallowed construct found in `output`."""
    leaks = []
    stack = list(parse_fragment(output).children)
    while stack:
        node = stack.pop()
        if not isinstance(node, Element):
            continue
        tag = node.tag
        if tag not in ALLOWED_ELEMENTS:
            leaks.append(f"tag <{node.name}>")
        validators = ELEMENT_ATTRIBUTE_VALIDATORS.get(tag, {})
        for name, value in node.attrs.items():
            if name in ALWAYS_ALLOWED_ATTRIBUTES:
                continue
            validator = validators.get(name)
            if validator is None or not validator(value):
                leaks.append(f"attribute {name}={value!r} on <{node.name}>")
        stack.extend(node.children)
    return leaks


POLICIES = {
    "default": SanitizePolicy(),
    "keep-contents": SanitizePolicy(remove_contents=False),
}


def run_fuzzer(policy_name, num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer with one sanitize policy."""
    if seed is not None:
        random.seed(seed)

    policy = POLICIES[policy_name]
    crashes = []
    hangs = []
    unstable = []
    leaks = []
    successes = 0

    print(f"Fuzzing sanitize ({policy_name}) with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            output = sanitize(html, policy=policy)
            elapsed = time.perf_counter() - start

            # Check for hangs (>5 seconds)
            if elapsed > 5.0:
                hangs.append({"test_num": i, "html": html, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
                continue

            found = find_leaks(output)
            if found:
                leaks.append({"test_num": i, "html": html, "output": output, "leaks": found})
                if verbose:
                    print(f"  LEAK: Test {i}: {found[0]}")
                continue

            again = sanitize(output, policy=policy)
            if again != output:
                unstable.append({"test_num": i, "html": html, "output": output, "again": again})
                if verbose:
                    print(f"  UNSTABLE: Test {i}")
                continue

            successes += 1

        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print(f"FUZZING RESULTS: {policy_name}")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Leaks:          {len(leaks)}")
    print(f"Unstable:       {len(unstable)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if leaks:
        print(f"\n{'='*60}")
        print("LEAK DETAILS:")
        print(f"{'='*60}")
        for leak in leaks[:10]:
            print(f"\nTest #{leak['test_num']}:")
            print(f"  HTML:   {leak['html'][:200]!r}...")
            print(f"  Output: {leak['output'][:200]!r}...")
            print(f"  Leaked: {', '.join(leak['leaks'][:5])}")

    if unstable:
        print(f"\n{'='*60}")
        print("UNSTABLE OUTPUT:")
        print(f"{'='*60}")
        for case in unstable[:5]:
            print(f"\nTest #{case['test_num']}:")
            print(f"  Once:  {case['output'][:200]!r}")
            print(f"  Twice: {case['again'][:200]!r}")

    if hangs:
        print(f"\n{'='*60}")
        print("HANG DETAILS:")
        print(f"{'='*60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    failed = crashes or hangs or leaks or unstable
    if save_failures and failed:
        filename = f"fuzz_failures_{policy_name}_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Fuzzing results for sanitize ({policy_name})\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for leak in leaks:
                f.write(f"=== LEAK #{leak['test_num']} ===\n")
                f.write(f"HTML:\n{leak['html']}\nOutput:\n{leak['output']}\n")
                f.write(f"Leaked: {leak['leaks']}\n\n")
            for case in unstable:
                f.write(f"=== UNSTABLE #{case['test_num']} ===\n")
                f.write(f"HTML:\n{case['html']}\nOnce:\n{case['output']}\nTwice:\n{case['again']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failed


def main():
    parser = argparse.ArgumentParser(description="Fuzz the sanitizer with hostile and malformed input")
    parser.add_argument(
        "--policy", "-p",
        choices=sorted(POLICIES),
        default="default",
        help="Sanitize policy to fuzz (default: default)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed fragments (no sanitizing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.policy,
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
