from __future__ import annotations

import unittest

from sanehtml.errors import ParseError
from sanehtml.node import Comment, DocumentFragment, Element, Text
from sanehtml.parser import parse_fragment


class TestParseFragment(unittest.TestCase):
    def test_returns_fragment_with_children(self) -> None:
        root = parse_fragment('<p class="x">a<b>b</b></p>tail')
        assert isinstance(root, DocumentFragment)
        assert len(root.children) == 2
        p, tail = root.children
        assert isinstance(p, Element)
        assert p.name == "p"
        assert p.namespace is None
        assert p.attrs == {"class": "x"}
        assert p.parent is root
        assert isinstance(tail, Text)
        assert tail.data == "tail"

        text, b = p.children
        assert isinstance(text, Text) and text.data == "a"
        assert isinstance(b, Element) and b.name == "b"
        assert b.parent is p

    def test_plain_text(self) -> None:
        root = parse_fragment("a < b")
        assert len(root.children) == 1
        assert isinstance(root.children[0], Text)
        assert root.children[0].data == "a < b"

    def test_entities_are_decoded(self) -> None:
        root = parse_fragment("&lt;b&gt; &amp; &quot;")
        assert root.children[0].data == '<b> & "'

    def test_attribute_names_are_lowercased(self) -> None:
        root = parse_fragment('<img SRC="a.jpg" ALt="hi">')
        img = root.children[0]
        assert isinstance(img, Element)
        assert img.attrs == {"src": "a.jpg", "alt": "hi"}
        assert img.children == []

    def test_unclosed_elements_are_closed(self) -> None:
        root = parse_fragment("<p>hello")
        p = root.children[0]
        assert isinstance(p, Element)
        assert p.name == "p"
        assert p.children[0].data == "hello"

    def test_stray_br_end_tag_becomes_br(self) -> None:
        root = parse_fragment("<br>hello</br>")
        names = [child.name for child in root.children]
        assert names == ["br", "#text", "br"]

    def test_comments_are_kept(self) -> None:
        root = parse_fragment("a<!-- note -->b")
        assert isinstance(root.children[1], Comment)
        assert root.children[1].data == " note "

    def test_script_content_is_raw_text(self) -> None:
        root = parse_fragment('<script>if (a < b) alert("x")</script>')
        script = root.children[0]
        assert isinstance(script, Element)
        assert script.children[0].data == 'if (a < b) alert("x")'

    def test_foreign_elements_keep_namespace_and_case(self) -> None:
        root = parse_fragment('<svg viewBox="0 0 1 1"><foreignObject></foreignObject></svg>')
        svg = root.children[0]
        assert isinstance(svg, Element)
        assert svg.namespace == "svg"
        assert svg.attrs == {"viewBox": "0 0 1 1"}
        assert svg.tag == "SVG"
        child = svg.children[0]
        assert child.name == "foreignObject"
        assert child.tag == "FOREIGNOBJECT"

    def test_namespaced_foreign_attributes_get_prefix(self) -> None:
        root = parse_fragment('<svg><a xlink:href="javascript:x()">t</a></svg>')
        link = root.children[0].children[0]
        assert isinstance(link, Element)
        assert link.attrs == {"xlink:href": "javascript:x()"}

    def test_deep_nesting_does_not_recurse(self) -> None:
        depth = 1500
        root = parse_fragment("<span>" * depth + "x")
        node = root
        for _ in range(depth):
            node = node.children[0]
        assert node.children[0].data == "x"

    def test_rejects_non_string_input(self) -> None:
        with self.assertRaises(TypeError):
            parse_fragment(b"<p>bytes</p>")  # type: ignore[arg-type]


class TestParseErrors(unittest.TestCase):
    def test_no_errors_by_default(self) -> None:
        root = parse_fragment("<div></span></div>")
        assert root.errors == []

    def test_collect_errors(self) -> None:
        root = parse_fragment("<div></span></div>", collect_errors=True)
        assert len(root.errors) > 0
        assert all(isinstance(e, ParseError) for e in root.errors)
        error = root.errors[0]
        assert isinstance(error.code, str) and error.code
        assert isinstance(error.line, int)
        assert isinstance(error.column, int)

    def test_clean_markup_has_no_errors(self) -> None:
        root = parse_fragment("<p>fine</p>", collect_errors=True)
        assert root.errors == []


class TestParseErrorRecord(unittest.TestCase):
    def test_str_and_repr(self) -> None:
        located = ParseError("unexpected-end-tag", line=1, column=5, message="Unexpected end tag (span).")
        assert repr(located) == "ParseError('unexpected-end-tag', line=1, column=5)"
        assert str(located) == "(1,5): unexpected-end-tag - Unexpected end tag (span)."
        bare = ParseError("eof")
        assert repr(bare) == "ParseError('eof')"
        assert str(bare) == "eof"

    def test_equality_ignores_message(self) -> None:
        assert ParseError("x", 1, 2, "a") == ParseError("x", 1, 2, "b")
        assert ParseError("x", 1, 2) != ParseError("x", 1, 3)
        assert ParseError("x") != "x"
        assert len({ParseError("x", 1, 2, "a"), ParseError("x", 1, 2, "b")}) == 1


if __name__ == "__main__":
    unittest.main()
