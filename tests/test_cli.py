from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sanehtml.__main__ import main


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, content: str) -> str:
        path = self.tmp / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    def _run(self, argv: list[str], stdin: str = "") -> tuple[int, str]:
        with (
            mock.patch("sys.stdin", io.StringIO(stdin)),
            mock.patch("sys.stdout", new_callable=io.StringIO) as stdout,
        ):
            code = main(argv)
        return code, stdout.getvalue()

    def test_file_to_stdout(self) -> None:
        path = self._write("in.html", '<p onclick="x()">hi</p><script>bad()</script>')
        assert self._run([path]) == (0, "<p>hi</p>")

    def test_stdin_to_stdout(self) -> None:
        assert self._run([], stdin="<b>x</b><iframe>y</iframe>") == (0, "<b>x</b>")
        assert self._run(["-"], stdin="a < b") == (0, "a &lt; b")

    def test_output_file(self) -> None:
        src = self._write("in.html", "<em>x</em><form>f</form>")
        dest = self.tmp / "out.html"
        code, out = self._run([src, "--output", str(dest)])
        assert code == 0
        assert out == ""
        assert dest.read_text(encoding="utf-8") == "<em>x</em>"

    def test_keep_contents(self) -> None:
        assert self._run(["--keep-contents"], stdin="<p><font>a</font>b</p>") == (0, "<p>ab</p>")

    def test_allow_id_and_class(self) -> None:
        markup = '<span id="note-1" class="hl big">t</span><span id="x">u</span>'
        code, out = self._run(["--allow-id", r"note-\d+", "--allow-class", "hl|small"], stdin=markup)
        assert code == 0
        assert out == '<span id="note-1" class="hl">t</span><span>u</span>'

    def test_patterns_must_match_fully(self) -> None:
        code, out = self._run(["--allow-class", "h"], stdin='<span class="hl">t</span>')
        assert (code, out) == (0, "<span>t</span>")

    def test_link_rel(self) -> None:
        markup = '<a href="https://example.com">x</a><a href="javascript:y">y</a>'
        code, out = self._run(["--link-rel", "ugc", "nofollow"], stdin=markup)
        assert code == 0
        assert out == '<a href="https://example.com" rel="ugc nofollow">x</a><a>y</a>'

    def test_invalid_pattern_is_usage_error(self) -> None:
        with mock.patch("sys.stderr", new_callable=io.StringIO), self.assertRaises(SystemExit) as ctx:
            main(["--allow-id", "("])
        assert ctx.exception.code == 2

    def test_missing_input_file(self) -> None:
        with self.assertLogs("sanehtml", level="ERROR") as logs:
            code, out = self._run([str(self.tmp / "missing.html")])
        assert code == 1
        assert out == ""
        assert "Cannot read" in logs.output[0]

    def test_unwritable_output(self) -> None:
        with self.assertLogs("sanehtml", level="ERROR") as logs:
            code, _ = self._run(["-o", str(self.tmp / "no-such-dir" / "out.html")], stdin="x")
        assert code == 1
        assert "Cannot write" in logs.output[0]


if __name__ == "__main__":
    unittest.main()
