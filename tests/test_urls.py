from __future__ import annotations

import unittest

from sanehtml.urls import is_navigational_url, is_resource_url, url_scheme


class TestUrlScheme(unittest.TestCase):
    def test_scheme_is_lowercased(self) -> None:
        assert url_scheme("HTTPS://example.com") == "https"
        assert url_scheme("JavaScript:alert(1)") == "javascript"

    def test_relative_references_have_empty_scheme(self) -> None:
        assert url_scheme("test.html") == ""
        assert url_scheme("/test.html") == ""
        assert url_scheme("//example.com/test.html") == ""
        assert url_scheme("?q=1") == ""
        assert url_scheme("#top") == ""

    def test_unparseable_urls_return_none(self) -> None:
        assert url_scheme("http://[::1") is None
        assert url_scheme("http://example.com:99999/") is None
        assert url_scheme("http://example.com:port/") is None

    def test_browser_ignored_characters_do_not_hide_the_scheme(self) -> None:
        assert url_scheme("  javascript:alert(1)") == "javascript"
        assert url_scheme("java\tscript:alert(1)") == "javascript"
        assert url_scheme("java\nscript:alert(1)") == "javascript"
        assert url_scheme("\x01javascript:alert(1)") == "javascript"


class TestNavigationalUrl(unittest.TestCase):
    def test_accepts_link_schemes_and_relative_urls(self) -> None:
        for url in [
            "test.html",
            "/test.html",
            "//example.com/test.html",
            "https://example.com/test.html",
            "http://example.com/test.html",
            "mailto:test@example.com",
            "#anchor",
            "",
        ]:
            assert is_navigational_url(url), url

    def test_rejects_script_and_data_schemes(self) -> None:
        for url in [
            "javascript:alert()",
            "JAVASCRIPT:alert()",
            " javascript:alert()",
            "java\tscript:alert()",
            "vbscript:msgbox()",
            "data:text/html,<script>alert(1)</script>",
            "ftp://example.com/file",
        ]:
            assert not is_navigational_url(url), url

    def test_malformed_url_is_invalid_not_an_error(self) -> None:
        assert is_navigational_url("http://[::1") is False
        assert is_navigational_url("https://example.com:70000/") is False


class TestResourceUrl(unittest.TestCase):
    def test_accepts_http_and_relative(self) -> None:
        for url in [
            "test.jpg",
            "/test.jpg",
            "//test.jpg",
            "https://example.com/test.jpg",
            "http://example.com/test.jpg",
        ]:
            assert is_resource_url(url), url

    def test_rejects_mailto(self) -> None:
        assert is_navigational_url("mailto:test@example.com")
        assert not is_resource_url("mailto:test@example.com")

    def test_rejects_script_schemes(self) -> None:
        assert not is_resource_url("javascript:test.jpg")
        assert not is_resource_url("data:image/svg+xml;base64,PHN2Zz4=")
        assert not is_resource_url("http://[bad")


if __name__ == "__main__":
    unittest.main()
