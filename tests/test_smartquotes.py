import pytest

from mmlformat.core.formatter import convert
from mmlformat.passes.smartquotes import smarten


class TestSmarten:

    @pytest.mark.parametrize("text, expected", [
        ('"Hello," she said.', '“Hello,” she said.'),
        ("it's", "it’s"),
        ("'quoted'", "‘quoted’"),
        ('("x")', '(“x”)'),
        ("\"'nested'\"", "“‘nested’”"),
        ("no quotes", "no quotes"),
        ("", ""),
    ])
    def test_curls(self, text, expected):
        assert smarten(text) == expected

    def test_length_is_kept(self):
        text = "\"a\" 'b' c's"
        assert len(smarten(text)) == len(text)

    def test_idempotent(self):
        text = "He said \"don't\" and 'left'."
        once = smarten(text)
        assert smarten(once) == once

    def test_curly_quotes_untouched(self):
        assert smarten("“already”") == "“already”"


class TestSmartQuotePass:

    def test_html_has_curly_quotes(self):
        result = convert('"Hi"', {"smartquotes": True})
        assert result.html == "<div><p>“Hi”</p></div>"

    def test_source_has_straight_quotes(self):
        text = "first line\n\"Hi,\" she said\n\nit's 'fine'"
        result = convert(text, {"smartquotes": True})
        assert "“Hi,”" in result.html
        assert "it’s ‘fine’" in result.html
        assert result.source == text
        assert result.round_trip_ok

    def test_disabled(self):
        result = convert('"Hi"', {})
        assert result.html == '<div><p>"Hi"</p></div>'
