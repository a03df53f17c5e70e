import pytest

from mmlformat.core.formatter import convert
from mmlformat.passes.quotations import quote_depth, quote_prefix

QUOTES = {"quotations": {"prop": "quote"}}


class TestQuotePrefix:

    @pytest.mark.parametrize("line, expected", [
        ("plain", (0, 0)),
        ("> a", (1, 2)),
        (">> a", (2, 3)),
        ("> > a", (2, 4)),
        (">", (1, 1)),
        (" > a", (1, 3)),
        (">a", (0, 0)),
        (">>a", (0, 0)),
        ("> >a", (1, 2)),
        (">\ta", (1, 2)),
    ])
    def test_prefix(self, line, expected):
        assert quote_prefix(line) == expected

    def test_depth(self):
        assert quote_depth(">>> deep") == 3


class TestQuotationPass:

    def test_nested(self):
        result = convert("> a\n>> b\n> c", QUOTES)
        assert result.html == (
            '<div><blockquote class="quote">a\n'
            '<blockquote class="quote">b</blockquote>\n'
            'c</blockquote></div>'
        )
        assert result.source == "> a\n>> b\n> c"

    def test_quote_ends_inside_paragraph(self):
        result = convert("> a\nb", QUOTES)
        assert result.html == '<div><p><blockquote class="quote">a</blockquote>\nb</p></div>'
        assert result.round_trip_ok

    def test_quote_starts_inside_paragraph(self):
        result = convert("a\n> b", QUOTES)
        assert result.html == '<div><p>a\n<blockquote class="quote">b</blockquote></p></div>'

    @pytest.mark.parametrize("text", [
        "> a\n>>> b\n> c\nd\n>> e",
        ">> a\n> b",
        "> a\n\n>> b\n\n\nc",
    ])
    def test_balanced(self, text):
        html = convert(text, QUOTES).html
        assert html.count("<blockquote") == html.count("</blockquote>")

    def test_quoted_heading(self, formatter):
        result = formatter.convert("> Title\n=====")
        assert result.html == (
            '<div><blockquote class="quote">'
            '<h1 class="h1" title="h1">Title</h1>'
            '</blockquote></div>'
        )
        assert result.anomalies == []

    def test_quote_ends_in_code_block(self, formatter):
        result = formatter.convert("> quoted\n\t> indented quote")
        assert result.html == (
            '<div><blockquote class="quote">quoted\n'
            '<pre class="code1">indented quote</pre></blockquote>\n</div>'
        )
        assert result.anomalies == []

    def test_code_block_restarts_when_quote_ends(self, formatter):
        result = formatter.convert("\t> a\n\tb")
        assert result.html == (
            '<div><blockquote class="quote"><pre class="code1">a\n</pre></blockquote>'
            '<pre class="code1">b</pre>\n</div>'
        )
        assert result.anomalies == []

    def test_milestone_keeps_quote_open(self, formatter):
        result = formatter.convert("> a\n[[1]]\n> b")
        assert result.html == (
            '<div><blockquote class="quote">a\n'
            '<span class="page">1</span>\nb</blockquote></div>'
        )
        assert result.pages == [("1", 1)]
        assert result.round_trip_ok

    @pytest.mark.parametrize("text", [
        "> T\n===\nb",
        "\ta\n> T\n===",
        "> a\n>> \tcode\n> b",
        "\t> a\n[[1]]\n\t> b\n\tc",
        "> a\n\t>> b\n\t> c\nd",
        "> a > b & c",
    ])
    def test_nests_with_other_blocks(self, formatter, text):
        result = formatter.convert(text)
        assert result.anomalies == []
        assert result.html.count("<blockquote") == result.html.count("</blockquote>")

    def test_disabled(self):
        result = convert("> a", {})
        assert result.html == "<div><p>&gt; a</p></div>"
