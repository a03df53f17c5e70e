import logging

import pytest

from mmlformat.core.chain import Chain
from mmlformat.core.formatter import Formatter, convert, describe_mismatch
from mmlformat.utils.dialect import Dialect
from mmlformat.utils.exceptions import ConfigError
from mmlformat.utils.structures import RefLoc


class TestScenarios:
    """The reference conversions every dialect implementation must produce."""

    def test_smart_quotes(self):
        result = convert('"Hello"', {"smartquotes": True})
        assert "“Hello”" in result.html

    def test_heading(self):
        result = convert("Title\n====", {"headings": [{"tag": "=", "prop": "h1"}]})
        assert '<h1 class="h1" title="h1">Title</h1>' in result.html

    def test_nested_quotations(self):
        result = convert("> a\n>> b\n> c", {"quotations": {"prop": "quote"}})
        html = result.html
        assert html.count('<blockquote class="quote">') == 2
        assert html.count("</blockquote>") == 2
        assert html.index(">a\n<blockquote") < html.index(">b</blockquote>") < html.index("\nc</blockquote>")
        # the markers are gone from the literals
        assert "> " not in html

    def test_divider(self):
        result = convert("***", {"dividers": [{"tag": "***", "prop": "hr"}]})
        for cell in ("hr-lefttop", "hr-righttop", "hr-leftbot", "hr-rightbot"):
            assert f'<td class="{cell}"></td>' in result.html

    def test_page_milestone(self):
        dialect = {"milestones": [{"leftTag": "[[", "rightTag": "]]", "prop": "page"}]}
        result = convert("first\nsecond\n[[12]]\nthird", dialect)
        assert result.pages == [RefLoc("12", 2)]
        assert '<span class="page">12</span>' in result.html


ROUND_TRIP_INPUTS = [
    "",
    "\n",
    "\n\n\n",
    "  \n \n\t",
    "a\n\n\n\n\nb",
    "Title\n=====\n\ntext",
    "> a\n>> b\n> c",
    ">\n> \n>>",
    "    code\n\tmore\n        deeper",
    "->x<-",
    "  ->one\ntwo<-  \n",
    "***",
    "*a `b` c*",
    "con-\ntinue-\n",
    "[[1]]\nx\n  [[2]]  ",
    "\"q\" it's 'x'",
    "> \"quoted\" *text*\n>> [[4]]\n\n\n\n***\n\n    code 'x'\n=====",
    "a\r\nb",
    "Trailing spaces   \n\n   \n\nnext\t",
    "a & b <c>\n> x > y",
]


class TestRoundTrip:

    @pytest.mark.parametrize("text", ROUND_TRIP_INPUTS)
    def test_source_is_rebuilt(self, formatter, text):
        result = formatter.convert(text)
        assert result.source == text
        assert result.round_trip_ok

    @pytest.mark.parametrize("text", ROUND_TRIP_INPUTS)
    def test_plain_dialect(self, plain_formatter, text):
        assert plain_formatter.convert(text).source == text

    def test_deterministic(self, formatter):
        text = ROUND_TRIP_INPUTS[16]
        assert formatter.convert(text).html == formatter.convert(text).html

    def test_mismatch_is_reported(self, formatter, monkeypatch, caplog):
        monkeypatch.setattr(Chain, "to_source", lambda self: "different")
        with caplog.at_level(logging.WARNING, logger="mmlformat"):
            result = formatter.convert("text")
        assert not result.round_trip_ok
        assert result.html == "<div><p>text</p></div>"
        assert len(result.anomalies) == 1
        assert "differs" in caplog.text


class TestDescribeMismatch:

    def test_first_difference(self):
        assert describe_mismatch("abc", "abd").endswith("line 1, column 2")

    def test_difference_on_later_line(self):
        assert describe_mismatch("a\nbc", "a\nbd").endswith("line 2, column 1")

    def test_length(self):
        assert "2 vs 3" in describe_mismatch("ab", "abc")


class TestFormatter:

    def test_accepts_dict(self, dialect_data):
        formatter = Formatter(dialect_data)
        assert isinstance(formatter.dialect, Dialect)

    def test_invalid_dialect(self):
        with pytest.raises(ConfigError):
            Formatter({"headings": [{"tag": "=="}]})

    def test_paragraphs(self, plain_formatter):
        assert plain_formatter.convert("a\n\nb").html == "<div><p>a</p><p>b</p></div>"

    def test_sections(self, plain_formatter):
        assert plain_formatter.convert("a\n\n\nb").html == "<div><p>a</p></div>\n<div><p>b</p></div>"

    def test_empty_section(self, plain_formatter):
        assert plain_formatter.convert("").html == "<div></div>"

    def test_labelled_paragraph(self):
        result = convert("a", {"paragraph": {"prop": "para"}, "section": {"prop": "sec"}})
        assert result.html == '<div class="sec"><p class="para" title="para">a</p></div>'

    def test_num_lines(self, formatter):
        assert formatter.convert("a\nb\n").num_lines == 3

    def test_well_formed_output(self, formatter):
        result = formatter.convert(ROUND_TRIP_INPUTS[16])
        assert result.anomalies == []

    @pytest.mark.parametrize("text, expected", [
        ("a & b", "<div><p>a &amp; b</p></div>"),
        ("x <y> z", "<div><p>x &lt;y&gt; z</p></div>"),
    ])
    def test_special_characters_are_escaped(self, formatter, text, expected):
        result = formatter.convert(text)
        assert result.html == expected
        assert result.source == text
        assert result.anomalies == []

    def test_malformed_output_is_reported(self, formatter):
        result = formatter.convert("a *b")
        assert result.round_trip_ok
        assert len(result.anomalies) == 1
        assert "well-formed" in result.anomalies[0]

    def test_correspondences_share_literals(self, formatter):
        text = "Title\n=====\n\n> a *b* c\n>> [[3]]\n\n->x<-"
        result = formatter.convert(text)
        assert result.correspondences
        for span in result.correspondences:
            src = text[span.source_offset:span.source_offset + span.length]
            out = result.html[span.html_offset:span.html_offset + span.length]
            assert src == out
