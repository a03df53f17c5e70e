from lxml import html as lxml_html

from mmlformat.core.formatter import convert
from mmlformat.passes.dividers import make_divider

STARS = {"dividers": [{"tag": "***", "prop": "stars"}]}

STARS_TABLE = (
    '<table class="stars" title="stars">'
    '<tr><td class="stars-lefttop"></td><td class="stars-righttop"></td></tr>'
    '<tr><td class="stars-leftbot"></td><td class="stars-rightbot"></td></tr>'
    '</table>'
)


class TestMakeDivider:

    def test_table(self):
        assert make_divider("stars") == STARS_TABLE

    def test_cells_are_classed(self):
        table = lxml_html.fragment_fromstring(make_divider("dash"))
        classes = [td.get("class") for td in table.iter("td")]
        assert classes == ["dash-lefttop", "dash-righttop", "dash-leftbot", "dash-rightbot"]


class TestDividerPass:

    def test_divider_paragraph(self):
        result = convert("***", STARS)
        assert result.html == f"<div>{STARS_TABLE}</div>"
        assert result.source == "***"

    def test_divider_with_blanks(self):
        result = convert("  ***\t", STARS)
        assert result.html == f"<div>{STARS_TABLE}</div>"
        assert result.round_trip_ok

    def test_divider_between_lines(self):
        result = convert("a\n***\nb", STARS)
        assert result.html == f"<div>a\n{STARS_TABLE}\nb</div>"
        assert result.round_trip_ok

    def test_divider_must_be_alone(self):
        result = convert("*** x", STARS)
        assert result.html == "<div><p>*** x</p></div>"

    def test_prop_defaults_to_tag(self):
        result = convert("~", {"dividers": [{"tag": "~"}]})
        assert '<table class="~" title="~">' in result.html
