import pytest

from mmlformat.core.formatter import convert
from mmlformat.core.positions import (
    BEFORE_FIRST, find_highest_index, find_ref_index, html_to_source,
    locate_page, page_position, source_to_html,
)
from mmlformat.utils.structures import Correspondence, RefLoc

PAGES = [RefLoc("A", 0), RefLoc("B", 10), RefLoc("C", 20)]


class TestFindHighestIndex:

    @pytest.mark.parametrize("value, expected", [
        (5, 0),
        (15, 1),
        (25, 2),
        (-1, BEFORE_FIRST),
        (0, 0),
        (10, 1),
        (20, 2),
        (19, 1),
    ])
    def test_lookup(self, value, expected):
        assert find_highest_index(PAGES, value) == expected

    def test_empty(self):
        assert find_highest_index([], 3) == BEFORE_FIRST

    def test_single_entry(self):
        assert find_highest_index([("x", 4)], 4) == 0
        assert find_highest_index([("x", 4)], 3) == BEFORE_FIRST

    def test_custom_key(self):
        spans = [Correspondence(0, 5, 2), Correspondence(4, 12, 3)]
        assert find_highest_index(spans, 6, key=lambda s: s.source_offset) == 1


class TestPages:

    def test_find_ref_index(self):
        assert find_ref_index(PAGES, "B") == 1
        assert find_ref_index(PAGES, "Z") == -1

    def test_page_position(self):
        assert page_position(PAGES, 15, 30) == ("B", 0.5)
        assert page_position(PAGES, 25, 30) == ("C", 0.5)

    def test_page_position_before_first(self):
        assert page_position([RefLoc("A", 4)], 2, 10) == ("A", 0.0)

    def test_page_position_empty(self):
        assert page_position([], 2, 10) is None

    def test_page_position_past_end(self):
        assert page_position(PAGES, 40, 30) == ("C", 1.0)

    def test_locate_page(self):
        assert locate_page(PAGES, "B", 0.5, 30) == 15
        assert locate_page(PAGES, "C", 1.0, 30) == 30

    def test_locate_unknown_page(self):
        assert locate_page(PAGES, "Z", 0.5, 30) == 0

    def test_locate_inverts_position(self):
        ref, fraction = page_position(PAGES, 27, 30)
        assert locate_page(PAGES, ref, fraction, 30) == 27


class TestOffsetMapping:

    @pytest.fixture
    def result(self):
        dialect = {"charformats": [{"tag": "*", "prop": "i"}], "quotations": {"prop": "q"}}
        return convert("> a *bold* word\n> end", dialect)

    def test_literals_map_exactly(self, result):
        spans = result.correspondences
        for i, c in enumerate(result.source):
            h = source_to_html(spans, i)
            if c not in "*>\n" and not (c == " " and result.source[i - 1] == ">"):
                assert result.html[h] == c
                assert html_to_source(spans, h) == i

    def test_markup_maps_to_preceding_literal(self, result):
        spans = result.correspondences
        star = result.source.index("*")
        assert source_to_html(spans, star) == spans[0].html_offset + spans[0].length

    def test_before_first_literal(self, result):
        spans = result.correspondences
        assert html_to_source(spans, 0) == 0
        assert source_to_html(spans, 0) == 0
