"""
Dividers: a line holding only a divider tag (e.g. "***") is drawn as a
2x2 table whose cells the stylesheet decorates.
"""
from lxml import etree

from ..core.chain import Chain
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Paragraph, ParagraphState

CELLS = (('lefttop', 'righttop'), ('leftbot', 'rightbot'))


def make_divider(prop: str) -> str:
    """Builds the divider table; the table and its cells are classed after `prop`."""
    table = Tag('table', prop_attrib(prop)).create()
    for row in CELLS:
        tr = etree.SubElement(table, 'tr')
        for cell in row:
            etree.SubElement(tr, 'td', {'class': f"{prop}-{cell}"})
    return etree.tostring(table, method='html', encoding='unicode')


def process_dividers(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """Replaces divider lines with their table."""
    if not dialect.dividers:
        return

    lookup: dict[str, str] = {}
    for divider in dialect.dividers:
        lookup.setdefault(divider.tag, divider.prop)

    for index in chain.paragraph_lines(para):
        node = chain[index]
        prop = lookup.get(node.literal.strip())
        if prop is None:
            continue
        node.consume_all()
        node.append_rendered(make_divider(prop))
        state.formatted = True
