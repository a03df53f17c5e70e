"""
Paragraph formats: a paragraph enclosed in a left and right tag (e.g.
"<<" ... ">>") is rendered as a labelled paragraph.
"""
from ..core.chain import Chain
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Paragraph, ParagraphState
from ..utils.text_utils import end_pos, is_blank, start_pos


def process_paraformats(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """Applies the first paragraph format whose tags enclose the paragraph."""
    if not dialect.paraformats:
        return

    content = [i for i in chain.paragraph_lines(para) if not is_blank(chain[i].literal)]
    if not content:
        return
    first, last = content[0], content[-1]

    for pfmt in dialect.paraformats:
        lpos = start_pos(chain[first].literal, pfmt.left_tag)
        if lpos < 0:
            continue
        rpos = end_pos(chain[last].literal, pfmt.right_tag)
        if rpos < 0:
            continue
        left_end = lpos + len(pfmt.left_tag)
        if first == last and rpos < left_end:
            continue    # both tags would share characters

        tag = Tag('p', prop_attrib(pfmt.prop))
        # the right side first: it does not move the left tag's offsets
        chain.consume_tail(last, rpos)
        chain[chain[last].next].prepend_rendered(tag.close())
        chain[first].consume(left_end)
        chain[first].append_rendered(tag.open())
        state.formatted = True
        return
