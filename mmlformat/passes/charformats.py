"""
Character formats: inline tags (e.g. "*" ... "*") become labelled spans,
and a hyphen at the end of a line can be turned into a soft hyphen that
joins the line to the next one.
"""
from ..core.chain import Chain
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Paragraph, ParagraphState

SOFT_HYPHEN = '-'
SOFT_HYPHEN_TAG = Tag('span', {'class': 'soft-hyphen'})


def _match_tag(text: str, pos: int, tags: list[tuple[str, str]]) -> tuple[str, str] | None:
    """Returns the first (tag, prop) pair, in dialect order, that starts at pos."""
    for tag, prop in tags:
        if text.startswith(tag, pos):
            return tag, prop
    return None


def _ends_line(chain: Chain, index: int, end: int) -> bool:
    """Is this node's literal followed by a line break inside the paragraph?"""
    following = chain[index].next
    return (
        following is not None
        and following != end
        and chain[following].source_markup.startswith('\n')
    )


def _mark_soft_hyphen(chain: Chain, index: int, pos: int) -> int:
    """Wraps the hyphen at `pos` in a soft-hyphen span and joins the next line."""
    hyphen = chain.split(index, pos)
    chain[hyphen].append_rendered(SOFT_HYPHEN_TAG.open())
    following = chain[chain[hyphen].next]
    following.rendered_markup = following.rendered_markup.replace('\n', '', 1)
    following.prepend_rendered(SOFT_HYPHEN_TAG.close())
    return hyphen


def process_charformats(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """
    Scans the paragraph left to right, matching inline tags against a stack:
    a tag equal to the top of the stack closes its span, any other tag opens
    one. Spans still open at the end of the paragraph are left open.
    """
    if not dialect.charformats and not dialect.softhyphens:
        return

    tags = [(cfmt.tag, cfmt.prop) for cfmt in dialect.charformats]
    stack: list[str] = []

    index = chain[para.head].next
    while index is not None and index != para.end:
        text = chain[index].literal
        i = 0
        while i < len(text):
            match = _match_tag(text, i, tags)
            if match:
                tag, prop = match
                index = chain.split(index, i, len(tag))
                if stack and stack[-1] == tag:
                    stack.pop()
                    chain[index].append_rendered('</span>')
                else:
                    stack.append(tag)
                    chain[index].append_rendered(Tag('span', prop_attrib(prop)).open())
                text = chain[index].literal
                i = 0
                continue

            if (dialect.softhyphens and text[i] == SOFT_HYPHEN and i == len(text) - 1
                    and _ends_line(chain, index, para.end)):
                index = _mark_soft_hyphen(chain, index, i)
                break
            i += 1
        index = chain[index].next
