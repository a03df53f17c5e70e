"""
Splits raw MML into sections, paragraphs and lines and builds the initial
chain from them.

Sections are separated by two blank lines ("\\n\\n\\n"), paragraphs by one
blank line. A blank line may contain spaces or tabs, so paragraph breaks are
found by scanning rather than by splitting: the exact separator bytes must
survive in the chain for the MML to be rebuilt.
"""
from bisect import bisect_left

from .chain import Chain
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Paragraph, Section
from ..utils.text_utils import SPACES, is_blank


SECTION_BREAK = "\n\n\n"

# States of the paragraph separator scan
_OUTSIDE = 0    # inside paragraph text
_INSIDE = 1     # after a newline, possibly followed by spaces/tabs


def is_empty_section(text: str) -> bool:
    """A section is empty if it consists solely of tabs, spaces and newlines."""
    return is_blank(text)


def split_paragraphs(text: str) -> list[tuple[str, str]]:
    """
    Splits section text at blank lines.

    Returns:
        list[tuple[str, str]]: (separator, paragraph) pairs, where separator
        is the exact run of bytes that preceded the paragraph ('' for the
        first one).
    """
    paragraphs = []
    separator = ''
    start = 0
    state = _OUTSIDE
    run = ''
    for i, c in enumerate(text):
        if state == _OUTSIDE:
            if c == '\n':
                state = _INSIDE
                run = c
        elif c == '\n':
            paragraphs.append((separator, text[start:i - len(run)]))
            separator = run + c
            start = i + 1
            state = _OUTSIDE
        elif c in SPACES:
            run += c
        else:
            state = _OUTSIDE
    paragraphs.append((separator, text[start:]))
    return paragraphs


def segment(text: str, dialect: Dialect) -> tuple[Chain, list[Section]]:
    """
    Builds the chain for a whole document.

    Layout per section: an opening node (the <div>), then for each paragraph
    a head node carrying the separator followed by one node per line, then an
    empty end node and a closing node (</div>). Line nodes after the first
    carry their preceding newline as source markup. A paragraph ends at the
    next paragraph's head or at the end node, so the node a paragraph ends at
    holds nothing but that paragraph's closing markup.
    """
    chain = Chain()
    sections: list[Section] = []
    newlines = [i for i, c in enumerate(text) if c == '\n']
    prop = dialect.section.prop if dialect.section else None
    div = Tag('div', prop_attrib(prop, titled=False))

    offset = 0
    for n, raw in enumerate(text.split(SECTION_BREAK)):
        separator = SECTION_BREAK if n else ''
        section = Section(open=chain.append(
            source_markup=separator,
            rendered_markup=('\n' if n else '') + div.open(),
        ))
        offset += len(separator)

        if is_empty_section(raw):
            chain[section.open].literal = raw
        else:
            body = raw.lstrip('\n')
            chain[section.open].source_markup += raw[:len(raw) - len(body)]
            pos = offset + len(raw) - len(body)
            for para_separator, para_text in split_paragraphs(body):
                pos += len(para_separator)
                para = Paragraph(
                    head=chain.append(source_markup=para_separator),
                    offset=pos,
                    first_line=bisect_left(newlines, pos),
                )
                for k, line in enumerate(para_text.split('\n')):
                    chain.append(source_markup='\n' if k else '', literal=line)
                pos += len(para_text)

                if section.paragraphs:
                    section.paragraphs[-1].end = para.head
                section.paragraphs.append(para)

        offset += len(raw)
        if section.paragraphs:
            # an empty node that only ever receives the last paragraph's closing markup
            section.paragraphs[-1].end = chain.append()
        section.close = chain.append(rendered_markup=div.close())
        sections.append(section)

    return chain, sections
