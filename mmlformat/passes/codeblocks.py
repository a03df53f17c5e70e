"""
Code blocks: indented lines become preformatted blocks.

A tab or four spaces make one indent level; each configured codeblock entry
is one level (the first entry is level 1). Indentation deeper than the last
configured level stays at that level.
"""
from ..core.chain import Chain
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Paragraph, ParagraphState
from ..utils.text_utils import is_blank
from .headings import match_milestone
from .quotations import quote_depth

SPACES_PER_LEVEL = 4


def _indent_units(line: str, limit: int | None = None) -> tuple[int, int]:
    """
    Counts indent levels at the start of a line: a tab is one level and
    every fourth accumulated space is another.

    Returns:
        tuple[int, int]: (levels, number of characters they span). Counting
        stops after `limit` levels when a limit is given.
    """
    levels = spaces = 0
    i = 0
    while i < len(line) and (limit is None or levels < limit):
        c = line[i]
        if c == '\t':
            levels += 1
        elif c == ' ':
            spaces += 1
            if spaces == SPACES_PER_LEVEL:
                levels += 1
                spaces = 0
        else:
            break
        i += 1
    return levels, i


def get_level(line: str) -> int:
    """Returns the indent level of a line. Blank lines are never indented."""
    if is_blank(line):
        return 0
    return _indent_units(line)[0]


def lead_trim_length(line: str, level: int) -> int:
    """Returns how many leading characters make up `level` indent levels."""
    return _indent_units(line, limit=level)[1]


def _start_pre(dialect: Dialect, level: int) -> str:
    prop = dialect.codeblocks[level - 1].prop
    return Tag('pre', prop_attrib(prop, titled=False)).open()


def process_codeblocks(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """Opens, switches and closes <pre> blocks as the indent level changes."""
    if not dialect.codeblocks:
        return

    max_level = len(dialect.codeblocks)
    quoting = dialect.quotations is not None
    level = depth = 0
    for index in chain.paragraph_lines(para):
        node = chain[index]
        # Blank lines and milestones never open or close a block
        if is_blank(node.literal) or match_milestone(node.literal, dialect.milestones):
            continue

        new_level = min(get_level(node.literal), max_level)
        trim = lead_trim_length(node.literal, new_level)
        new_depth = quote_depth(node.literal[trim:]) if quoting else 0
        # A block is restarted where the quotation depth changes, so that
        # blockquotes can open and close around it
        if new_level != level or (level > 0 and new_depth != depth):
            if level > 0:
                node.append_rendered('</pre>')
            if new_level > 0:
                node.append_rendered(_start_pre(dialect, new_level))
                state.formatted = True
            level = new_level
        depth = new_depth

        if level > 0:
            node.consume(trim)

    if level > 0:
        chain[para.end].prepend_rendered('</pre>\n')
