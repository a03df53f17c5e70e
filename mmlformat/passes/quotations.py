"""
Quotations: lines starting with "> " become (possibly nested) blockquotes.
"""
from ..core.chain import Chain, TextNode
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, leading_closes, prop_attrib
from ..utils.structures import Paragraph, ParagraphState
from ..utils.text_utils import SPACES, is_blank

# States of the quote marker scan
_SEEK = 0   # expecting '>' or blanks
_MARK = 1   # after '>', expecting another '>' or the obligatory blank


def quote_prefix(line: str) -> tuple[int, int]:
    """
    Scans the leading quote markers of a line.

    Every '>' must be followed by a space or tab (or by another '>' that
    is), end of line included. The scan halts at the first violation and
    keeps the depth confirmed so far.

    Returns:
        tuple[int, int]: (depth, length of the marker prefix including the
        blanks after it).
    """
    depth = pending = prefix = 0
    state = _SEEK
    for i, c in enumerate(line):
        if state == _SEEK:
            if c == '>':
                pending = 1
                state = _MARK
            elif c in SPACES:
                if depth:
                    prefix = i + 1
            else:
                break
        elif c == '>':
            pending += 1
        elif c in SPACES:
            depth += pending
            pending = 0
            prefix = i + 1
            state = _SEEK
        else:
            break
    else:
        if state == _MARK:
            depth += pending
            prefix = len(line)
    return depth, prefix


def quote_depth(line: str) -> int:
    """Returns the number of leading '>' markers of a line."""
    return quote_prefix(line)[0]


def _close_quotes(node: TextNode, markup: str):
    """Closes after the blocks that earlier lines ended here."""
    node.insert_rendered(leading_closes(node.rendered_markup)[0], markup)


def _open_quotes(node: TextNode, markup: str):
    """Opens outside any heading or code block starting on this line."""
    node.insert_rendered(leading_closes(node.rendered_markup)[1], markup)


def process_quotations(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """
    Opens and closes blockquotes as the quote depth changes from line to line.

    Blockquotes enclose headings and code blocks: opening markup goes in
    front of a line's own opening tags, closing markup after the closing
    tags of the lines above. Milestone lines keep the current depth.
    """
    if dialect.quotations is None:
        return

    tag = Tag('blockquote', prop_attrib(dialect.quotations.prop, titled=False))
    stack: list[int] = []
    wrapped_from_start = False
    closed_early = False
    first = True

    for index in chain.paragraph_lines(para):
        node = chain[index]
        if is_blank(node.literal):
            continue
        if index in state.milestone_lines:
            first = False
            continue

        depth, prefix = quote_prefix(node.literal)
        if first:
            wrapped_from_start = depth > 0
            first = False

        if depth > len(stack):
            opened = range(len(stack) + 1, depth + 1)
            stack.extend(opened)
            _open_quotes(node, tag.open() * len(opened))
        elif depth < len(stack):
            closed = 0
            while stack and stack[-1] > depth:
                stack.pop()
                closed += 1
            _close_quotes(node, tag.close() * closed)
            if not stack:
                closed_early = True

        node.consume(prefix)

    if stack:
        _close_quotes(chain[para.end], tag.close() * len(stack))

    if wrapped_from_start and not closed_early:
        state.formatted = True
