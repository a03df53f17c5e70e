"""
Setext-style headings, milestones and line breaks.

A line made entirely of one heading marker character (e.g. "=====") turns
the line above it into a heading and disappears from the output. A line
wrapped in a milestone's left and right tags (e.g. "[[12]]") becomes a
labelled <span>; "page" milestones are what external views use to keep the
source, the preview and the page images in step.

This pass always runs, because it also decides where the rendered output
gets its line breaks.
"""
from ..core.chain import Chain
from ..utils.dialect import Dialect, PairFormat, TagFormat
from ..utils.html_utils import Tag, prop_attrib
from ..utils.structures import Milestone, Paragraph, ParagraphState
from ..utils.text_utils import SPACES, end_pos, is_blank, leading_spaces


def match_milestone(line: str, milestones: tuple[PairFormat, ...]) -> PairFormat | None:
    """Returns the first milestone whose tags enclose the trimmed line."""
    trimmed = line.strip(SPACES)
    for ms in milestones:
        if (len(trimmed) >= len(ms.left_tag) + len(ms.right_tag)
                and trimmed.startswith(ms.left_tag)
                and trimmed.endswith(ms.right_tag)):
            return ms
    return None


def match_heading_marker(line: str, dialect: Dialect) -> tuple[int, TagFormat] | None:
    """Returns (level, heading) if the line consists of one marker character only."""
    if not line or not dialect.headings:
        return None
    c = line[0]
    if line.count(c) != len(line):
        return None
    return dialect.heading_for(c)


def _mark_milestone(chain: Chain, index: int, ms: PairFormat) -> str:
    """Moves the milestone tags into source markup and returns the reference."""
    node = chain[index]
    node.consume(len(leading_spaces(node.literal)) + len(ms.left_tag))
    # right tag and trailing blanks belong in front of the next node
    chain.consume_tail(index, end_pos(node.literal, ms.right_tag))
    return node.literal


def process_headings(chain: Chain, para: Paragraph, dialect: Dialect,
                     state: ParagraphState) -> list[Milestone]:
    """
    Converts headings and milestones and adds line breaks between lines.

    Returns:
        list[Milestone]: the milestones found, with their 0-based source line.
    """
    lines = chain.paragraph_lines(para)
    count = len(lines)

    # First decide which lines are consumed as markers: a marker needs a
    # non-blank line above it that is not itself a marker.
    markers: list[tuple[int, TagFormat] | None] = [None] * count
    for i in range(1, count):
        found = match_heading_marker(chain[lines[i]].literal, dialect)
        if found and markers[i - 1] is None and not is_blank(chain[lines[i - 1]].literal):
            markers[i] = found

    milestones = []
    for i, index in enumerate(lines):
        node = chain[index]
        closing = ''

        if markers[i]:
            level, heading = markers[i]
            tag = Tag(f'h{level}', prop_attrib(heading.prop))
            chain[lines[i - 1]].append_rendered(tag.open())
            node.consume_all()
            node.prepend_rendered(tag.close())
            state.formatted = True

        elif ms := match_milestone(node.literal, dialect.milestones):
            ref = _mark_milestone(chain, index, ms)
            milestones.append(Milestone(ref, para.first_line + i, ms.prop))
            state.milestone_lines.add(index)
            node.append_rendered(Tag('span', prop_attrib(ms.prop, titled=False)).open())
            closing = '</span>'

        # No break after the last line, nor in front of a heading marker
        if i + 1 < count and markers[i + 1] is None:
            closing += '\n'

        if closing:
            following = lines[i + 1] if i + 1 < count else para.end
            chain[following].prepend_rendered(closing)

    return milestones
