"""
Smart quotes: straight quotes become curly ones.

Must run before every other pass. The replacement keeps the text length, so
the offsets later passes work with stay valid, and each replaced character
is recorded on the chain so the original MML can still be rebuilt.
"""
from ..core.chain import Chain
from ..utils.dialect import Dialect
from ..utils.structures import Paragraph, ParagraphState

# straight quote -> (opening, closing)
CURLY = {
    "'": ('‘', '’'),
    '"': ('“', '”'),
}
OPENING_QUOTES = frozenset('‘“')
OPENING_BRACKETS = frozenset('([{<')


def _opens(prev: str | None) -> bool:
    """Does a quote following `prev` open a quotation?"""
    return (
        prev is None
        or prev.isspace()
        or prev in OPENING_QUOTES
        or prev in OPENING_BRACKETS
    )


def smarten(text: str) -> str:
    """
    Curls the straight quotes of a line.
    Curly quotes already present take part in the classification but are
    kept as they are.
    """
    chars = list(text)
    for i, c in enumerate(chars):
        if c in CURLY:
            opening, closing = CURLY[c]
            chars[i] = opening if _opens(chars[i - 1] if i else None) else closing
    return "".join(chars)


def process_smartquotes(chain: Chain, para: Paragraph, dialect: Dialect, state: ParagraphState):
    """Curls the quotes of every line of the paragraph in place."""
    if not dialect.smartquotes:
        return

    pos = para.offset
    for index in chain.paragraph_lines(para):
        node = chain[index]
        pos += len(node.source_markup)
        curled = smarten(node.literal)
        for i, (old, new) in enumerate(zip(node.literal, curled)):
            if old != new:
                chain.substitute(pos + i, old)
        node.literal = curled
        pos += len(curled)
