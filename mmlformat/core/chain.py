"""
The dual-text chain: the data structure every formatting pass rewrites.

The converted HTML and the original MML are held together as a sequence of
nodes. Each node carries
    - source_markup:   MML bytes that are not rendered (a '>' quote marker,
                       a format tag, a paragraph separator, a character
                       rendered as an entity ...)
    - rendered_markup: HTML inserted in front of the literal
    - literal:         text present, unmodified, in both representations
Concatenating source_markup + literal over the chain gives back the MML;
concatenating rendered_markup + literal gives the HTML. Because the literal
text is shared, every literal run is a fixed point between the two and can
be used to map positions from one to the other.

Nodes are stored in a list and linked by index.
"""
import re
from dataclasses import dataclass
from html import escape
from typing import Iterator

from ..utils.structures import Correspondence, Paragraph

# Characters of literal text that must reach the HTML as entities
_SPECIAL = re.compile(r'[&<>]')


@dataclass
class TextNode:
    """A single link of the chain."""
    source_markup: str = ''
    rendered_markup: str = ''
    literal: str = ''
    next: int | None = None
    prev: int | None = None

    def prepend_rendered(self, markup: str):
        self.rendered_markup = markup + self.rendered_markup

    def append_rendered(self, markup: str):
        self.rendered_markup += markup

    def insert_rendered(self, pos: int, markup: str):
        self.rendered_markup = self.rendered_markup[:pos] + markup + self.rendered_markup[pos:]

    def prepend_source(self, markup: str):
        self.source_markup = markup + self.source_markup

    def consume(self, count: int) -> str:
        """Moves the first `count` characters of the literal into the source markup."""
        taken = self.literal[:count]
        self.source_markup += taken
        self.literal = self.literal[count:]
        return taken

    def consume_all(self) -> str:
        return self.consume(len(self.literal))


def _abbrev(text: str) -> str:
    """Shortens long text for debug dumps."""
    if len(text) > 10:
        return text[:5] + "..." + text[-6:]
    return text


class Chain:
    """
    A doubly linked sequence of TextNodes addressed by integer index.

    Passes never remove nodes; they only rewrite them or split them, so an
    index stays valid for the lifetime of the chain.
    """

    def __init__(self):
        self.nodes: list[TextNode] = []
        self.head: int | None = None
        self.tail: int | None = None
        # source offset -> original character, for in-place replacements
        self.substitutions: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> TextNode:
        return self.nodes[index]

    def __iter__(self) -> Iterator[TextNode]:
        index = self.head
        while index is not None:
            node = self.nodes[index]
            yield node
            index = node.next

    # --- Building and splitting ---

    def append(self, source_markup: str = '', rendered_markup: str = '', literal: str = '') -> int:
        """Adds a node at the end of the chain and returns its index."""
        index = len(self.nodes)
        self.nodes.append(TextNode(source_markup, rendered_markup, literal, None, self.tail))
        if self.tail is None:
            self.head = index
        else:
            self.nodes[self.tail].next = index
        self.tail = index
        return index

    def insert_after(self, index: int, source_markup: str = '',
                     rendered_markup: str = '', literal: str = '') -> int:
        """Links a new node directly after `index` and returns the new index."""
        node = self.nodes[index]
        new_index = len(self.nodes)
        self.nodes.append(TextNode(source_markup, rendered_markup, literal, node.next, index))
        if node.next is None:
            self.tail = new_index
        else:
            self.nodes[node.next].prev = new_index
        node.next = new_index
        return new_index

    def split(self, index: int, pos: int, consume: int = 0) -> int:
        """
        Splits a node's literal at `pos`.

        The node keeps literal[:pos]. The new node that follows it takes the
        next `consume` characters as source markup and the rest as literal.

        Returns:
            int: index of the new node.
        """
        node = self.nodes[index]
        text = node.literal
        node.literal = text[:pos]
        return self.insert_after(
            index,
            source_markup=text[pos:pos + consume],
            literal=text[pos + consume:],
        )

    def consume_tail(self, index: int, pos: int):
        """Moves literal[pos:] of a node into the source markup of the next node."""
        node = self.nodes[index]
        if node.next is None:
            raise IndexError("The last node of a chain has no successor to take its tail")
        self.nodes[node.next].prepend_source(node.literal[pos:])
        node.literal = node.literal[:pos]

    def substitute(self, offset: int, original: str):
        """Records that the source character at `offset` was replaced in the literal."""
        self.substitutions.setdefault(offset, original)

    def indices(self, start: int | None, end: int | None = None) -> Iterator[int]:
        """
        Yields node indices from `start` up to, but excluding, `end`.
        The successor is read after each yield, so nodes split off the
        current one are visited too.
        """
        index = start
        while index is not None and index != end:
            yield index
            index = self.nodes[index].next

    def paragraph_lines(self, para: Paragraph) -> list[int]:
        """Indices of the nodes between a paragraph's head and its end."""
        return list(self.indices(self.nodes[para.head].next, para.end))

    def escape_literals(self):
        """
        Splits every '&', '<' and '>' out of the literal text into a node of
        its own that keeps the character as source markup and renders it as
        an entity. Run once, after all passes.
        """
        for index in self.indices(self.head):
            node = self.nodes[index]
            m = _SPECIAL.search(node.literal)
            if m is None:
                continue
            new_index = self.split(index, m.start(), consume=1)
            self.nodes[new_index].rendered_markup = escape(m.group(), quote=False)

    # --- Output ---

    def to_html(self) -> str:
        return "".join(node.rendered_markup + node.literal for node in self)

    def to_source(self) -> str:
        """Rebuilds the original MML, undoing recorded substitutions."""
        text = "".join(node.source_markup + node.literal for node in self)
        if not self.substitutions:
            return text
        chars = list(text)
        for offset, original in self.substitutions.items():
            if offset < len(chars):
                chars[offset] = original
        return "".join(chars)

    def correspondences(self) -> list[Correspondence]:
        """Returns the (source, html) offsets of every non-empty literal, in order."""
        spans = []
        source_pos = html_pos = 0
        for node in self:
            source_pos += len(node.source_markup)
            html_pos += len(node.rendered_markup)
            if node.literal:
                spans.append(Correspondence(source_pos, html_pos, len(node.literal)))
                source_pos += len(node.literal)
                html_pos += len(node.literal)
        return spans

    def dump(self) -> str:
        """An abbreviated listing of the chain for debug logs."""
        return "\n".join(
            f"{node.rendered_markup!r}|{node.source_markup!r}|{_abbrev(node.literal)!r}->"
            for node in self
        )
