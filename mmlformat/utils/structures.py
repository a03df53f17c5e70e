from dataclasses import dataclass, field
from typing import NamedTuple

__all__ = [
    "RefLoc", "Milestone", "Correspondence", "Paragraph", "Section",
    "ParagraphState", "ConversionResult", "PAGE_PROP",
]


# Milestones carrying this property make up the page-sync table
PAGE_PROP = "page"


class RefLoc(NamedTuple):
    """A reference (e.g. page "4") and the location where it starts."""
    ref: str
    loc: int


class Milestone(NamedTuple):
    """A milestone found in the source: its content, 0-based line and property."""
    ref: str
    loc: int
    prop: str = PAGE_PROP


class Correspondence(NamedTuple):
    """A run of literal text shared by the source and the HTML."""
    source_offset: int
    html_offset: int
    length: int


@dataclass
class Paragraph:
    """
    Node range of one paragraph in the chain.
    `head` holds the separator that precedes the paragraph, `end` is the
    first node after it (the next paragraph head or the section end node).
    """
    head: int
    end: int = -1
    offset: int = 0         # source offset of the first line
    first_line: int = 0     # 0-based source line number of the first line


@dataclass
class Section:
    """Opening/closing nodes of a section and the paragraphs between them."""
    open: int
    close: int = -1
    paragraphs: list[Paragraph] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.paragraphs


@dataclass
class ParagraphState:
    """
    State threaded through the passes of one paragraph.
    Any pass that emits block structure marks the paragraph as formatted,
    which suppresses the default <p> wrap.
    """
    formatted: bool = False
    # chain indices of the lines the headings pass turned into milestones
    milestone_lines: set[int] = field(default_factory=set)


@dataclass
class ConversionResult:
    """Everything a single conversion call hands back to its caller."""
    html: str
    source: str
    milestones: list[Milestone] = field(default_factory=list)
    correspondences: list[Correspondence] = field(default_factory=list)
    anomalies: list[str] = field(default_factory=list)
    num_lines: int = 0
    round_trip_ok: bool = True

    @property
    def pages(self) -> list[RefLoc]:
        """The page-sync table: (ref, line) of every page milestone."""
        return [RefLoc(m.ref, m.loc) for m in self.milestones if m.prop == PAGE_PROP]
