"""
Converts MML text to HTML using a dialect.
"""
import logging
import time

from .chain import Chain
from .segmenter import segment
from ..passes.charformats import process_charformats
from ..passes.codeblocks import process_codeblocks
from ..passes.dividers import process_dividers
from ..passes.headings import process_headings
from ..passes.paraformats import process_paraformats
from ..passes.quotations import process_quotations
from ..passes.smartquotes import process_smartquotes
from ..utils.dialect import Dialect
from ..utils.html_utils import Tag, check_well_formed, prop_attrib
from ..utils.structures import ConversionResult, Milestone, Paragraph, ParagraphState
from ..utils.text_utils import is_blank


log = logging.getLogger("mmlformat")


def describe_mismatch(original: str, rebuilt: str) -> str:
    """Reports where a rebuilt source first departs from the original."""
    line, column = 1, 0
    for a, b in zip(original, rebuilt):
        if a != b:
            return f"Rebuilt source differs from the input at line {line}, column {column}"
        if a == '\n':
            line += 1
            column = 0
        else:
            column += 1
    return (
        f"Rebuilt source differs from the input in length: "
        f"{len(original)} vs {len(rebuilt)} characters"
    )


class Formatter:
    """
    Formats MML text into HTML according to a dialect.

    The text is segmented into a chain, every paragraph is run through the
    passes in a fixed order, and the chain is then read out twice: once as
    HTML and once as MML. The second reading must reproduce the input; if it
    does not, the result carries an anomaly but the HTML is still returned.

    A Formatter holds no per-conversion state and can convert any number of
    texts with the same dialect.
    """

    def __init__(self, dialect: Dialect | dict, check_html: bool = False):
        """
        Args:
            dialect: a validated Dialect, or a parsed dialect document that is
                validated here (raises ConfigError).
            check_html: also report HTML that does not parse as well-formed.
        """
        if not isinstance(dialect, Dialect):
            dialect = Dialect.from_dict(dialect)
        self.dialect = dialect
        self.check_html = check_html

        prop = dialect.paragraph.prop if dialect.paragraph else None
        self._para_tag = Tag('p', prop_attrib(prop))


    def convert(self, text: str) -> ConversionResult:
        """Converts a whole MML document."""
        start_time = time.perf_counter()

        chain, sections = segment(text, self.dialect)
        milestones: list[Milestone] = []
        num_paras = 0
        for section in sections:
            for para in section.paragraphs:
                milestones.extend(self._process_paragraph(chain, para))
                num_paras += 1
        chain.escape_literals()

        html = chain.to_html()
        source = chain.to_source()

        anomalies = []
        round_trip_ok = source == text
        if not round_trip_ok:
            message = describe_mismatch(text, source)
            anomalies.append(message)
            log.warning(message)
            log.debug("Chain at failure:\n%s", chain.dump())

        if self.check_html:
            error = check_well_formed(html)
            if error:
                anomalies.append(f"HTML is not well-formed: {error}")
                log.warning(f"Generated HTML is not well-formed: {error}")

        elapsed = (time.perf_counter() - start_time) * 1000
        log.debug(
            f"Formatted {num_paras} paragraphs in {len(sections)} sections, "
            f"{len(milestones)} milestones, in {elapsed:.1f} ms"
        )

        return ConversionResult(
            html=html,
            source=source,
            milestones=milestones,
            correspondences=chain.correspondences(),
            anomalies=anomalies,
            num_lines=text.count('\n') + 1,
            round_trip_ok=round_trip_ok,
        )


    def _process_paragraph(self, chain: Chain, para: Paragraph) -> list[Milestone]:
        """Runs every pass over one paragraph. Smart quotes must come first."""
        state = ParagraphState()
        process_smartquotes(chain, para, self.dialect, state)
        process_codeblocks(chain, para, self.dialect, state)
        milestones = process_headings(chain, para, self.dialect, state)
        process_quotations(chain, para, self.dialect, state)
        process_paraformats(chain, para, self.dialect, state)
        process_dividers(chain, para, self.dialect, state)
        process_charformats(chain, para, self.dialect, state)
        if not state.formatted:
            self._wrap_paragraph(chain, para)
        return milestones


    def _wrap_paragraph(self, chain: Chain, para: Paragraph):
        """Wraps an unformatted, non-empty paragraph in the paragraph element."""
        lines = chain.paragraph_lines(para)
        if all(is_blank(chain[i].literal) for i in lines):
            return
        # Outermost: in front of everything on the first line, after every
        # closing tag at the end
        chain[lines[0]].prepend_rendered(self._para_tag.open())
        chain[para.end].append_rendered(self._para_tag.close())


def convert(text: str, dialect: Dialect | dict, check_html: bool = False) -> ConversionResult:
    """Converts MML text with a one-off Formatter."""
    return Formatter(dialect, check_html).convert(text)
