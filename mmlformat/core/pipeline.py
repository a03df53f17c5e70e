"""
The file conversion pipeline (Facade).

Reads an MML file, converts it with a Formatter and writes the HTML and,
on request, the page table next to it.
"""
import json
import logging
from pathlib import Path

from .formatter import Formatter
from ..resources.loader import load_default_css, load_default_dialect
from ..utils.config import ConversionConfig
from ..utils.dialect import Dialect, load_dialect
from ..utils.exceptions import ConversionError
from ..utils.html_utils import wrap_document
from ..utils.structures import ConversionResult


log = logging.getLogger("mmlformat")

PAGES_SUFFIX = ".pages.json"


class ConversionPipeline:
    """
    A facade that simplifies the conversion process.

    The CLI and the batch workers interact with this class to convert a
    file. The dialect is loaded once, when the pipeline is created, unless
    an already validated one is handed in.
    """

    def __init__(self, config: ConversionConfig, dialect: Dialect | None = None):
        self.config = config
        if dialect is None:
            dialect = (load_dialect(config.dialect_path) if config.dialect_path
                       else load_default_dialect())
        self.formatter = Formatter(dialect, check_html=config.check_html)


    def output_path_for(self, source_path: Path) -> Path:
        """
        The HTML path for a source file: next to it when no output is
        configured, inside the output folder, or the output path itself.
        """
        out = self.config.output_path
        if out is None:
            return source_path.with_suffix('.html')
        if out.is_dir() or not out.suffix:
            return out / f"{source_path.stem}.html"
        return out


    def convert(self, source_path: Path) -> ConversionResult:
        """
        Executes the full MML to HTML conversion for a single file.

        Raises:
            ConversionError: the source cannot be read or the output written.
        """
        # 1. Read the source
        try:
            text = source_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ConversionError(f"Cannot read {source_path}: {e}") from e

        # 2. Convert
        result = self.formatter.convert(text)
        for anomaly in result.anomalies:
            log.warning(f"{source_path.name}: {anomaly}")

        # 3. Write the HTML, and the page table if requested
        html_path = self.output_path_for(source_path)
        html = result.html
        if self.config.standalone:
            html = wrap_document(
                html,
                title=source_path.stem,
                stylesheet=self.config.stylesheet,
                css_text=None if self.config.stylesheet else load_default_css(),
            )

        try:
            html_path.parent.mkdir(parents=True, exist_ok=True)
            html_path.write_text(html, encoding='utf-8')
            log.info(f"Wrote {html_path}")

            if self.config.write_pages:
                pages_path = html_path.with_suffix(PAGES_SUFFIX)
                with open(pages_path, 'w', encoding='utf-8') as f:
                    json.dump([[ref, loc] for ref, loc in result.pages], f, ensure_ascii=False)
                log.info(f"Wrote {len(result.pages)} page entries to {pages_path}")
        except OSError as e:
            raise ConversionError(f"Cannot write output for {source_path}: {e}") from e

        return result
