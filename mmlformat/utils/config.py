"""
Defines configuration and settings for the conversion process.
"""
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ConversionConfig:
    """
    A container for all settings related to a conversion task.
    This object is created by the CLI and passed to the ConversionPipeline.
    """
    output_path: Path | None = None
    dialect_path: Path | None = None    # None means the bundled default dialect
    write_pages: bool = False           # write <stem>.pages.json next to the HTML
    check_html: bool = False            # report malformed HTML as an anomaly
    standalone: bool = False            # wrap the fragment in a full HTML document
    stylesheet: str | None = None       # href linked from standalone documents
    num_threads: int = 0                # 0 means one worker per CPU
