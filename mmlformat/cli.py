"""
Handles command-line argument parsing and initiates the conversion.
This is the entry point for the console script.
"""
import argparse
import logging
from pathlib import Path

from .core.batch_processor import BatchProcessor
from .core.describe import describe_dialect
from .core.pipeline import ConversionPipeline
from .resources.loader import load_default_dialect
from .utils.config import ConversionConfig
from .utils.dialect import load_dialect
from .utils.exceptions import ConfigError, ConversionError
from .utils.logger import setup_main_logger


# Get logger (will be configured in run_cli)
log = logging.getLogger("mmlformat")

SOURCE_SUFFIXES = ('.mml', '.txt')


def int_in_range(min_val, max_val):
    """Checks if value is an int in [min_val, max_val] range."""
    def checker(value):
        ivalue = int(value)
        if not (min_val <= ivalue <= max_val):
            raise argparse.ArgumentTypeError(f"Value must be between {min_val} and {max_val}, got {ivalue}")
        return ivalue
    return checker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mmlformat",
        description="Converts MML (minimal markup language) text files to HTML.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input_paths", type=Path, nargs="*",
                        help="Input .mml/.txt files or/and folders separated by a space.")
    parser.add_argument("-d", "--dialect", type=Path, default=None,
                        help="Path to a JSON dialect. If omitted, the bundled default dialect is used.")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output folder or filename (for single input). If omitted, each output is placed next to the input file.")
    parser.add_argument("--pages", action="store_true",
                        help="Also write <name>.pages.json with the page milestones and their source lines.")
    parser.add_argument("--check-html", action="store_true",
                        help="Report generated HTML that is not well-formed.")
    parser.add_argument("--standalone", action="store_true",
                        help="Write complete HTML documents instead of fragments.")
    parser.add_argument("--css", default=None,
                        help="Stylesheet href to link from standalone documents. If omitted, the bundled stylesheet is embedded.")
    parser.add_argument("--threads", type=int_in_range(0, 256), default=0,
                        help="Number of parallel worker processes. 0 to use max.")
    parser.add_argument("--describe", action="store_true",
                        help="Print a description of the dialect as HTML and exit.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Show more log output on the console (-v info, -vv debug).")
    return parser


def collect_files(input_paths: list[Path]) -> list[Path]:
    """Expands folders into the source files they contain."""
    files_to_process = []
    for path in input_paths:
        if not path.exists():
            log.warning(f"Input path does not exist, skipping: {path}")
            continue
        if path.is_dir():
            for suffix in SOURCE_SUFFIXES:
                files_to_process.extend(sorted(path.rglob(f"*{suffix}")))
        elif path.suffix in SOURCE_SUFFIXES:
            files_to_process.append(path)
        else:
            log.warning(f"Not an MML source, skipping: {path}")
    return files_to_process


def run_cli(argv: list[str] | None = None) -> int:
    """
    The main function for the command-line interface.
    Parses arguments and runs the conversion pipeline.

    Returns:
        int: the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_main_logger(console_level)

    if args.describe:
        try:
            dialect = load_dialect(args.dialect) if args.dialect else load_default_dialect()
        except ConfigError as e:
            log.error(str(e))
            return 2
        print(describe_dialect(dialect))
        return 0

    files_to_process = collect_files(args.input_paths)
    if not files_to_process:
        log.warning("No .mml or .txt files found to process.")
        return 1

    if len(files_to_process) > 1 and args.output and args.output.suffix and not args.output.is_dir():
        parser.error("--output must be a folder when converting more than one file")

    config = ConversionConfig(
        output_path=args.output,
        dialect_path=args.dialect,
        write_pages=args.pages,
        check_html=args.check_html,
        standalone=args.standalone,
        stylesheet=args.css,
        num_threads=args.threads,
    )

    try:
        if len(files_to_process) == 1:
            return _run_single(config, files_to_process[0])
        processor = BatchProcessor(config)
    except ConfigError as e:
        log.error(str(e))
        return 2
    except ConversionError as e:
        log.error(str(e))
        return 1

    num_files = len(files_to_process)
    log.info(f"Found {num_files} files. Starting conversion...")

    failures = 0
    completed_count = 0
    def progress_callback(path: Path, result: Path | None, exc: Exception | None):
        nonlocal completed_count, failures
        completed_count += 1
        completed_str = str(completed_count).rjust(len(str(num_files)))
        prefix = f"[{completed_str}/{num_files}]"
        if exc:
            failures += 1
            print(f"{prefix} Error: {path.name}", flush=True)
            print(f"  └─ {exc}", flush=True)
            # The file log already holds the worker's traceback
            log.error(f"Failed to convert {path.name}: {exc}", exc_info=False)
        else:
            print(f"{prefix} Done: {path.name}", flush=True)

    processor.run(files_to_process, progress_callback)

    print(f"\nBatch conversion finished: {num_files - failures} converted, {failures} failed.")
    return 1 if failures else 0


def _run_single(config: ConversionConfig, path: Path) -> int:
    """Converts one file in-process."""
    pipeline = ConversionPipeline(config)
    result = pipeline.convert(path)
    status = "Done" if result.round_trip_ok else "Done with anomalies"
    print(f"{status}: {path.name} -> {pipeline.output_path_for(path)}", flush=True)
    return 0
