"""
Handles the parallel processing of a batch of files.
This class contains the ProcessPoolExecutor and is used by the CLI.
"""
import logging
import time
import os
import concurrent.futures
from pathlib import Path
from typing import Callable

from .pipeline import ConversionPipeline
from ..resources.loader import load_default_dialect
from ..utils.config import ConversionConfig
from ..utils.dialect import Dialect, load_dialect
from ..utils.logger import setup_worker_logger

# The main logger is configured by the entry point (CLI)
# We just get it here to write high-level status updates from the main process
log = logging.getLogger("mmlformat")


def _convert_single_file(path: Path, config: ConversionConfig,
                         dialect: Dialect) -> tuple[Path, str, Exception | None]:
    """
    A standalone function to be the target for the executor.
    It runs the conversion pipeline on a single file and captures all its
    log output.

    Returns:
        tuple[Path, str, Exception | None]:
            - The path of the processed file.
            - The captured log output as a string.
            - An exception object if one occurred, else None.
    """
    # Set up in-memory logging for this worker process
    log_stream, log_handler = setup_worker_logger()
    worker_log = logging.getLogger("mmlformat")

    try:
        worker_log.info(f"Converting: {path.name}")

        pipeline = ConversionPipeline(config, dialect)
        result = pipeline.convert(path)

        worker_log.info(
            f"Finished {path.name}: {result.num_lines} lines, "
            f"{len(result.pages)} pages, {len(result.anomalies)} anomalies"
        )
        return path, log_stream.getvalue(), None

    except Exception as e:
        # Full traceback goes to the worker's buffer, written to the log file later
        worker_log.error(f"Failed conversion for: {path.name}", exc_info=True)

        # Sanitize the exception so the main process can always unpickle it
        safe_exc = RuntimeError(f"{type(e).__name__}: {e}")
        return path, log_stream.getvalue(), safe_exc

    finally:
        log_handler.close()
        log_stream.close()


class BatchProcessor:
    """Orchestrates the conversion of multiple files in parallel."""

    def __init__(self, config: ConversionConfig):
        self.config = config
        # Validate the dialect once, before any worker starts
        self.dialect = (load_dialect(config.dialect_path) if config.dialect_path
                        else load_default_dialect())


    def run(self, files: list[Path], progress_callback: Callable | None = None):
        """
        Processes a list of files in parallel using a ProcessPoolExecutor.

        Args:
            files: A list of Path objects to convert.
            progress_callback: A function to be called as each file completes.
                               It receives the (path, result, exception).
        """
        th = self.config.num_threads
        max_workers = th if th > 0 else (os.cpu_count() or 1)
        max_workers = min(max_workers, max(len(files), 1))
        log.info(f"Starting batch processing with up to {max_workers} worker processes.")

        # Map paths to their original index to maintain order
        path_to_index = {path: i for i, path in enumerate(files)}

        # Each item will be: (path, log_string, exception)
        ordered_results: list[tuple[Path, str, Exception | None] | None] = [None] * len(files)

        with concurrent.futures.ProcessPoolExecutor(max_workers) as executor:
            future_to_path = {
                executor.submit(_convert_single_file, path, self.config, self.dialect): path
                for path in files
            }

            for future in concurrent.futures.as_completed(future_to_path):
                path = future_to_path[future]
                idx = path_to_index[path]

                try:
                    p, log_string, exc = future.result()
                    ordered_results[idx] = (p, log_string, exc)

                    if progress_callback:
                        if exc:
                            progress_callback(path, None, exc)
                        else:
                            progress_callback(path, path, None)

                except Exception as e:
                    # A failure of the worker process itself (e.g. it died)
                    log.error(f"Critical worker failure for {path.name}: {e}", exc_info=True)
                    ordered_results[idx] = (path, f"CRITICAL FAILURE: {e}\n", e)
                    if progress_callback:
                        progress_callback(path, None, e)

            # Short delay for process shutdown
            time.sleep(0.05)

        log.info("Batch processing complete. Writing ordered logs...")
        self._write_worker_logs(ordered_results)


    def _write_worker_logs(self, ordered_results: list):
        """Copies the buffered worker logs into the main log file, in input order."""
        file_handler = next(
            (h for h in log.handlers if isinstance(h, logging.FileHandler)), None
        )

        for result in ordered_results:
            if result is None:
                log.error("Missing result in ordered list.")
                continue

            path, log_string, _ = result
            if file_handler and log_string:
                try:
                    file_handler.stream.write(f"\n--- Log for {path.name} ---\n")
                    file_handler.stream.write(log_string)
                    file_handler.stream.write(f"--- End log for {path.name} ---\n")
                except OSError as e:
                    log.error(f"Failed to write buffered log for {path.name}: {e}")

        log.info("Ordered log writing complete.")
