"""
Logging setup for the command line process and for batch worker processes.

Every module logs through the "mmlformat" logger; only the entry points
attach handlers to it.
"""
import io
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "mmlformat"
LOG_DIR = Path("./logs")
LOG_PREFIX = "mmlformat_"
MAX_LOG_FILES = 20
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"
FILE_LOG_FORMAT = (
    "%(asctime)s [%(process)d] %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
)


def _prune_old_logs(log_dir: Path, keep: int):
    """Deletes the oldest log files so that at most `keep` remain."""
    logs = sorted(
        (p for p in log_dir.glob(f"{LOG_PREFIX}*.log") if p.is_file()),
        key=os.path.getmtime,
    )
    for log_file in logs[:max(len(logs) - keep, 0)]:
        try:
            log_file.unlink()
        except OSError:
            pass  # still open by another run


def setup_main_logger(console_level=logging.WARNING, log_dir: Path = LOG_DIR) -> logging.Logger:
    """
    Configures the "mmlformat" logger for the main process.

    Console output respects `console_level`; everything down to DEBUG goes
    to a new timestamped file in `log_dir`. Old files beyond MAX_LOG_FILES
    are removed.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    if logger.hasHandlers():
        logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
    logger.addHandler(console_handler)

    # --- File Handler ---
    try:
        log_dir.mkdir(exist_ok=True)
        _prune_old_logs(log_dir, MAX_LOG_FILES - 1)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"{LOG_PREFIX}{timestamp}.log"

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

        logger.info(
            "Logger initialized. Console level: %s, file: %s",
            logging.getLevelName(console_level),
            log_path,
        )
    except OSError:
        logger.error("Failed to set up file logging.", exc_info=True)

    return logger


def setup_worker_logger() -> tuple[io.StringIO, logging.Handler]:
    """
    Configures an in-memory logger for a batch worker process.

    Returns:
        tuple[io.StringIO, logging.Handler]: the buffer collecting the
        worker's log records and the handler writing to it. Both must be
        closed by the caller.
    """
    log_stream = io.StringIO()

    handler = logging.StreamHandler(log_stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%H:%M:%S"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()  # drop handlers inherited from the parent
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    return log_stream, handler
