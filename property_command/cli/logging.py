"""
Logging setup for property_command scripts.

Console output is tqdm-compatible; --execute runs also write a detailed
log file so per-source failures can be inspected afterwards.
"""

import logging
import sys
import time
from pathlib import Path

from property_command.utils.tqdm_logging import TqdmLoggingHandler

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every record."""

    def emit(self, record):
        super().emit(record)
        self.flush()


def setup_logging(
    script_name: str,
    execute: bool = False,
    log_dir: Path = Path("logs"),
    verbose: bool = False,
) -> logging.Logger:
    """
    Set up logging for a script.

    Args:
        script_name: Name of the script (for log file naming)
        execute: If True, log to file + console. If False, only console.
        log_dir: Directory for log files
        verbose: Show DEBUG records (per-source failures) on the console

    Returns:
        Configured logger instance
    """
    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.ERROR)

    console_level = logging.DEBUG if verbose else logging.INFO
    console_formatter = logging.Formatter("%(message)s")

    if not execute:
        logging.basicConfig(level=console_level, format="%(message)s", stream=sys.stdout)
        return logging.getLogger(script_name)

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"{script_name}_{timestamp}.log"

    file_handler = FlushingFileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    console_handler = TqdmLoggingHandler(level=console_level)
    console_handler.setFormatter(console_formatter)

    # Script logger and package logger share the same handlers so that
    # property_command.* records reach both the file and the console
    for name in (script_name, "property_command"):
        target = logging.getLogger(name)
        target.setLevel(logging.DEBUG)
        target.handlers = [file_handler, console_handler]
        target.propagate = False

    logger = logging.getLogger(script_name)
    logger.info(f"Log file: {log_file}")
    return logger


def print_dry_run_header(title: str, logger: logging.Logger | None = None):
    """Print a standard dry-run header."""
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.info("=" * 70)
    logger.info(f"{title} (Dry Run)")
    logger.info("=" * 70)


def print_execute_header(title: str, logger: logging.Logger | None = None):
    """Print a standard execute mode header."""
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.info("=" * 70)
    logger.info(title)
    logger.info("=" * 70)
