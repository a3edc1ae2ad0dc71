"""
Logging for the analyze-ads command.

Dry runs only print to stdout. Execute runs also keep a DEBUG log file per run,
and route console output through tqdm so the batch progress bar stays intact.
"""

import logging
import sys
import time
from pathlib import Path

from ads_library_analyzer.utils.tqdm_logging import TqdmLoggingHandler

PACKAGE_LOGGER = "ads_library_analyzer"

# Client libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3", "filelock")

_CONSOLE_FORMAT = logging.Formatter("%(message)s")
_FILE_FORMAT = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


class _FlushingFileHandler(logging.FileHandler):
    def emit(self, record):
        super().emit(record)
        self.flush()


def _console_handler(level: int, tqdm_compatible: bool) -> logging.Handler:
    handler = TqdmLoggingHandler() if tqdm_compatible else logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_CONSOLE_FORMAT)
    return handler


def _attach(logger: logging.Logger, *handlers: logging.Handler) -> None:
    logger.setLevel(logging.DEBUG)
    logger.handlers = list(handlers)
    logger.propagate = False


def setup_logging(
    script_name: str,
    execute: bool = False,
    log_dir: Path = Path("logs"),
    tqdm_compatible: bool = True,
) -> logging.Logger:
    """
    Configure logging for one command run.

    In execute mode, both the command logger and the package loggers write to
    logs/<script_name>_<timestamp>.log. The console shows the command's INFO
    output but only WARNING+ from the package, which is where per-company
    fetch failures are reported.

    Returns:
        The command logger
    """
    if not execute:
        logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
        return logging.getLogger(script_name)

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{script_name}_{time.strftime('%Y%m%d_%H%M%S')}.log"

    file_handler = _FlushingFileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_FILE_FORMAT)

    logger = logging.getLogger(script_name)
    _attach(logger, file_handler, _console_handler(logging.INFO, tqdm_compatible))
    _attach(
        logging.getLogger(PACKAGE_LOGGER),
        file_handler,
        _console_handler(logging.WARNING, tqdm_compatible),
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)

    logger.info(f"Log file: {log_file}")
    return logger


def log_banner(title: str, logger: logging.Logger, dry_run: bool = False) -> None:
    """Section banner at the start of a run."""
    logger.info("=" * 70)
    logger.info(f"{title} (Dry Run)" if dry_run else title)
    logger.info("=" * 70)
