"""
Logging configuration for the financial health engine.

Console output is colored by level. Log lines carry the name of the
business record file being analyzed, so interleaved output from batch
workers stays attributable.
"""

import logging
import os
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import colorama
from colorama import Fore, Style

colorama.init()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(source)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
NOISY_LOGGERS = ['openpyxl', 'xlsxwriter', 'pandas']

_context = threading.local()


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for console output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        # Color a copy so file handlers see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{self.COLORS.get(record.levelname, '')}{record.levelname}{Style.RESET_ALL}"
        return super().format(colored)


class SourceFilter(logging.Filter):
    """Stamps each record with the source file of the current thread."""

    def filter(self, record):
        record.source = getattr(_context, 'source', '-')
        return True


@contextmanager
def log_source(source: str) -> Iterator[None]:
    """
    Tag log records emitted by this thread with a source name.

    Args:
        source: Name of the file or listing being analyzed
    """
    previous = getattr(_context, 'source', '-')
    _context.source = source
    try:
        yield
    finally:
        _context.source = previous


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level name (default: LOG_LEVEL environment variable or INFO)
        log_file: Optional log file path
    """
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    source_filter = SourceFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.addFilter(source_filter)
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.addFilter(source_filter)
        file_handler.setFormatter(logging.Formatter(
            LOG_FORMAT + ' - [%(filename)s:%(lineno)d]', datefmt=DATE_FORMAT
        ))
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - Level: {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file}")
