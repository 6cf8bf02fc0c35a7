"""
Unified Logging Configuration for BoothDocs

All modules import their logging functions from here:
    from boothdocs.logging_config import debug_log, info, warning, error, Timer

Output:
- File output to <logs dir>/analysis.log (always, when the directory is writable)
- Console output only when DEBUG_MODE is on

Log Levels:
- debug_log(): Pipeline tracing; prefix messages with [Component]
- info(): Standard information messages
- warning(): Recoverable problems (retries, failed sections)
- error(): Terminal failures
"""

import logging
import sys
import time

from boothdocs.config import DEBUG_MODE, LOG_DATE_FORMAT, LOG_FILE, LOG_FORMAT, LOGS_DIR


def _setup_logging() -> logging.Logger:
    """
    Configure the application logger.

    Returns:
        Configured logger instance for BoothDocs
    """
    logger = logging.getLogger('BoothDocs')
    # debug_log always reaches the file; DEBUG_MODE only adds console output
    logger.setLevel(logging.DEBUG)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError:
        # Logs directory not writable; skip file output
        logger.addHandler(logging.NullHandler())

    if DEBUG_MODE:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


_logger = _setup_logging()


class Timer:
    """
    Context manager for timing code blocks with automatic logging.

    Usage:
        with Timer("SectionAnalysis") as t:
            ...
        result.timing["sections"] = t.duration_ms

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.auto_log:
            debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.time() - self.start_time) * 1000
        if self.auto_log:
            debug_timing(self.operation_name, self.duration_ms / 1000)
        return False  # Don't suppress exceptions


def debug_log(message: str):
    """
    Log a debug message.

    Args:
        message: The message to log (prefix with [Component] for clarity)

    Example:
        debug_log("[ChunkPlanner] 90000 chars -> 5 chunks")
    """
    _logger.debug(message)


def info(message: str):
    """Log an informational message."""
    _logger.info(message)


def warning(message: str):
    """Log a warning message."""
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def debug_timing(operation: str, elapsed_seconds: float):
    """
    Log operation timing information in human-readable format.

    Args:
        operation: Description of the operation that was timed
        elapsed_seconds: Elapsed time in seconds (float)
    """
    if elapsed_seconds < 1:
        time_str = f"{elapsed_seconds*1000:.0f} ms"
    elif elapsed_seconds < 60:
        time_str = f"{elapsed_seconds:.2f}s"
    else:
        time_str = f"{elapsed_seconds/60:.1f}m"
    debug_log(f"{operation} took {time_str}")


__all__ = [
    'debug_log',
    'debug_timing',
    'info',
    'warning',
    'error',
    'Timer',
    'DEBUG_MODE',
]
