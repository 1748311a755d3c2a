import logging
import logging.handlers
import sys
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Dict, Any, List

ROOT_LOGGER_NAME = "hdrscope"

# shared with the header renderer so log output and highlighted headers agree
ANSI_COLORS = {
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "cyan": "\033[36m",
    "red_bg": "\033[41m",
    "bold": "\033[1m",
    "reset": "\033[0m",
}

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogFormatter(logging.Formatter):
    """Level-dependent layout: errors carry file and line, warnings the logger name."""

    LEVEL_COLORS = {
        "DEBUG": ANSI_COLORS["cyan"],
        "INFO": ANSI_COLORS["green"],
        "WARNING": ANSI_COLORS["yellow"],
        "ERROR": ANSI_COLORS["red"],
        "CRITICAL": ANSI_COLORS["red_bg"],
    }

    LAYOUTS = (
        (logging.ERROR, "%(asctime)s - %(name)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"),
        (logging.WARNING, "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        (logging.NOTSET, "%(asctime)s - %(levelname)s - %(message)s"),
    )

    def __init__(self, use_colors: bool = True, stream=None):
        super().__init__()
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, "isatty") and stream.isatty()
        self._formatters = [(level, logging.Formatter(fmt, datefmt=_DATE_FORMAT)) for level, fmt in self.LAYOUTS]

    def _formatter_for(self, levelno: int) -> logging.Formatter:
        for threshold, formatter in self._formatters:
            if levelno >= threshold:
                return formatter
        return self._formatters[-1][1]

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatter_for(record.levelno)
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if not color:
            return formatter.format(record)

        levelname, msg = record.levelname, record.msg
        record.levelname = f"{color}{levelname}{ANSI_COLORS['reset']}"
        record.msg = f"{color}{msg}{ANSI_COLORS['reset']}"
        try:
            return formatter.format(record)
        finally:
            record.levelname, record.msg = levelname, msg


def _build_handlers(
    log_level: int,
    log_file: Optional[str],
    max_bytes: int,
    backup_count: int,
    enable_console: bool,
    use_colors: bool,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if enable_console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(LogFormatter(use_colors=use_colors))
        handlers.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        rotating.setFormatter(LogFormatter(use_colors=False))
        handlers.append(rotating)

    for handler in handlers:
        handler.setLevel(log_level)
    return handlers or [logging.NullHandler()]


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    enable_console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """(Re)configure the ``hdrscope`` logger tree; safe to call repeatedly."""
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    for handler in _build_handlers(log_level, log_file, max_bytes, backup_count, enable_console, use_colors):
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)


class PerformanceLogger:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("performance")
        self.timers: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def start_timer(self, operation: str):
        with self._lock:
            self.timers[operation] = {"start": time.perf_counter(), "end": None, "duration": None}
        self.logger.debug(f"Started: {operation}")

    def stop_timer(self, operation: str) -> float:
        with self._lock:
            t = self.timers.get(operation)
            if not t:
                self.logger.warning(f"No timer found for operation: {operation}")
                return 0.0
            t["end"] = time.perf_counter()
            t["duration"] = t["end"] - t["start"]
        self.logger.debug(f"Completed: {operation} in {t['duration']:.3f}s")
        return float(t["duration"])

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None):
        duration = self.stop_timer(operation)
        payload = {
            "operation": operation,
            "duration_seconds": round(duration, 3),
        }
        if details:
            payload.update(details)
        self.logger.info(f"Performance - {operation}: {duration:.3f}s", extra={"perf": payload})

    @contextmanager
    def measure(self, operation: str, details: Optional[Dict[str, Any]] = None):
        self.start_timer(operation)
        try:
            yield
        finally:
            self.log_operation(operation, details)


default_logger = setup_logging()
