"""
Logging Configuration

Console output is one line per record, coloured by level when attached to
a terminal. The optional log file gets JSON lines so that audit events
(access denials, request transitions, model failures) can be grepped or
shipped as-is.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

_PACKAGE_PREFIX = "doctorpath."
_HANDLER_MARK = "_doctorpath_handler"

# Libraries that are chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "multipart", "pypdf")


def _short_name(name: str) -> str:
    return name[len(_PACKAGE_PREFIX):] if name.startswith(_PACKAGE_PREFIX) else name


class StructuredFormatter(logging.Formatter):
    """`time LEVEL [module] message`, coloured when `use_color` is set."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        line = f"{stamp} {record.levelname:<8} [{_short_name(record.name)}] {record.getMessage()}"

        if self.use_color and record.levelname in self.LEVEL_COLORS:
            line = f"{self.LEVEL_COLORS[record.levelname]}{line}{self.RESET}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger. Safe to call more than once; only handlers
    installed here are replaced.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional path for JSON-lines output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    setattr(console_handler, _HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        setattr(file_handler, _HANDLER_MARK, True)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass `__name__`."""
    return logging.getLogger(name)
