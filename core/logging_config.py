"""
Logging Configuration.

Root logger setup for the console: a size-rotated file under ``logs/`` plus
stdout, both through ``SensitiveDataFormatter`` so the HRMS bearer token,
other credentials and faculty e-mail addresses are masked in every record.
"""

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILENAME = "hrms_console.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that are chatty at INFO (one line per HRMS request or ASGI event).
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn", "uvicorn.access", "uvicorn.error")

_SENSITIVE_KEYS = (
    "password|secret|token|api_token|access_token|api_key|apikey|"
    "authorization|cookie|credential"
)

# Applied in order. Bearer must precede the key-value rule, which would
# otherwise consume "Authorization: Bearer" and leave the token itself.
SENSITIVE_PATTERNS = [
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE), r"\1***"),
    (
        re.compile(rf"({_SENSITIVE_KEYS})\s*[:=]\s*['\"]?([^'\"\s&]+)['\"]?", re.IGNORECASE),
        r"\1=***",
    ),
    (
        re.compile(r"([?&])(token|key|secret|password|api_key|access_token)=([^&\s]+)", re.IGNORECASE),
        r"\1\2=***",
    ),
    # Keep the first two characters and the domain: ma***@school.edu
    (
        re.compile(r"\b([a-zA-Z0-9._%+-]{2})([a-zA-Z0-9._%+-]*)(@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b"),
        r"\1***\3",
    ),
]


def mask_sensitive(text: str) -> str:
    """Apply every masking rule to ``text``."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFormatter(logging.Formatter):
    """Formatter that masks the fully rendered record, tracebacks included."""

    def format(self, record: logging.LogRecord) -> str:
        return mask_sensitive(super().format(record))


def get_log_path(log_dir: Optional[str] = None) -> Path:
    """Log file path inside ``log_dir`` (default: ``<project>/logs``), creating the directory."""
    directory = Path(log_dir) if log_dir else Path(__file__).resolve().parent.parent / "logs"
    directory.mkdir(parents=True, exist_ok=True)
    return directory / LOG_FILENAME


def _build_handlers(log_file: Path, log_level: int) -> list[logging.Handler]:
    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        filename=str(log_file),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stdout)

    handlers: list[logging.Handler] = [file_handler, console_handler]
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_level: int = logging.INFO, log_dir: Optional[str] = None) -> None:
    """
    Replace the root logger's handlers with the masked file and console pair.

    Args:
        log_level: Root and handler level, e.g. ``CoreSettings.numeric_log_level``.
        log_dir: Directory for ``hrms_console.log``.
    """
    log_file = get_log_path(log_dir)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    for handler in _build_handlers(log_file, log_level):
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"Logging initialized. Log file: {log_file}")
