"""Append-only log of timestamped informational and error messages."""

from __future__ import annotations

import os
import threading
from datetime import datetime
from pathlib import Path

DEFAULT_LOG_FILE = "metrics.log"
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Logger:
    """Writes `<timestamp> [LEVEL] message` lines to a file, one call at a time."""

    def __init__(self, filename: str | os.PathLike[str] = DEFAULT_LOG_FILE) -> None:
        self.filename = Path(filename)
        self._lock = threading.Lock()

    def _write(self, level: str, message: str) -> None:
        stamp = datetime.now().strftime(_TIMESTAMP_FORMAT)
        with self._lock:
            try:
                with self.filename.open("a", encoding="utf-8") as log_file:
                    log_file.write(f"{stamp} [{level}] {message}\n")
            except OSError:
                # A log that cannot be opened is silently skipped.
                pass

    def log_error(self, message: str) -> None:
        """Append an error message."""
        self._write("ERROR", message)

    def log_info(self, message: str) -> None:
        """Append an informational message."""
        self._write("INFO", message)


_instance: Logger | None = None
_instance_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the shared logger writing to ``metrics.log``."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Logger(DEFAULT_LOG_FILE)
        return _instance