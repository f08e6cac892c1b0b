"""Structured JSON logging for the Trustay client.

Logs HTTP calls and store action outcomes in JSON format
so a session can be replayed from the log when debugging.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Merge extra structured data
        if hasattr(record, "data"):
            entry["data"] = record.data  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path | None = None,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Configure structured logging for the client.

    Args:
        log_dir: Directory for log files. If None, logs to stderr only.
        level: Logging level.

    Returns:
        The root 'trustay' logger.
    """
    logger = logging.getLogger("trustay")
    logger.setLevel(level)

    # Avoid duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    fmt = JSONFormatter()

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / "client.jsonl", encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    # Stderr handler (only warnings+)
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh.setLevel(logging.WARNING)
    logger.addHandler(sh)

    return logger


class ApiCallLogger:
    """Context manager for logging a single HTTP call."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        self.start_time = 0.0
        self._logger = logging.getLogger("trustay.api")

    def __enter__(self) -> ApiCallLogger:
        self.start_time = time.monotonic()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        pass

    def success(self, status: int, has_token: bool = False):
        elapsed = time.monotonic() - self.start_time
        self._logger.info(
            "api_call",
            extra={"data": {
                "method": self.method,
                "path": self.path,
                "status": status,
                "elapsed_s": round(elapsed, 3),
                "has_token": has_token,
            }},
        )

    def error(self, error: str, status: int | None = None):
        elapsed = time.monotonic() - self.start_time
        self._logger.warning(
            "api_call_error",
            extra={"data": {
                "method": self.method,
                "path": self.path,
                "status": status,
                "elapsed_s": round(elapsed, 3),
                "error": error,
            }},
        )


def log_store_action(
    store: str,
    action: str,
    outcome: str,
    **data: Any,
):
    """Log how a store action settled: applied, skipped, stale or failed."""
    logger = logging.getLogger("trustay.store")
    level = logging.WARNING if outcome == "failed" else logging.DEBUG
    logger.log(
        level,
        "store_action",
        extra={"data": {
            "store": store,
            "action": action,
            "outcome": outcome,
            **data,
        }},
    )
