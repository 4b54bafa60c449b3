"""Logging helpers shared across geoquiz commands."""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

# Attributes present on every LogRecord; anything else came in via ``extra``.
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """Emit log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _coerce_value(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Configure ``name`` with a rotating JSON file handler.

    Calling this repeatedly for the same logger reuses the managed handlers
    instead of stacking new ones. ``verbose`` forces DEBUG on the file and
    mirrors records to stderr.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
    handler, path = _file_handler(
        logger, log_dir, log_name, max_bytes, backup_count
    )
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))

    _toggle_console_handler(logger, enabled=verbose)
    return logger, path


def _coerce_level(level: str) -> int:
    numeric = logging.getLevelName(level.strip().upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def _file_handler(
    logger: logging.Logger,
    log_dir: Path,
    filename: str,
    max_bytes: int,
    backup_count: int,
) -> tuple[RotatingFileHandler, Path]:
    for handler in logger.handlers:
        if getattr(handler, "_geoquiz_file", False):
            return handler, Path(handler.baseFilename)  # type: ignore

    try:
        path = _prepare_log_file(log_dir, filename)
        managed = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except PermissionError:
        path = _prepare_log_file(_fallback_log_dir(), filename)
        managed = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    managed.setFormatter(JsonLogFormatter())
    managed._geoquiz_file = True  # type: ignore[attr-defined]
    logger.addHandler(managed)
    return managed, path


def _toggle_console_handler(logger: logging.Logger, *, enabled: bool) -> None:
    existing = [
        handler
        for handler in logger.handlers
        if getattr(handler, "_geoquiz_console", False)
    ]
    if enabled and not existing:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        console._geoquiz_console = True  # type: ignore[attr-defined]
        logger.addHandler(console)
    elif not enabled:
        for handler in existing:
            logger.removeHandler(handler)
            handler.close()


def _coerce_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _coerce_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_coerce_value(item) for item in value]
    return repr(value)


def _prepare_log_file(log_dir: Path, filename: str) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / filename
    path.touch(exist_ok=True)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "geoquiz-logs"
