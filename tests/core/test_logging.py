from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from geoquiz.core import logging as core_logging


def _managed(handler: logging.Handler) -> bool:
    return getattr(handler, "_geoquiz_file", False) or getattr(
        handler, "_geoquiz_console", False
    )


def _close(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if _managed(h)]:
        handler.close()
        logger.removeHandler(handler)


def _console_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        handler
        for handler in logger.handlers
        if getattr(handler, "_geoquiz_console", False)
    ]


def _file_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        handler
        for handler in logger.handlers
        if getattr(handler, "_geoquiz_file", False)
    ]


def test_configure_logger_writes_json(tmp_path):
    log_dir = tmp_path / "logs"
    logger, log_path = core_logging.configure_logger(
        "geoquiz.test",
        log_dir=log_dir,
        level="INFO",
        verbose=False,
        filename="test.log",
    )

    logger.info("answer", extra={"event": "answer", "index": 3})
    logger.debug("hidden at INFO", extra={"event": "navigate"})
    logger.info("stack info", stack_info=True)

    class _Helper:
        def __repr__(self):  # noqa: D401
            return "helper"

    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={
                "event": "unit",
                "value": {
                    "items": [Path(log_dir), 1],
                    "mapping": {"k": "v"},
                },
                "obj": _Helper(),
            },
        )
    for handler in logger.handlers:
        handler.flush()

    contents = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(contents) == 3
    first = json.loads(contents[0])
    assert first["message"] == "answer"
    assert first["level"] == "INFO"
    assert first["logger"] == "geoquiz.test"
    assert first["extra"] == {"event": "answer", "index": 3}

    assert json.loads(contents[1])["stack"]

    payload = json.loads(contents[-1])
    assert "ValueError: boom" in payload["exception"]
    assert payload["extra"]["obj"] == "helper"
    assert payload["extra"]["value"]["items"] == [str(log_dir), 1]

    _close(logger)


def test_configure_logger_defaults_filename_from_name(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "geoquiz.test", log_dir=tmp_path
    )

    assert log_path == tmp_path / "test.log"
    assert log_path.stat().st_mode & 0o777 == 0o600

    _close(logger)


def test_configure_logger_reuses_file_handler(tmp_path):
    first, path = core_logging.configure_logger(
        "geoquiz.test", log_dir=tmp_path, level="WARNING"
    )
    second, again = core_logging.configure_logger(
        "geoquiz.test", log_dir=tmp_path / "elsewhere", level="DEBUG"
    )

    assert first is second
    assert again == path
    assert len(_file_handlers(second)) == 1
    assert not _console_handlers(second)
    assert _file_handlers(second)[0].level == logging.DEBUG
    assert second.propagate is False

    _close(second)


def test_configure_logger_adds_console_handler(tmp_path):
    logger, _ = core_logging.configure_logger(
        "geoquiz.test_verbose",
        log_dir=tmp_path / "logs",
        level="WARNING",
        verbose=True,
        filename="verbose.log",
    )

    assert len(_console_handlers(logger)) == 1
    assert _file_handlers(logger)[0].level == logging.DEBUG

    _close(logger)


def test_console_handler_toggle(tmp_path):
    log_dir = tmp_path / "logs"
    logger_name = "geoquiz.test_toggle"

    logger, _ = core_logging.configure_logger(
        logger_name,
        log_dir=log_dir,
        verbose=True,
        filename="toggle.log",
    )
    assert len(_console_handlers(logger)) == 1

    core_logging.configure_logger(
        logger_name,
        log_dir=log_dir,
        verbose=True,
        filename="toggle.log",
    )
    assert len(_console_handlers(logger)) == 1

    core_logging.configure_logger(
        logger_name,
        log_dir=log_dir,
        verbose=False,
        filename="toggle.log",
    )
    assert not _console_handlers(logger)

    _close(logger)


def test_configure_logger_rotating_handler_fallback(tmp_path, monkeypatch):
    calls = {"count": 0}
    fallback_dir = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: D401, ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback_dir)

    logger, log_path = core_logging.configure_logger(
        "geoquiz.test_rotating_fallback",
        log_dir=tmp_path / "primary",
        filename="rotate.log",
    )

    assert log_path.parent == fallback_dir
    assert calls["count"] == 2

    _close(logger)


def test_configure_logger_fallback_directory(tmp_path, monkeypatch):
    target = tmp_path / "blocked"
    fallback_dir = tmp_path / "fallback"
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback_dir)

    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: D401, ANN001
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)

    logger, log_path = core_logging.configure_logger(
        "geoquiz.test_blocked",
        log_dir=target,
        filename="blocked.log",
    )

    assert log_path == fallback_dir / "blocked.log"
    assert log_path.exists()

    _close(logger)


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))

    path = core_logging._fallback_log_dir()

    assert path == tmp_path / "geoquiz-logs"


def test_coerce_level_defaults():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level(" debug ") == logging.DEBUG
