from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Make src/ importable when the package is not installed
ROOT = TESTS_DIR.parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from fixtures import WorkspaceBuilder, make_provider  # noqa: E402,F401

from geoquiz.quizzer.bank import DEFAULT_QUESTIONS  # noqa: E402
from geoquiz.quizzer.models import Question  # noqa: E402
from geoquiz.quizzer.state import QuizState  # noqa: E402

_MANAGED_LOGGERS = ("geoquiz.quizzer", "geoquiz.test", "geoquiz.test_verbose")


@pytest.fixture(autouse=True)
def _isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point GEOQUIZ_DATA_HOME at a per-test directory and drop env leaks."""

    for key in (
        "GEOQUIZ_CONFIG",
        "GEOQUIZ_MAX_CHEATS",
        "GEOQUIZ_BANK",
        "GEOQUIZ_SESSION_NAME",
        "GEOQUIZ_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "geoquiz-data"
    monkeypatch.setenv("GEOQUIZ_DATA_HOME", str(home))
    yield home
    for name in _MANAGED_LOGGERS:
        logger = logging.getLogger(name)
        managed = [
            handler
            for handler in logger.handlers
            if getattr(handler, "_geoquiz_file", False)
            or getattr(handler, "_geoquiz_console", False)
        ]
        for handler in managed:
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def questions() -> tuple[Question, ...]:
    return DEFAULT_QUESTIONS


@pytest.fixture
def state(questions: tuple[Question, ...]) -> QuizState:
    return QuizState(questions)
