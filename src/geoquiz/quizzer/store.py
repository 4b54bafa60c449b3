"""Save and restore a suspended quiz session.

Only the mutable part of :class:`QuizState` is persisted; the questions
come from the bank again on restore. Restoring never rejects a payload on
its content: missing or malformed entries fall back to their initial value
so a damaged file degrades to a partially reset quiz instead of an error.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

from .models import Question
from .state import QuizState

__all__ = [
    "SessionError",
    "SessionSnapshot",
    "SessionStore",
    "restore",
    "snapshot",
]

_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]+")


class SessionError(RuntimeError):
    """Raised when a saved session cannot be read or written."""


@dataclass(frozen=True)
class SessionSnapshot:
    current_index: int
    answered: tuple[bool, ...]
    correct_count: int
    is_finished: bool
    is_cheater: bool
    cheat_count: int
    saved_at: str = field(default="", compare=False)

    @property
    def question_count(self) -> int:
        return len(self.answered)

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "current_index": self.current_index,
            "answered": {
                str(index): flag for index, flag in enumerate(self.answered)
            },
            "correct_count": self.correct_count,
            "is_finished": self.is_finished,
            "is_cheater": self.is_cheater,
            "cheat_count": self.cheat_count,
            "question_count": self.question_count,
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], *, question_count: int
    ) -> "SessionSnapshot":
        """Rebuild a snapshot for a bank of ``question_count`` questions."""

        raw_answered = payload.get("answered")
        if not isinstance(raw_answered, Mapping):
            raw_answered = {}
        answered = tuple(
            raw_answered.get(str(index)) is True
            for index in range(question_count)
        )

        current_index = _as_int(payload.get("current_index"))
        if not 0 <= current_index < question_count:
            current_index = 0

        return cls(
            current_index=current_index,
            answered=answered,
            correct_count=min(
                _as_int(payload.get("correct_count")), question_count
            ),
            is_finished=bool(answered) and all(answered),
            is_cheater=payload.get("is_cheater") is True,
            cheat_count=_as_int(payload.get("cheat_count")),
            saved_at=str(payload.get("saved_at") or ""),
        )


def snapshot(state: QuizState) -> SessionSnapshot:
    return SessionSnapshot(
        current_index=state.current_index,
        answered=tuple(state.answered),
        correct_count=state.correct_count,
        is_finished=state.is_finished,
        is_cheater=state.is_cheater,
        cheat_count=state.cheat_count,
        saved_at=datetime.now(timezone.utc).isoformat(),
    )


def restore(
    questions: Sequence[Question], saved: SessionSnapshot
) -> QuizState:
    state = QuizState(tuple(questions))
    if saved.question_count != state.question_count:
        return state
    state.current_index = saved.current_index
    state.answered = list(saved.answered)
    state.correct_count = saved.correct_count
    state.is_finished = saved.is_finished
    state.is_cheater = saved.is_cheater
    state.cheat_count = saved.cheat_count
    return state


class SessionStore:
    """Keep named session files under the workspace ``sessions`` directory."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        slug = _NAME_RE.sub("-", name.strip()).strip("-.") or "default"
        return self._root / f"{slug}.json"

    def save(self, name: str, state: QuizState) -> Path:
        target = self.path_for(name)
        try:
            _atomic_write_json(target, snapshot(state).to_dict())
        except OSError as exc:
            raise SessionError(
                f"Failed to write session file: {target}"
            ) from exc
        return target

    def load(
        self, name: str, questions: Sequence[Question]
    ) -> QuizState | None:
        """Return the saved session for ``name``, or ``None``."""

        target = self.path_for(name)
        if not target.is_file():
            return None
        try:
            payload = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SessionError(
                f"Failed to read session file: {target}"
            ) from exc
        if not isinstance(payload, Mapping):
            raise SessionError(f"Session file is not an object: {target}")
        saved = SessionSnapshot.from_dict(
            payload, question_count=len(questions)
        )
        return restore(questions, saved)

    def clear(self, name: str) -> bool:
        target = self.path_for(name)
        existed = target.exists()
        target.unlink(missing_ok=True)
        return existed


def _as_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(value, 0)


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
    )
    try:
        json.dump(payload, handle, indent=2, sort_keys=True)
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()
    os.replace(handle.name, path)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
