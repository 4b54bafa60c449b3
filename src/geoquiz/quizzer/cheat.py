"""Cheat sub-flow: the reveal prompt and the cap on how often it may run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .models import answer_label
from .state import QuizState

DEFAULT_MAX_CHEATS = 3


def cheat_allowed(
    cheat_count: int, max_cheats: int = DEFAULT_MAX_CHEATS
) -> bool:
    """Return whether another reveal may be started.

    The count is never clamped by :class:`QuizState`; callers consult this
    before opening the prompt.
    """

    return cheat_count < max_cheats


@dataclass
class CheatPrompt:
    """One-shot interaction that may disclose the current answer.

    The prompt only reports back whether the answer was shown; applying the
    reveal to the quiz is the caller's job (see :func:`run_cheat_flow`).
    """

    answer: bool
    answer_shown: bool = False

    def show_answer(self) -> str:
        self.answer_shown = True
        return answer_label(self.answer)

    def to_dict(self) -> dict[str, bool]:
        return {"answer": self.answer, "answer_shown": self.answer_shown}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CheatPrompt":
        return cls(
            answer=payload.get("answer") is True,
            answer_shown=payload.get("answer_shown") is True,
        )


def run_cheat_flow(state: QuizState, answer_shown: bool) -> bool:
    """Apply a prompt result to ``state``; True when a reveal happened."""

    if not answer_shown:
        return False
    state.reveal()
    return True
