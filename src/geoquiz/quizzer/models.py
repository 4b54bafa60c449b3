"""Value types shared by the quiz state machine and its front-ends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Question:
    """A true/false statement and its correct answer."""

    text: str
    answer: bool


class Outcome(Enum):
    """Result of submitting an answer for the current question."""

    CHEATED = "cheated"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Direction(Enum):
    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True)
class Reveal:
    """What the cheat flow disclosed for the current question."""

    answer: bool
    shown: bool = True


FEEDBACK_MESSAGES: dict[Outcome, str] = {
    Outcome.CORRECT: "Correct!",
    Outcome.INCORRECT: "Incorrect!",
    Outcome.CHEATED: "Cheating is wrong.",
}


def answer_label(value: bool) -> str:
    return "True" if value else "False"


def final_message(score: int) -> str:
    return f"Well done! You've scored {score}% correct answers!"
