"""Quiz state machine: sequencing, answer locking and cheat bookkeeping.

`QuizState` owns everything a front-end needs to render a true/false quiz:
the fixed question list, the current position, one answered flag per
question, the running correct count and the cheat counters. Front-ends
own a single instance and are its only writer; every method completes its
transition before returning and none of them raise over a reachable state.

Whether a control may be used (answering an answered question, cheating
past the cap, navigating a finished quiz) is decided by the caller, see
:mod:`geoquiz.quizzer.controls`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .models import Direction, Outcome, Question, Reveal


@dataclass
class QuizState:
    questions: tuple[Question, ...]
    current_index: int = 0
    answered: list[bool] = field(default_factory=list)
    correct_count: int = 0
    is_finished: bool = False
    is_cheater: bool = False
    cheat_count: int = 0

    def __post_init__(self) -> None:
        self.questions = tuple(self.questions)
        if not self.questions:
            raise ValueError("A quiz needs at least one question.")
        if len(self.answered) != len(self.questions):
            self.answered = [False] * len(self.questions)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> Question:
        return self.questions[self.current_index]

    def navigate(self, direction: Direction) -> int:
        """Move to the next or previous question, wrapping at both ends."""

        step = 1 if direction is Direction.NEXT else -1
        self.current_index = (self.current_index + step) % self.question_count
        return self.current_index

    def answer(self, user_choice: bool) -> Outcome:
        """Score ``user_choice`` for the current question and mark it answered.

        A pending reveal turns the outcome into ``CHEATED`` and leaves the
        correct count alone; the cheater flag is cleared either way. The
        position does not change.
        """

        cheated, self.is_cheater = self.is_cheater, False
        if cheated:
            outcome = Outcome.CHEATED
        elif user_choice == self.current.answer:
            outcome = Outcome.CORRECT
            self.correct_count += 1
        else:
            outcome = Outcome.INCORRECT

        self.answered[self.current_index] = True
        if all(self.answered):
            self.is_finished = True
        return outcome

    def reveal(self) -> Reveal:
        """Record a successful cheat on the current question."""

        self.is_cheater = True
        self.cheat_count += 1
        return Reveal(answer=self.current.answer)

    def reset(self) -> None:
        self.answered = [False] * self.question_count
        self.correct_count = 0
        self.is_finished = False
        self.current_index = 0
        self.cheat_count = 0
        self.is_cheater = False

    def is_answered(self, index: int) -> bool:
        return self.answered[index % self.question_count]

    def is_current_answered(self) -> bool:
        return self.answered[self.current_index]

    def answered_count(self) -> int:
        return sum(self.answered)

    def score(self) -> int:
        """Percentage of correct answers, rounded half up."""

        return math.floor(self.correct_count / self.question_count * 100 + 0.5)
