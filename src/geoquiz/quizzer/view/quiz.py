from __future__ import annotations

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from ..cheat import DEFAULT_MAX_CHEATS, CheatPrompt, run_cheat_flow
from ..controls import ControlState, derive_controls
from ..models import (
    FEEDBACK_MESSAGES,
    Direction,
    Outcome,
    answer_label,
    final_message,
)
from ..state import QuizState

_log = logging.getLogger(__name__)


class QuestionText(Static):
    """Question label; clicking it moves on like the Next button."""

    def on_click(self) -> None:
        self.app.action_next()


class CheatScreen(ModalScreen[bool]):
    """Modal that may show the answer and reports whether it did."""

    BINDINGS = [("escape", "back", "Back")]

    def __init__(self, prompt: CheatPrompt) -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical(id="cheat-dialog"):
            yield Static("Are you sure you want to do this?", id="warning")
            yield Static(self._answer_text(), id="answer")
            show = Button("Show answer", id="show")
            show.display = not self.prompt.answer_shown
            yield show
            yield Button("Back", id="back")

    def reveal(self) -> str:
        label = self.prompt.show_answer()
        if self.is_mounted:
            self.query_one("#answer", Static).update(self._answer_text())
            self.query_one("#show", Button).display = False
        return label

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "show":
            self.reveal()
        elif event.button.id == "back":
            self.action_back()

    def action_back(self) -> None:
        self.dismiss(self.prompt.answer_shown)

    def _answer_text(self) -> str:
        if not self.prompt.answer_shown:
            return ""
        return answer_label(self.prompt.answer)


class QuizApp(App):
    CSS = """
#question { padding: 1 2; text-style: bold; }
#answers, #nav { height: auto; }
#cheat-dialog { padding: 1 2; border: thick $warning; width: 60; height: auto; }
CheatScreen { align: center middle; }
"""
    BINDINGS = [
        ("t", "answer_true", "True"),
        ("f", "answer_false", "False"),
        ("n", "next", "Next"),
        ("p", "prev", "Prev"),
        ("c", "cheat", "Cheat"),
        ("r", "restart", "Start again"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        state: QuizState,
        *,
        max_cheats: int = DEFAULT_MAX_CHEATS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.state = state
        self.max_cheats = max_cheats
        self.last_message: Optional[str] = None
        self._log = logger or _log

    def compose(self) -> ComposeResult:
        yield QuestionText(self.state.current.text, id="question")
        with Horizontal(id="answers"):
            yield Button("True", id="true")
            yield Button("False", id="false")
        with Horizontal(id="nav"):
            yield Button("Prev", id="prev")
            yield Button("Cheat!", id="cheat")
            yield Button("Next", id="next")
        with Container(id="footer"):
            yield Button("Start again", id="restart")
            yield Static(self._status_text(), id="status")

    def on_mount(self) -> None:
        self._refresh_widgets()

    # Pure helpers (testable without running the App)
    def controls(self) -> ControlState:
        return derive_controls(self.state, max_cheats=self.max_cheats)

    def submit_answer(self, choice: bool) -> Optional[Outcome]:
        if not self.controls().answer_enabled:
            return None
        index = self.state.current_index
        outcome = self.state.answer(choice)
        self._log.info(
            "answer",
            extra={
                "event": "answer",
                "index": index,
                "choice": choice,
                "outcome": outcome.value,
            },
        )
        self._message(FEEDBACK_MESSAGES[outcome])
        if self.state.is_finished:
            score = self.state.score()
            self._log.info(
                "finish",
                extra={
                    "event": "finish",
                    "score": score,
                    "correct": self.state.correct_count,
                    "cheats": self.state.cheat_count,
                },
            )
            self._message(final_message(score))
        else:
            self.state.navigate(Direction.NEXT)
        self._refresh_widgets()
        return outcome

    def go(self, direction: Direction) -> Optional[int]:
        if not self.controls().navigation_enabled:
            return None
        index = self.state.navigate(direction)
        self._log.debug(
            "navigate",
            extra={
                "event": "navigate",
                "direction": direction.value,
                "index": index,
            },
        )
        self._refresh_widgets()
        return index

    def apply_cheat_result(self, answer_shown: Optional[bool]) -> bool:
        """Dismiss callback for :class:`CheatScreen`."""

        revealed = run_cheat_flow(self.state, bool(answer_shown))
        if revealed:
            self._log.info(
                "reveal",
                extra={
                    "event": "reveal",
                    "index": self.state.current_index,
                    "cheat_count": self.state.cheat_count,
                    "max_cheats": self.max_cheats,
                },
            )
        self._refresh_widgets()
        return revealed

    def restart(self) -> bool:
        if not self.controls().restart_visible:
            return False
        self.state.reset()
        self._log.info("reset", extra={"event": "reset"})
        self._refresh_widgets()
        return True

    def action_answer_true(self) -> None:
        self.submit_answer(True)

    def action_answer_false(self) -> None:
        self.submit_answer(False)

    def action_next(self) -> None:
        self.go(Direction.NEXT)

    def action_prev(self) -> None:
        self.go(Direction.PREV)

    def action_cheat(self) -> None:
        if not self.controls().cheat_enabled:
            return
        prompt = CheatPrompt(answer=self.state.current.answer)
        self.push_screen(CheatScreen(prompt), callback=self.apply_cheat_result)

    def action_restart(self) -> None:
        self.restart()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        handlers = {
            "true": self.action_answer_true,
            "false": self.action_answer_false,
            "next": self.action_next,
            "prev": self.action_prev,
            "cheat": self.action_cheat,
            "restart": self.action_restart,
        }
        handler = handlers.get(event.button.id or "")
        if handler is not None:
            handler()

    def _message(self, text: str) -> None:
        self.last_message = text
        if self.is_running:
            self.notify(text)

    def _status_text(self) -> str:
        return (
            f"Answered: {self.state.answered_count()}/"
            f"{self.state.question_count}  "
            f"Cheats: {self.state.cheat_count}/{self.max_cheats}"
        )

    def _refresh_widgets(self) -> None:
        if not self.is_running:
            return
        controls = self.controls()
        try:
            self.query_one("#question", Static).update(self.state.current.text)
            for button_id in ("true", "false"):
                button = self.query_one(f"#{button_id}", Button)
                button.disabled = not controls.answer_enabled
            for button_id in ("prev", "next"):
                button = self.query_one(f"#{button_id}", Button)
                button.disabled = not controls.navigation_enabled
            self.query_one("#cheat", Button).disabled = (
                not controls.cheat_enabled
            )
            self.query_one("#restart", Button).display = (
                controls.restart_visible
            )
            self.query_one("#status", Static).update(self._status_text())
        except NoMatches:
            return
