"""Rich-powered quiz session loop.

The loop renders the current question, reads one command per turn and
applies it to a :class:`~geoquiz.quizzer.state.QuizState`. Commands whose
control is locked (see :func:`~geoquiz.quizzer.controls.derive_controls`)
are refused with a notice and leave the state untouched. Input comes from
an injectable provider so tests can script whole sessions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .cheat import DEFAULT_MAX_CHEATS, CheatPrompt, run_cheat_flow
from .controls import ControlState, derive_controls
from .models import FEEDBACK_MESSAGES, Direction, Outcome, final_message
from .state import QuizState

InputProvider = Callable[[], str]
ExitAction = Literal["completed", "quit"]
CommandType = Literal[
    "true", "false", "next", "prev", "cheat", "restart", "quit"
]

_COMMAND_ALIASES: dict[str, CommandType] = {
    "t": "true",
    "true": "true",
    "f": "false",
    "false": "false",
    "n": "next",
    "next": "next",
    "p": "prev",
    "prev": "prev",
    "previous": "prev",
    "c": "cheat",
    "cheat": "cheat",
    "r": "restart",
    "restart": "restart",
    "q": "quit",
    "quit": "quit",
    "exit": "quit",
}

_FEEDBACK_STYLES = {
    Outcome.CORRECT: "bold green",
    Outcome.INCORRECT: "bold red",
    Outcome.CHEATED: "bold yellow",
}

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: CommandType


@dataclass(frozen=True)
class QuizSessionResult:
    """Return value from ``run_quiz_session``."""

    state: QuizState
    exit_action: ExitAction
    score: Optional[int]


def parse_session_command(raw: str | None) -> SessionCommand | None:
    if raw is None:
        return None
    command = _COMMAND_ALIASES.get(raw.strip().lower())
    return SessionCommand(command) if command else None


def run_quiz_session(
    state: QuizState,
    console: Console,
    input_provider: InputProvider,
    *,
    max_cheats: int = DEFAULT_MAX_CHEATS,
    logger: logging.Logger | None = None,
) -> QuizSessionResult:
    """Drive ``state`` from console commands until the user quits."""

    log = logger or _log
    exit_action: ExitAction = "quit"
    while True:
        _render_question(console, state, max_cheats)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            break
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        exit_candidate = _apply_command(
            command,
            state,
            console,
            input_provider,
            max_cheats=max_cheats,
            log=log,
        )
        if exit_candidate:
            exit_action = exit_candidate
            break

    score = state.score() if state.is_finished else None
    return QuizSessionResult(state, exit_action, score)


def _apply_command(
    command: SessionCommand,
    state: QuizState,
    console: Console,
    input_provider: InputProvider,
    *,
    max_cheats: int,
    log: logging.Logger,
) -> ExitAction | None:
    controls = derive_controls(state, max_cheats=max_cheats)

    if command.type in ("true", "false"):
        if not controls.answer_enabled:
            console.print(_locked_reason(state, "answer"))
            return None
        _submit_answer(state, command.type == "true", console, log)
        return None
    if command.type in ("next", "prev"):
        if not controls.navigation_enabled:
            console.print(_locked_reason(state, "navigate"))
            return None
        direction = (
            Direction.NEXT if command.type == "next" else Direction.PREV
        )
        index = state.navigate(direction)
        log.debug(
            "navigate",
            extra={
                "event": "navigate",
                "direction": direction.value,
                "index": index,
            },
        )
        return None
    if command.type == "cheat":
        if not controls.cheat_enabled:
            console.print(_cheat_refusal(state, controls))
            return None
        _cheat(state, console, input_provider, max_cheats, log)
        return None
    if command.type == "restart":
        if not controls.restart_visible:
            console.print("[red]Restart is available once finished.[/]")
            return None
        state.reset()
        log.info("reset", extra={"event": "reset"})
        console.print("[bold]Starting again.[/]")
        return None
    if command.type == "quit":
        console.print("\n[bold yellow]Leaving the quiz.[/]")
        return "completed" if state.is_finished else "quit"
    return None


def _submit_answer(
    state: QuizState,
    choice: bool,
    console: Console,
    log: logging.Logger,
) -> None:
    index = state.current_index
    outcome = state.answer(choice)
    log.info(
        "answer",
        extra={
            "event": "answer",
            "index": index,
            "choice": choice,
            "outcome": outcome.value,
        },
    )
    console.print(
        Text(FEEDBACK_MESSAGES[outcome], style=_FEEDBACK_STYLES[outcome])
    )
    if state.is_finished:
        score = state.score()
        log.info(
            "finish",
            extra={
                "event": "finish",
                "score": score,
                "correct": state.correct_count,
                "cheats": state.cheat_count,
            },
        )
        console.print(
            Panel(
                final_message(score),
                title="Quiz complete",
                border_style="magenta",
            )
        )
    else:
        state.navigate(Direction.NEXT)


def _cheat(
    state: QuizState,
    console: Console,
    input_provider: InputProvider,
    max_cheats: int,
    log: logging.Logger,
) -> None:
    prompt = CheatPrompt(answer=state.current.answer)
    console.print(
        Panel(
            "Are you sure you want to do this?\n"
            "Type [bold]y[/] to show the answer, anything else to go back.",
            title="Cheat",
            border_style="yellow",
        )
    )
    try:
        confirm = input_provider()
    except (EOFError, KeyboardInterrupt, StopIteration):
        confirm = ""
    if confirm.strip().lower() in {"y", "yes"}:
        label = prompt.show_answer()
        console.print(Text(f"The answer is {label}.", style="bold yellow"))

    if run_cheat_flow(state, prompt.answer_shown):
        log.info(
            "reveal",
            extra={
                "event": "reveal",
                "index": state.current_index,
                "cheat_count": state.cheat_count,
                "max_cheats": max_cheats,
            },
        )


def _locked_reason(state: QuizState, action: str) -> str:
    if state.is_finished:
        return (
            f"[red]The quiz is finished; cannot {action}. "
            "Use restart or quit.[/]"
        )
    return "[red]This question has already been answered.[/]"


def _cheat_refusal(state: QuizState, controls: ControlState) -> str:
    if controls.answer_enabled:
        return "[red]No cheats left for this run.[/]"
    return _locked_reason(state, "cheat")


def _render_question(
    console: Console, state: QuizState, max_cheats: int
) -> None:
    controls = derive_controls(state, max_cheats=max_cheats)
    header = Text.assemble(
        (f"Question {state.current_index + 1}", "bold cyan"),
        (f" / {state.question_count}", "dim"),
    )
    console.print()
    console.rule(header)
    style = "dim" if state.is_current_answered() else "bold"
    console.print(Text(state.current.text, style=style))

    available = []
    if controls.answer_enabled:
        available.append("t (true), f (false)")
    if controls.navigation_enabled:
        available.append("n (next), p (prev)")
    if controls.cheat_enabled:
        available.append("c (cheat)")
    if controls.restart_visible:
        available.append("r (restart)")
    available.append("q (quit)")
    console.print(
        Text(
            f"Answered {state.answered_count()}/{state.question_count} | "
            f"Cheats {state.cheat_count}/{max_cheats} | "
            f"Commands: {', '.join(available)}",
            style="dim",
        )
    )
