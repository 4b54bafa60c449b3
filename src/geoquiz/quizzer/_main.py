import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from ..core.logging import configure_logger
from ..core.workspace import WorkspaceError
from .bank import DEFAULT_QUESTIONS, QuestionBankError, load_question_bank
from .config import ConfigOverrides, QuizConfigError, load_config
from .session import run_quiz_session
from .state import QuizState
from .store import SessionError, SessionStore
from .view.quiz import QuizApp


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="geoquiz play",
        description="Answer true/false geography questions (with cheats)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--bank", type=Path, help="JSONL question bank")
    p.add_argument(
        "--max-cheats",
        type=int,
        help="How many reveals are allowed per run",
    )
    p.add_argument("--name", help="Saved session name")
    p.add_argument(
        "--resume",
        action="store_true",
        help="Continue the saved session instead of starting over",
    )
    p.add_argument(
        "--no-autosave",
        dest="autosave",
        action="store_false",
        default=None,
        help="Do not save an unfinished session on quit",
    )
    p.add_argument(
        "--tui", action="store_true", help="Use the full-screen Textual UI"
    )
    p.add_argument("--config", type=Path, help="Path to geoquiz.toml")
    p.add_argument("--workspace", type=Path, help="Workspace root override")
    p.add_argument("--log-level", help="Log level for the session log")
    p.add_argument(
        "--verbose", action="store_true", help="Mirror logs to stderr"
    )
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    overrides = ConfigOverrides(
        max_cheats=args.max_cheats,
        bank=args.bank,
        session_name=args.name,
        autosave=args.autosave,
        log_level=args.log_level,
    )
    try:
        loaded = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (QuizConfigError, WorkspaceError) as exc:
        parser.error(str(exc))
    config = loaded.config

    logger, log_path = configure_logger(
        "geoquiz.quizzer",
        log_dir=loaded.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )

    try:
        questions = (
            load_question_bank(config.bank)
            if config.bank
            else DEFAULT_QUESTIONS
        )
    except QuestionBankError as exc:
        logger.error("bank_failed", extra={"event": "bank_failed"})
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    store = SessionStore(loaded.layout.path_for("sessions"))
    console = Console()
    state = None
    if args.resume:
        try:
            state = store.load(config.session_name, questions)
        except SessionError as exc:
            sys.stderr.write(f"Error: {exc}\n")
            return 1
        if state is None:
            console.print(
                f"No saved session '{config.session_name}'; starting fresh."
            )
        else:
            logger.info(
                "session_restored",
                extra={
                    "event": "session_restored",
                    "session": config.session_name,
                    "answered": state.answered_count(),
                },
            )
    if state is None:
        state = QuizState(questions)

    if args.tui:
        QuizApp(state, max_cheats=config.max_cheats, logger=logger).run()
    else:
        run_quiz_session(
            state,
            console,
            lambda: console.input("[bold]> [/]"),
            max_cheats=config.max_cheats,
            logger=logger,
        )

    if state.is_finished:
        store.clear(config.session_name)
    elif config.autosave:
        try:
            path = store.save(config.session_name, state)
        except SessionError as exc:
            logger.error("session_save_failed", extra={"event": "save_failed"})
            sys.stderr.write(f"Error: {exc}\n")
            return 1
        logger.info(
            "session_saved",
            extra={
                "event": "session_saved",
                "session": config.session_name,
                "path": path,
            },
        )
        console.print(
            f"Session saved to {path}. Run 'geoquiz play --resume' to "
            "continue."
        )
    logger.debug("log file", extra={"event": "exit", "log": log_path})
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
