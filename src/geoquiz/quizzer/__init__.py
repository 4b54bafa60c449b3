from ._main import build_arg_parser
from .bank import (
    DEFAULT_QUESTIONS,
    QuestionBankError,
    load_question_bank,
    write_question_bank,
)
from .cheat import (
    DEFAULT_MAX_CHEATS,
    CheatPrompt,
    cheat_allowed,
    run_cheat_flow,
)
from .controls import ControlState, derive_controls
from .models import Direction, Outcome, Question, Reveal
from .session import (
    QuizSessionResult,
    SessionCommand,
    parse_session_command,
    run_quiz_session,
)
from .state import QuizState
from .store import SessionError, SessionSnapshot, SessionStore
from .view.quiz import CheatScreen, QuizApp

__all__ = [
    "build_arg_parser",
    "DEFAULT_QUESTIONS",
    "QuestionBankError",
    "load_question_bank",
    "write_question_bank",
    "DEFAULT_MAX_CHEATS",
    "CheatPrompt",
    "cheat_allowed",
    "run_cheat_flow",
    "ControlState",
    "derive_controls",
    "Direction",
    "Outcome",
    "Question",
    "Reveal",
    "QuizSessionResult",
    "SessionCommand",
    "parse_session_command",
    "run_quiz_session",
    "QuizState",
    "SessionError",
    "SessionSnapshot",
    "SessionStore",
    "CheatScreen",
    "QuizApp",
]
