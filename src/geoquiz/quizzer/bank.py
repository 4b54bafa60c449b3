"""Question banks: the built-in geography set and JSONL loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

from .models import Question

DEFAULT_QUESTIONS: tuple[Question, ...] = (
    Question("Canberra is the capital of Australia.", True),
    Question(
        "The Pacific Ocean is larger than the Atlantic Ocean.", True
    ),
    Question(
        "The Suez Canal connects the Red Sea and the Indian Ocean.", False
    ),
    Question("The source of the Nile River is in Egypt.", False),
    Question(
        "The Amazon River is the longest river in the Americas.", True
    ),
    Question(
        "Lake Baikal is the world's oldest and deepest freshwater lake.", True
    ),
)

_TRUE_STRINGS = {"true", "t", "yes", "1"}
_FALSE_STRINGS = {"false", "f", "no", "0"}


class QuestionBankError(RuntimeError):
    """Raised when a question bank file cannot be used."""


def load_question_bank(path: Path) -> tuple[Question, ...]:
    """Read a JSONL bank where each line holds ``text`` and ``answer``.

    ``answer`` may be a JSON boolean or a true/false style string. Blank
    lines are ignored; anything else that does not describe a question
    fails the whole load.
    """

    questions = tuple(_iter_questions(Path(path)))
    if not questions:
        raise QuestionBankError(f"Question bank is empty: {path}")
    return questions


def write_question_bank(path: Path, questions: tuple[Question, ...]) -> None:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as fh:
            for question in questions:
                record = {"text": question.text, "answer": question.answer}
                fh.write(json.dumps(record, ensure_ascii=False))
                fh.write("\n")
    except OSError as exc:
        raise QuestionBankError(
            f"Unable to write question bank {target}: {exc}"
        ) from exc


def _iter_questions(path: Path) -> Iterator[Question]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise QuestionBankError(
            f"Unable to read question bank {path}: {exc}"
        ) from exc
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise QuestionBankError(
                f"{path}:{lineno}: invalid JSON ({exc.msg})"
            ) from exc
        yield _question_from_record(record, f"{path}:{lineno}")


def _question_from_record(record: object, where: str) -> Question:
    if not isinstance(record, dict):
        raise QuestionBankError(f"{where}: expected a JSON object")
    text = record.get("text")
    if not isinstance(text, str) or not text.strip():
        raise QuestionBankError(f"{where}: 'text' must be a non-empty string")
    return Question(text.strip(), _coerce_answer(record.get("answer"), where))


def _coerce_answer(value: object, where: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise QuestionBankError(f"{where}: 'answer' must be true or false")
