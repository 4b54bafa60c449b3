from __future__ import annotations

import pytest

from geoquiz.quizzer.bank import (
    DEFAULT_QUESTIONS,
    QuestionBankError,
    load_question_bank,
    write_question_bank,
)
from geoquiz.quizzer.models import Question


def test_default_bank_matches_builtin_answers() -> None:
    assert [q.answer for q in DEFAULT_QUESTIONS] == [
        True,
        True,
        False,
        False,
        True,
        True,
    ]
    assert all(q.text for q in DEFAULT_QUESTIONS)


def test_load_question_bank_reads_jsonl(workspace) -> None:
    path = workspace.write(
        "bank.jsonl",
        '{"text": "  Everest is in Nepal. ", "answer": true}\n'
        "\n"
        '{"text": "Paris is in Spain.", "answer": "False"}\n',
    )

    questions = load_question_bank(path)

    assert questions == (
        Question("Everest is in Nepal.", True),
        Question("Paris is in Spain.", False),
    )


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("not json\n", "invalid JSON"),
        ('["text", true]\n', "expected a JSON object"),
        ('{"text": "", "answer": true}\n', "'text'"),
        ('{"text": "Q", "answer": "maybe"}\n', "'answer'"),
        ('{"text": "Q"}\n', "'answer'"),
    ],
)
def test_load_question_bank_rejects_bad_lines(
    workspace, content: str, fragment: str
) -> None:
    path = workspace.write("bad.jsonl", content)

    with pytest.raises(QuestionBankError) as excinfo:
        load_question_bank(path)

    assert fragment in str(excinfo.value)
    assert "bad.jsonl:1" in str(excinfo.value)


def test_load_question_bank_rejects_empty_and_missing(workspace) -> None:
    empty = workspace.write("empty.jsonl", "\n\n")
    with pytest.raises(QuestionBankError, match="empty"):
        load_question_bank(empty)
    with pytest.raises(QuestionBankError, match="Unable to read"):
        load_question_bank(workspace.root / "missing.jsonl")


def test_write_question_bank_is_loadable(tmp_path) -> None:
    target = tmp_path / "nested" / "bank.jsonl"
    write_question_bank(target, DEFAULT_QUESTIONS)
    assert load_question_bank(target) == DEFAULT_QUESTIONS


def test_load_question_bank_rejects_non_utf8_bytes(workspace) -> None:
    path = workspace.root / "latin1.jsonl"
    path.write_bytes(
        b'{"text": "S\xe3o Paulo is in Brazil.", "answer": true}\n'
    )

    with pytest.raises(QuestionBankError, match="Unable to read"):
        load_question_bank(path)


def test_write_question_bank_wraps_os_errors(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(QuestionBankError, match="Unable to write"):
        write_question_bank(blocker / "bank.jsonl", DEFAULT_QUESTIONS)
