"""CLI entry point for bootstrapping the geoquiz workspace."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from geoquiz.core import workspace as workspace_mod
from geoquiz.quizzer.bank import (
    DEFAULT_QUESTIONS,
    QuestionBankError,
    write_question_bank,
)
from geoquiz.quizzer.config import (
    CONFIG_FILENAME,
    QuizConfigError,
    write_template,
)

BANK_FILENAME = "questions.jsonl"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geoquiz init",
        description=(
            "Create the geoquiz workspace (config, logs, sessions) and a "
            "default geoquiz.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to GEOQUIZ_DATA_HOME "
            "or ~/.geoquiz-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rewrite geoquiz.toml even if it already exists.",
    )
    parser.add_argument(
        "--with-bank",
        action="store_true",
        help="Also write the built-in questions as an editable JSONL bank.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _format_created(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    config_path = layout.path_for("config") / CONFIG_FILENAME
    bank_path = layout.path_for("config") / BANK_FILENAME
    config_status = "exists"
    bank_status = None
    try:
        if args.force or not config_path.exists():
            write_template(
                config_path,
                overwrite=True,
                bank=BANK_FILENAME if args.with_bank else None,
            )
            config_status = "written"
        if args.with_bank:
            if bank_path.exists() and not args.force:
                bank_status = "exists"
            else:
                write_question_bank(bank_path, DEFAULT_QUESTIONS)
                bank_status = "written"
    except (QuizConfigError, QuestionBankError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    if args.quiet:
        return 0

    lines = [
        f"Workspace ready at {layout.home} "
        f"({_format_created(layout.created, 'home')})"
    ]
    width = max(len(name) for name in layout.directories)
    for name, directory in layout.items():
        status = _format_created(layout.created, name)
        lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    lines.append(f"Config: {config_path} ({config_status})")
    if bank_status:
        lines.append(f"Bank:   {bank_path} ({bank_status})")
        if config_status == "exists":
            lines.append(
                f"  Set quiz.bank = '{BANK_FILENAME}' in {config_path} "
                "to use it."
            )
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
