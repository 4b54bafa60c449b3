"""Configuration loader for quiz sessions."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Mapping, Optional

from geoquiz.core import config as core_config
from geoquiz.core import workspace as workspace_mod

from .cheat import DEFAULT_MAX_CHEATS

CONFIG_FILENAME = "geoquiz.toml"
CONFIG_ENV = "GEOQUIZ_CONFIG"
ENV_PREFIX = "GEOQUIZ_"

_DEFAULTS = {
    "quiz": {"max_cheats": DEFAULT_MAX_CHEATS, "bank": ""},
    "session": {"name": "default", "autosave": True},
    "logging": {"level": "INFO"},
}


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for a quiz run."""

    max_cheats: int
    bank: Optional[Path]
    session_name: str
    autosave: bool
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of env and file options."""

    max_cheats: Optional[int] = None
    bank: Optional[Path] = None
    session_name: Optional[str] = None
    autosave: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults.

    A missing default config file is fine; a config file named explicitly
    (``config_path`` or ``GEOQUIZ_CONFIG``) must exist.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    explicit = config_path is not None or bool(
        (env_map.get(CONFIG_ENV) or "").strip()
    )
    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = core_config.apply_overrides(_DEFAULTS, {})
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            table = core_config.apply_overrides(
                _DEFAULTS, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit:
        raise QuizConfigError(f"Config file not found: {requested}")

    max_cheats = _resolve_max_cheats(
        _pick_first(
            overrides.max_cheats,
            _parse_env_string(env_map, "MAX_CHEATS"),
            table["quiz"]["max_cheats"],
        )
    )
    # Flag and env paths are relative to the shell; file paths to the file.
    bank_choice = _pick_first(
        overrides.bank, _parse_env_string(env_map, "BANK")
    )
    if bank_choice is not None:
        bank = _resolve_bank(bank_choice, base=Path.cwd())
    else:
        bank = _resolve_bank(
            table["quiz"]["bank"],
            base=loaded_path.parent if loaded_path else layout.home,
        )
    session_name = _resolve_string(
        _pick_first(
            overrides.session_name,
            _parse_env_string(env_map, "SESSION_NAME"),
            table["session"]["name"],
        ),
        "session.name",
    )
    autosave = _pick_first(overrides.autosave, table["session"]["autosave"])
    if not isinstance(autosave, bool):
        raise QuizConfigError("session.autosave must be a boolean.")
    log_level = _resolve_string(
        _pick_first(
            overrides.log_level,
            _parse_env_string(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        ),
        "logging.level",
    ).upper()

    config = QuizConfig(
        max_cheats=max_cheats,
        bank=bank,
        session_name=session_name,
        autosave=autosave,
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def config_template(*, bank: Optional[str] = None) -> str:
    """Return the packaged ``geoquiz.toml``, optionally naming ``bank``."""

    text = (
        resources.files(__package__)
        .joinpath(CONFIG_FILENAME)
        .read_text(encoding="utf-8")
    )
    if bank:
        text = text.replace('bank = ""', f"bank = {json.dumps(bank)}", 1)
    return text


def write_template(
    path: Path,
    *,
    overwrite: bool = False,
    bank: Optional[str] = None,
    mode: int = 0o600,
) -> Path:
    """Write the default config to ``path`` unless it already exists."""

    if path.exists() and not overwrite:
        raise QuizConfigError(f"Config already exists: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config_template(bank=bank), encoding="utf-8")
    except OSError as exc:
        raise QuizConfigError(f"Unable to write config {path}: {exc}") from exc
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_max_cheats(value: object) -> int:
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as exc:
            raise QuizConfigError(
                f"quiz.max_cheats must be an integer, got '{value}'."
            ) from exc
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizConfigError("quiz.max_cheats must be an integer.")
    if value < 0:
        raise QuizConfigError("quiz.max_cheats must be >= 0.")
    return value


def _resolve_bank(value: object, *, base: Path) -> Optional[Path]:
    if isinstance(value, Path):
        candidate = value
    elif isinstance(value, str):
        if not value.strip():
            return None
        candidate = Path(value.strip())
    else:
        raise QuizConfigError("quiz.bank must be a string path.")
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()


def _resolve_string(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw.strip() or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
