"""TOML reading and default layering shared by geoquiz commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover
    raise RuntimeError("Python 3.11+ is required for tomllib.") from exc

__all__ = [
    "TomlConfigError",
    "apply_overrides",
    "load_toml",
]

ConfigTree = dict[str, dict[str, Any]]


class TomlConfigError(RuntimeError):
    """Raised when a TOML config cannot be read or fails validation."""


def load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise TomlConfigError(f"Unable to read config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def apply_overrides(
    defaults: Mapping[str, Mapping[str, Any]], override: Mapping[str, Any]
) -> ConfigTree:
    """Return a copy of ``defaults`` with ``override`` laid over it.

    Configs are one level of tables holding scalar values. Any table or key
    missing from ``defaults`` is rejected so typos do not pass silently.
    """

    merged: ConfigTree = {
        section: dict(values) for section, values in defaults.items()
    }
    for section, values in override.items():
        if section not in merged:
            raise TomlConfigError(f"Unknown configuration key '{section}'.")
        if not isinstance(values, Mapping):
            raise TomlConfigError(
                f"Expected table for '{section}', found "
                f"{type(values).__name__}."
            )
        for key, value in values.items():
            if key not in merged[section]:
                raise TomlConfigError(
                    f"Unknown configuration key '{section}.{key}'."
                )
            merged[section][key] = value
    return merged
