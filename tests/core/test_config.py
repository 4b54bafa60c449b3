from __future__ import annotations

from pathlib import Path

import pytest

from geoquiz.core import config as core_config


def test_load_toml_reads_tables(tmp_path: Path) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text("[quiz]\nmax_cheats = 2\n", encoding="utf-8")

    assert core_config.load_toml(path) == {"quiz": {"max_cheats": 2}}


def test_load_toml_wraps_io_and_parse_errors(tmp_path: Path) -> None:
    with pytest.raises(core_config.TomlConfigError, match="not found"):
        core_config.load_toml(tmp_path / "missing.toml")

    with pytest.raises(core_config.TomlConfigError, match="Unable to read"):
        core_config.load_toml(tmp_path)

    broken = tmp_path / "broken.toml"
    broken.write_text("[quiz\n", encoding="utf-8")
    with pytest.raises(core_config.TomlConfigError, match="Failed to parse"):
        core_config.load_toml(broken)


def test_apply_overrides_returns_copy() -> None:
    defaults = {
        "quiz": {"max_cheats": 3, "bank": ""},
        "logging": {"level": "X"},
    }

    merged = core_config.apply_overrides(
        defaults, {"quiz": {"max_cheats": 1}}
    )

    assert merged == {
        "quiz": {"max_cheats": 1, "bank": ""},
        "logging": {"level": "X"},
    }
    assert defaults["quiz"]["max_cheats"] == 3


def test_apply_overrides_rejects_unknown_and_shape_errors() -> None:
    defaults = {"quiz": {"max_cheats": 3}}

    with pytest.raises(core_config.TomlConfigError, match="'extra'"):
        core_config.apply_overrides(defaults, {"extra": 1})
    with pytest.raises(core_config.TomlConfigError, match="'quiz.nope'"):
        core_config.apply_overrides(defaults, {"quiz": {"nope": 1}})
    with pytest.raises(core_config.TomlConfigError, match="Expected table"):
        core_config.apply_overrides(defaults, {"quiz": []})
