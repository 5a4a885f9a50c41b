"""Tests for configuration layering."""

from __future__ import annotations

from pathlib import Path

import pytest

from buffmonster.services.config import AppConfig, ConfigLoader, coerce_overrides, parse_bool


def test_defaults_without_environment() -> None:
    config = ConfigLoader(environ={}).load()

    assert config == AppConfig()
    assert config.to_dict()["state_path"] == "buffmonster_state.json"


def test_environment_overrides_defaults(tmp_path: Path) -> None:
    environ = {
        "BUFFMONSTER_STATE_PATH": str(tmp_path / "state.json"),
        "BUFFMONSTER_COLOR_POLICY": "hsl",
        "BUFFMONSTER_COLOR_SEED": "42",
        "BUFFMONSTER_DEBUG": "yes",
        "BUFFMONSTER_SAVE_RETRIES": " ",
    }
    loader = ConfigLoader(environ=environ)

    config = loader.load()

    assert config.state_path == tmp_path / "state.json"
    assert config.color_policy == "hsl"
    assert config.color_seed == 42
    assert config.debug_logging is True
    assert config.save_retries == 3
    assert "BUFFMONSTER_DEBUG" in loader.active_env_overrides()


def test_explicit_overrides_win_over_environment() -> None:
    loader = ConfigLoader(environ={"BUFFMONSTER_COLOR_POLICY": "hsl"})

    config = loader.load(overrides={"color_policy": "palette"})

    assert config.color_policy == "palette"


def test_invalid_environment_values_are_ignored() -> None:
    config = ConfigLoader(environ={"BUFFMONSTER_SAVE_RETRIES": "many"}).load()

    assert config.save_retries == 3


def test_coerce_overrides_converts_types() -> None:
    coerced = coerce_overrides({"save_retries": "5", "color_seed": "none", "backup_path": "b.txt"})

    assert coerced == {"save_retries": 5, "color_seed": None, "backup_path": Path("b.txt")}


def test_coerce_overrides_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        coerce_overrides({"theme": "dark"})


@pytest.mark.parametrize(("raw", "expected"), [("on", True), ("False", False), (" 1 ", True)])
def test_parse_bool(raw: str, expected: bool) -> None:
    assert parse_bool(raw) is expected


def test_parse_bool_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_bool("maybe")
