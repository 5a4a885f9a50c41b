"""Application configuration resolved from defaults, environment and CLI."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, get_args, get_origin, get_type_hints

__all__ = ["AppConfig", "ConfigLoader", "coerce_overrides", "parse_bool"]

LOGGER = logging.getLogger(__name__)
_ENV_PREFIX = "BUFFMONSTER_"
_ENV_OVERRIDES: Mapping[str, str] = {
    "BUFFMONSTER_STATE_PATH": "state_path",
    "BUFFMONSTER_BACKUP_PATH": "backup_path",
    "BUFFMONSTER_COLOR_POLICY": "color_policy",
    "BUFFMONSTER_COLOR_SEED": "color_seed",
    "BUFFMONSTER_SAVE_RETRIES": "save_retries",
    "BUFFMONSTER_DEBUG": "debug_logging",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Where the document lives and how new tags get their colors."""

    state_path: Path = Path("buffmonster_state.json")
    backup_path: Path = Path("backup.txt")
    color_policy: str = "palette"
    color_seed: int | None = None
    save_retries: int = 3
    debug_logging: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = str(value) if isinstance(value, Path) else value
        return payload


class ConfigLoader:
    """Layer environment variables and explicit overrides on top of defaults."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> AppConfig:
        config = AppConfig()
        env_values: Dict[str, str] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            raw = self._environ.get(env_name)
            if raw is None or not raw.strip():
                continue
            env_values[field_name] = raw
        if env_values:
            try:
                config = replace(config, **coerce_overrides(env_values))
            except ValueError as exc:
                LOGGER.warning("Ignoring invalid environment configuration: %s", exc)
        if overrides:
            config = replace(config, **overrides)
        return config

    def active_env_overrides(self) -> list[str]:
        return sorted(name for name in self._environ if name.startswith(_ENV_PREFIX))


def coerce_overrides(items: Mapping[str, str]) -> Dict[str, Any]:
    """Convert raw ``{field: text}`` pairs into typed :class:`AppConfig` values."""

    known = {item.name for item in fields(AppConfig)}
    type_hints = get_type_hints(AppConfig)
    coerced: Dict[str, Any] = {}
    for key, raw_value in items.items():
        name = key.strip()
        if not name:
            raise ValueError("Override is missing a field name.")
        if name not in known:
            raise ValueError(f"Unknown setting '{name}'.")
        coerced[name] = _coerce_value(type_hints[name], str(raw_value).strip())
    return coerced


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    origin = get_origin(annotation)
    optional = False
    if origin is not None:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        optional = len(args) != len(get_args(annotation))
        annotation = args[0] if args else annotation
    if optional and raw_value.lower() in {"", "none", "null"}:
        return None
    if annotation is bool:
        return parse_bool(raw_value)
    if annotation is int:
        try:
            return int(raw_value, 10)
        except ValueError as exc:
            raise ValueError(f"Cannot coerce '{raw_value}' to an integer.") from exc
    if annotation is Path:
        return Path(raw_value).expanduser()
    return raw_value


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")
