from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/moodnotes/config.json").expanduser()
DEFAULT_CACHE_DIR = "~/.moodnotes"
DEFAULT_PAGE_SIZE = 10

LOCAL_STORE_LIFECYCLES = ("persist", "clear_on_start")
RETREAT_STRATEGIES = ("cursor_history", "restart")

CONFIG_ENV_OVERRIDES = {
    "remote_endpoint": "MOODNOTES_REMOTE_ENDPOINT",
    "remote_api_key": "MOODNOTES_REMOTE_API_KEY",
    "remote_timeout_s": "MOODNOTES_REMOTE_TIMEOUT_S",
    "page_size": "MOODNOTES_PAGE_SIZE",
    "cache_dir": "MOODNOTES_CACHE_DIR",
    "local_store_lifecycle": "MOODNOTES_LOCAL_STORE_LIFECYCLE",
    "retreat_strategy": "MOODNOTES_RETREAT_STRATEGY",
    "show_samples": "MOODNOTES_SHOW_SAMPLES",
}

_INT_KEYS = {"page_size"}
_FLOAT_KEYS = {"remote_timeout_s"}
_BOOL_KEYS = {"show_samples"}
_CHOICE_KEYS = {
    "local_store_lifecycle": LOCAL_STORE_LIFECYCLES,
    "retreat_strategy": RETREAT_STRATEGIES,
}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("MOODNOTES_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    """Return the raw settings object, or ``{}`` when no config file exists."""

    config_path = get_config_path(path)
    try:
        raw = config_path.read_text(encoding="utf-8") if config_path.exists() else ""
    except OSError as exc:
        raise ValueError(f"config unreadable: {config_path}") from exc
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid config json: {config_path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"config must be an object: {config_path}")
    return data


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass(frozen=True)
class RemoteConfig:
    """Connection settings for one remote GraphQL endpoint."""

    endpoint: str = ""
    api_key: str = ""
    timeout_s: float = 5.0
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def configured(self) -> bool:
        return bool(self.endpoint.strip())


@dataclass
class MoodNotesConfig:
    remote_endpoint: str = ""
    remote_api_key: str = ""
    remote_timeout_s: float = 5.0
    page_size: int = DEFAULT_PAGE_SIZE
    cache_dir: str = DEFAULT_CACHE_DIR

    # "persist" keeps queued notes across restarts; "clear_on_start" empties
    # the fallback slot whenever a store is opened.
    local_store_lifecycle: str = "persist"
    retreat_strategy: str = "cursor_history"
    show_samples: bool = False

    def remote_config(self) -> RemoteConfig:
        return RemoteConfig(
            endpoint=self.remote_endpoint,
            api_key=self.remote_api_key,
            timeout_s=self.remote_timeout_s,
            page_size=self.page_size,
        )

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir).expanduser()


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    if value.lower() in {"1", "true", "yes", "on"}:
        return True
    if value.lower() in {"0", "false", "off", "no"}:
        return False
    return default


def _parse_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    if parsed <= 0:
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    return parsed


def _parse_float(value: object, default: float, *, key: str) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    if parsed <= 0:
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    return parsed


def _coerce_bool(value: object, default: bool, *, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return _parse_bool(value, default)
    warnings.warn(f"Invalid bool for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_choice(value: object, default: str, *, key: str) -> str:
    if value is None:
        return default
    choices = _CHOICE_KEYS[key]
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    warnings.warn(
        f"Invalid value for {key}: {value!r} (expected one of {', '.join(choices)})",
        RuntimeWarning,
        stacklevel=2,
    )
    return default


def load_config(path: Path | None = None) -> MoodNotesConfig:
    cfg = MoodNotesConfig()
    try:
        data = read_config_file(path)
    except ValueError as exc:
        warnings.warn(f"Ignoring config file: {exc}", RuntimeWarning, stacklevel=2)
        data = {}
    cfg = _apply_dict(cfg, data)
    cfg = _apply_dict(cfg, get_env_overrides())
    return cfg


def _apply_dict(cfg: MoodNotesConfig, data: dict[str, Any]) -> MoodNotesConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key in _INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        if key in _FLOAT_KEYS:
            setattr(cfg, key, _parse_float(value, getattr(cfg, key), key=key))
            continue
        if key in _BOOL_KEYS:
            setattr(cfg, key, _coerce_bool(value, getattr(cfg, key), key=key))
            continue
        if key in _CHOICE_KEYS:
            setattr(cfg, key, _coerce_choice(value, getattr(cfg, key), key=key))
            continue
        if value is None:
            continue
        setattr(cfg, key, str(value))
    return cfg
