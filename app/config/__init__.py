"""Application-wide configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "app.json"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_FILE_NAME = "server.jar"
_DEFAULT_CHECKSUM_FILE = "checksum.txt"
_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class OutputConfig:
    """Default names for the installed server file and its checksum record."""

    file_name: str
    checksum_file: str


@dataclass(frozen=True)
class HttpConfig:
    """Settings applied to every request issued by the providers."""

    user_agent: str
    timeout_seconds: float


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the updater."""

    output: OutputConfig
    http: HttpConfig


def get_app_config() -> AppConfig:
    """Return the cached application configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    output_section = data.get("output") if isinstance(data, Mapping) else None
    http_section = data.get("http") if isinstance(data, Mapping) else None
    return AppConfig(
        output=_parse_output_section(output_section),
        http=_parse_http_section(http_section),
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_output_section(section: Mapping[str, Any] | None) -> OutputConfig:
    if not isinstance(section, Mapping):
        return OutputConfig(file_name=_DEFAULT_FILE_NAME, checksum_file=_DEFAULT_CHECKSUM_FILE)
    file_name = _coerce_file_name(section.get("file_name"), default=_DEFAULT_FILE_NAME)
    checksum_file = _coerce_file_name(section.get("checksum_file"), default=_DEFAULT_CHECKSUM_FILE)
    return OutputConfig(file_name=file_name, checksum_file=checksum_file)


def _parse_http_section(section: Mapping[str, Any] | None) -> HttpConfig:
    if not isinstance(section, Mapping):
        return HttpConfig(user_agent=_DEFAULT_USER_AGENT, timeout_seconds=_DEFAULT_TIMEOUT_SECONDS)
    user_agent = section.get("user_agent")
    if not isinstance(user_agent, str) or not user_agent.strip():
        user_agent = _DEFAULT_USER_AGENT
    timeout = _coerce_positive_float(section.get("timeout_seconds"), default=_DEFAULT_TIMEOUT_SECONDS)
    return HttpConfig(user_agent=user_agent.strip(), timeout_seconds=timeout)


def _coerce_file_name(value: Any, *, default: str) -> str:
    if not isinstance(value, str):
        return default
    cleaned = value.strip()
    return cleaned or default


def _coerce_positive_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not isfinite(candidate) or candidate <= 0:
        return default
    return candidate
