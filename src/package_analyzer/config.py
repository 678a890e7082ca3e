"""Configuration loader for the package analyzer.

Settings come from a JSON file (explicit path, or the path named by
``PACKAGE_ANALYZER_CONFIG``); without either, built-in defaults apply. The file
is validated against ``SETTINGS_SCHEMA`` before use.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .parsers.package_lock import DEFAULT_MAX_DEPTH

CONFIG_PATH_ENV_VAR = "PACKAGE_ANALYZER_CONFIG"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org/"
DEFAULT_USER_AGENT = "package-analyzer (+https://registry.npmjs.org/)"

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "registryUrl": {"type": "string", "pattern": "^https?://"},
        "requestTimeout": {"type": "number", "exclusiveMinimum": 0},
        "maxWorkers": {"type": "integer", "minimum": 1, "maximum": 64},
        "retryAttempts": {"type": "integer", "minimum": 1, "maximum": 10},
        "retryWait": {"type": "number", "minimum": 0},
        "maxDepth": {"type": "integer", "minimum": 1, "maximum": 500},
        "userAgent": {"type": "string", "minLength": 1},
    },
}

_FIELD_NAMES = {
    "registryUrl": "registry_url",
    "requestTimeout": "request_timeout",
    "maxWorkers": "max_workers",
    "retryAttempts": "retry_attempts",
    "retryWait": "retry_wait",
    "maxDepth": "max_depth",
    "userAgent": "user_agent",
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Registry and parsing settings."""

    registry_url: str = DEFAULT_REGISTRY_URL
    request_timeout: float = 10.0
    max_workers: int = 8
    retry_attempts: int = 3
    retry_wait: float = 1.0
    max_depth: int = DEFAULT_MAX_DEPTH
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a validated camelCase mapping."""
        values = {_FIELD_NAMES[key]: value for key, value in data.items()}
        settings = replace(cls(), **values)
        if not settings.registry_url.endswith("/"):
            settings = replace(settings, registry_url=settings.registry_url + "/")
        return settings


def _format_errors(errors: list) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"{pointer or '<root>'}: {error.message}")
    return "; ".join(messages)


def validate_settings_data(data: Any) -> None:
    """Raise ConfigError if ``data`` does not match ``SETTINGS_SCHEMA``."""
    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        raise ConfigError(f"Invalid configuration: {_format_errors(errors)}")


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. PACKAGE_ANALYZER_CONFIG environment variable
    3. None (use defaults)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Optional path to the config file. If not provided, uses the
            PACKAGE_ANALYZER_CONFIG env var or falls back to defaults.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return Settings()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    validate_settings_data(data)
    return Settings.from_dict(data)
