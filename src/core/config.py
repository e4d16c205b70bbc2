"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI.
- Lets adapters (HTTP proxy) read the same configuration contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

APP_NAME = "espresso-idling"
ENV_PREFIX = "ESPRESSO_IDLING_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write/update variables in the user's global .env file.

    `None` values are skipped so an unanswered prompt keeps the stored value.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = [f"# {APP_NAME} user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated at the edge (env vars) without polluting the core.
    - A single configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config, which overrides it.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    server_url: str = Field(
        default="http://127.0.0.1:6791",
        min_length=8,
        description="Base URL of the Espresso instrumentation server.",
    )
    session_id: str | None = Field(
        default=None,
        description="Active session id; requests are prefixed with /session/<id> when set.",
    )
    http_timeout_seconds: float = Field(
        default=240.0,
        gt=0,
        description="Per-request timeout (seconds). Also bounds ui_thread_sync.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/0.1",
        min_length=1,
        description="User-Agent sent to the instrumentation server.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level used by the CLI.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("server_url")
    @classmethod
    def _check_server_url(cls, value: str) -> str:
        url = value.strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError("server_url must start with http:// or https://")
        return url


def load_settings() -> AppSettings:
    """Build settings for the CLI.

    The env files are resolved at call time, so a changed working directory or
    XDG_CONFIG_HOME is honored. Invalid values surface as `ConfigurationError`.
    """

    try:
        return AppSettings(_env_file=(".env", str(get_user_env_file())))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid settings: {problems}") from exc
