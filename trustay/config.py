from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class Settings:
    api_base_url: str = field(default_factory=lambda: _get_env("TRUSTAY_API_URL", "http://localhost:3000"))
    request_timeout_seconds: float = field(default_factory=lambda: _get_float("TRUSTAY_REQUEST_TIMEOUT", 10.0))
    user_agent: str = field(default_factory=lambda: _get_env("TRUSTAY_USER_AGENT", "Trustay-Client/1.0"))
    access_token: str | None = field(default_factory=lambda: _get_env("TRUSTAY_ACCESS_TOKEN"))

    state_database_url: str = field(
        default_factory=lambda: _get_env("TRUSTAY_STATE_DATABASE_URL", "sqlite:///./trustay-state.db")
    )
    state_namespace: str = field(default_factory=lambda: _get_env("TRUSTAY_STATE_NAMESPACE", "trustay"))

    default_page_size: int = field(default_factory=lambda: _get_int("TRUSTAY_PAGE_SIZE", 20))
    featured_limit: int = field(default_factory=lambda: _get_int("TRUSTAY_FEATURED_LIMIT", 4))
    pdf_retry_delay_seconds: float = field(default_factory=lambda: _get_float("TRUSTAY_PDF_RETRY_DELAY", 1.0))

    log_dir: str | None = field(default_factory=lambda: _get_env("TRUSTAY_LOG_DIR"))
    log_level: str = field(default_factory=lambda: _get_env("TRUSTAY_LOG_LEVEL", "INFO"))


_settings: Settings | None = None
_runtime_overrides: dict[str, Any] = {}


def _apply_runtime_overrides(settings: Settings) -> None:
    if not _runtime_overrides:
        return
    for key, value in _runtime_overrides.items():
        if value is None:
            continue
        if hasattr(settings, key):
            setattr(settings, key, value)


def update_runtime_overrides(overrides: dict[str, Any]) -> None:
    if not overrides:
        return
    for key, value in overrides.items():
        if value is None:
            continue
        _runtime_overrides[key] = value
    if _settings is not None:
        _apply_runtime_overrides(_settings)


def clear_runtime_overrides() -> None:
    _runtime_overrides.clear()


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


def refresh_settings() -> Settings:
    """Rebuild settings from environment variables."""
    global _settings
    _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


__all__ = [
    "Settings",
    "get_settings",
    "refresh_settings",
    "update_runtime_overrides",
    "clear_runtime_overrides",
]
