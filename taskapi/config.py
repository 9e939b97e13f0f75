"""Settings loaded from environment variables.

``main()`` loads an optional ``.env`` file before calling ``load_settings``;
nothing here reads the environment at import time.
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_JWT_SECRET = "todo-api-secret-key-change-in-production"

_DURATION_PART = re.compile(r"(\d+)(h|m|s)")
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the service."""

    host: str = "0.0.0.0"
    port: int = 3000
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    access_token_ttl: int = 15 * 60
    refresh_token_ttl: int = 7 * 24 * 3600
    jwt_issuer: str = "todo-api"
    environment: str = "development"
    log_level: str = "info"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    seed_demo_data: bool = True

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def parse_duration(raw: str) -> int | None:
    """Parse ``"900"``, ``"15m"`` or ``"1h30m"`` into seconds.

    Returns None when the value is not a valid duration.
    """
    raw = raw.strip()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    pos = 0
    total = 0
    for match in _DURATION_PART.finditer(raw):
        if match.start() != pos:
            return None
        total += int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos != len(raw):
        return None
    return total


def _get(env: Mapping[str, str], key: str, default: str) -> str:
    value = (env.get(key) or "").strip()
    return value or default


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _get_duration(env: Mapping[str, str], key: str, default: int) -> int:
    parsed = parse_duration(env.get(key) or "")
    return default if parsed is None else parsed


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = (env.get(key) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def _get_list(env: Mapping[str, str], key: str, default: list[str]) -> list[str]:
    raw = (env.get(key) or "").strip()
    if not raw:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from ``os.environ`` overlaid with ``env``."""
    e: dict[str, str] = dict(os.environ)
    if env:
        e.update(env)
    defaults = Settings()
    return Settings(
        host=_get(e, "SERVER_HOST", defaults.host),
        port=_get_int(e, "SERVER_PORT", defaults.port),
        jwt_secret_key=_get(e, "JWT_SECRET_KEY", defaults.jwt_secret_key),
        access_token_ttl=_get_duration(e, "JWT_ACCESS_TOKEN_TTL", defaults.access_token_ttl),
        refresh_token_ttl=_get_duration(e, "JWT_REFRESH_TOKEN_TTL", defaults.refresh_token_ttl),
        jwt_issuer=_get(e, "JWT_ISSUER", defaults.jwt_issuer),
        environment=_get(e, "APP_ENV", defaults.environment),
        log_level=_get(e, "LOG_LEVEL", defaults.log_level),
        cors_origins=_get_list(e, "CORS_ORIGINS", defaults.cors_origins),
        seed_demo_data=_get_bool(e, "SEED_DEMO_DATA", defaults.seed_demo_data),
    )


__all__ = ["Settings", "load_settings", "parse_duration"]
