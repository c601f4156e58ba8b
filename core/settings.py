# core/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_DB_URL = "sqlite:///data/app.db"
DEFAULT_ADMIN_EMAIL = "admin@localhost"
DEFAULT_ADMIN_ROLES = ("superadmin",)

_TRUTHY = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class DBSettings:
    url: str = DEFAULT_DB_URL
    echo: bool = False


@dataclass(frozen=True)
class AdminSettings:
    """Session user used when the app runs without a login screen."""
    email: str = DEFAULT_ADMIN_EMAIL
    roles: Tuple[str, ...] = DEFAULT_ADMIN_ROLES


@dataclass(frozen=True)
class Settings:
    db: DBSettings = field(default_factory=DBSettings)
    admin: AdminSettings = field(default_factory=AdminSettings)
    log_level: str = "INFO"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_roles(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    roles = tuple(r.strip() for r in value.split(",") if r.strip())
    return roles or default


def load_settings() -> Settings:
    """
    Reads settings from the environment.
    - APP_DB_URL       SQLAlchemy URL of the document database
    - APP_DB_ECHO      echo SQL statements (true/false)
    - APP_ADMIN_EMAIL  email of the session user
    - APP_ADMIN_ROLES  comma separated roles of the session user
    - APP_LOG_LEVEL    logging level name
    """
    return Settings(
        db=DBSettings(
            url=os.getenv("APP_DB_URL") or DEFAULT_DB_URL,
            echo=_env_flag("APP_DB_ECHO"),
        ),
        admin=AdminSettings(
            email=(os.getenv("APP_ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL).strip().lower(),
            roles=_env_roles("APP_ADMIN_ROLES", DEFAULT_ADMIN_ROLES),
        ),
        log_level=(os.getenv("APP_LOG_LEVEL") or "INFO").strip().upper(),
    )
