"""
Process configuration read from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from fastapi import Request


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


LIBPQ_ONLY_OPTIONS = frozenset({"sslmode"})


def _strip_libpq_options(url: str) -> str:
    # asyncpg.connect refuses these query options.
    parts = urlsplit(url)
    options = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(key, value) for key, value in options if key not in LIBPQ_ONLY_OPTIONS]
    if len(kept) == len(options):
        return url
    return urlunsplit(parts._replace(query=urlencode(kept)))


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "recipes"
    database_url: str = ""
    auth_user: str = ""
    auth_password: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_command_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            db_host=_env_str("POSTGRES_HOST", "localhost"),
            db_user=_env_str("POSTGRES_USER", "postgres"),
            db_password=os.environ.get("POSTGRES_PASSWORD", ""),
            db_name=_env_str("POSTGRES_DB", "recipes"),
            database_url=_env_str("DATABASE_URL"),
            auth_user=os.environ.get("AUTH_USER", ""),
            auth_password=os.environ.get("AUTH_PASSWORD", ""),
            host=_env_str("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8080),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            db_pool_min_size=_env_int("DB_POOL_MIN_SIZE", 1),
            db_pool_max_size=_env_int("DB_POOL_MAX_SIZE", 5),
            db_command_timeout=_env_float("DB_COMMAND_TIMEOUT", 30.0),
        )

    def database_dsn(self) -> str:
        """
        Connection string for asyncpg.

        DATABASE_URL wins when set; otherwise the DSN is assembled from the
        POSTGRES_* parts.
        """
        if self.database_url:
            return _strip_libpq_options(self.database_url)

        credentials = quote(self.db_user, safe="")
        if self.db_password:
            credentials += ":" + quote(self.db_password, safe="")
        return f"postgresql://{credentials}@{self.db_host}/{quote(self.db_name, safe='')}"


def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings are not initialized. create_app() stores them on app.state.")
    return settings
