from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

DEFAULT_CURRENCY = "BRL"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def default_currency() -> str:
    """ISO code stamped on prices and totals; TABLEFLOW_CURRENCY overrides BRL."""
    return os.getenv("TABLEFLOW_CURRENCY", DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY


def _engine_options(database_url: str, connect_timeout: int) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        # sqlite3 names its lock wait "timeout" and has no server to pre-ping.
        return {"connect_args": {"timeout": connect_timeout}}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "connect_args": {"connect_timeout": connect_timeout},
    }


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    return create_engine(database_url, **_engine_options(database_url, connect_timeout))


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    connect_timeout = max(1, int(timeout_seconds))
    return _build_engine(_database_url(), connect_timeout)


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError):
        return False
    return True
