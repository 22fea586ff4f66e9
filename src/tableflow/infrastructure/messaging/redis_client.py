from __future__ import annotations

import os
from functools import lru_cache

import redis


def redis_url() -> str | None:
    return os.getenv("REDIS_URL", "").strip() or None


def redis_configured() -> bool:
    """Event publishing is switched on by the presence of REDIS_URL."""
    return redis_url() is not None


@lru_cache(maxsize=8)
def _build_client(url: str, timeout_seconds: float) -> redis.Redis:
    # Envelopes are JSON text; decoded replies keep subscribers free of bytes handling.
    return redis.Redis.from_url(
        url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
        decode_responses=True,
        health_check_interval=30,
    )


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    url = redis_url()
    if url is None:
        raise RuntimeError("REDIS_URL is not set")
    return _build_client(url, timeout_seconds)


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError):
        return False
