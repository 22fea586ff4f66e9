from __future__ import annotations

from fastapi import APIRouter, Response, status

from tableflow.infrastructure.db.session import ping_database
from tableflow.infrastructure.messaging.redis_client import ping_redis, redis_configured

router = APIRouter(tags=["health"])

_PROBE_TIMEOUT_SECONDS = 1.0


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    """Database is always required; Redis only when event publishing is configured."""
    checks: dict[str, object] = {"database": ping_database(timeout_seconds=_PROBE_TIMEOUT_SECONDS)}
    if redis_configured():
        checks["redis"] = ping_redis(timeout_seconds=_PROBE_TIMEOUT_SECONDS)
    else:
        checks["redis"] = "disabled"

    if all(result is not False for result in checks.values()):
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
