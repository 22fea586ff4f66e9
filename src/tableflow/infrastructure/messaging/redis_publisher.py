from __future__ import annotations

import logging

from tableflow.application.ports.publisher import EventPublisher
from tableflow.infrastructure.messaging.redis_client import get_redis_client, redis_configured

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        receivers = get_redis_client(timeout_seconds=self._timeout_seconds).publish(
            channel, message
        )
        logger.debug("event_published", extra={"channel": channel, "receivers": receivers})


class NullEventPublisher(EventPublisher):
    """Used when no REDIS_URL is configured; events are dropped."""

    def publish(self, channel: str, message: str) -> None:
        logger.debug("event_dropped", extra={"channel": channel})


def build_event_publisher() -> EventPublisher:
    if redis_configured():
        return RedisEventPublisher()
    return NullEventPublisher()
