from __future__ import annotations

from typing import Protocol

LIFECYCLE_CHANNEL = "events:tables"


class EventPublisher(Protocol):
    def publish(self, channel: str, message: str) -> None: ...
