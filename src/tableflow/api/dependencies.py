from __future__ import annotations

from opentelemetry import trace

from tableflow.api.middleware.request_id import get_request_id
from tableflow.application.lifecycle import OrderTableManager
from tableflow.application.use_cases.context import TraceContext
from tableflow.infrastructure.db.unit_of_work import sqlalchemy_uow_factory
from tableflow.infrastructure.messaging.redis_publisher import build_event_publisher


def _current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def get_manager() -> OrderTableManager:
    return OrderTableManager(
        uow_factory=sqlalchemy_uow_factory(),
        publisher=build_event_publisher(),
    )


def current_trace_context() -> TraceContext:
    return TraceContext(trace_id=_current_trace_id(), request_id=get_request_id())
