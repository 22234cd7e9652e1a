"""
In-process publish/subscribe for logging side effects.

Handlers run synchronously in emit order. Nothing downstream changes API behaviour:
a failing handler is logged and the remaining handlers still run.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.schemas.envelope import utc_timestamp

if TYPE_CHECKING:
    from app.core.context import RequestContext

logger = logging.getLogger(__name__)

# Subscribing to this receives every event.
ALL_EVENTS = "*"


class EventType:
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"
    DATA_FETCHED = "data.fetched"
    ERROR_OCCURRED = "error.occurred"
    API_REQUEST = "api.request"
    API_RESPONSE = "api.response"
    AUTH_ATTEMPT = "auth.attempt"
    AUTH_LOGIN = "auth.login"
    AUTH_LOGOUT = "auth.logout"


@dataclass(frozen=True)
class EventPayload:
    type: str
    data: Any
    timestamp: str = field(default_factory=utc_timestamp)
    source: str = "api"
    correlation_id: str | None = None


EventHandler = Callable[[EventPayload], None]


def _matches(pattern: str, event_type: str) -> bool:
    """'*' matches everything; 'user.*' matches one trailing segment; otherwise exact."""
    if pattern == ALL_EVENTS or pattern == event_type:
        return True
    if pattern.endswith(".*"):
        prefix = pattern[:-1]
        return event_type.startswith(prefix) and "." not in event_type[len(prefix) :]
    return False


class EventBus:
    """Synchronous callback registry keyed by event type or pattern."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._handlers[event_type]

    def listener_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, ()))

    def active_events(self) -> list[str]:
        return [name for name, handlers in self._handlers.items() if handlers]

    def clear(self) -> None:
        self._handlers.clear()

    def emit(
        self,
        event_type: str,
        data: Any = None,
        context: RequestContext | None = None,
    ) -> EventPayload:
        payload = EventPayload(
            type=event_type,
            data=data,
            correlation_id=context.request_id if context is not None else None,
        )
        logger.debug("Event emitted: %s", event_type, extra={"operation": "event_emission"})
        for pattern, handlers in list(self._handlers.items()):
            if not _matches(pattern, event_type):
                continue
            for handler in list(handlers):
                try:
                    handler(payload)
                except Exception:
                    logger.exception(
                        "Event handler failed for %s",
                        event_type,
                        extra={"operation": "event_bus_error"},
                    )
        return payload


def _entity_id(data: Any, key: str) -> Any:
    if isinstance(data, dict):
        return data.get(key)
    return getattr(data, key, None)


def register_logging_listeners(bus: EventBus) -> None:
    """Subscribe the application's log listeners (domain events and errors)."""

    def on_user_created(payload: EventPayload) -> None:
        logger.info(
            "User created: %s",
            _entity_id(payload.data, "id"),
            extra={"operation": "event_handling"},
        )

    def on_user_updated(payload: EventPayload) -> None:
        logger.info(
            "User updated: %s",
            _entity_id(payload.data, "id"),
            extra={"operation": "event_handling"},
        )

    def on_user_deleted(payload: EventPayload) -> None:
        logger.info(
            "User deleted: %s",
            _entity_id(payload.data, "userId"),
            extra={"operation": "event_handling"},
        )

    def on_data_fetched(payload: EventPayload) -> None:
        logger.info(
            "Data fetched: %s count=%s",
            _entity_id(payload.data, "dataType"),
            _entity_id(payload.data, "count"),
            extra={"operation": "event_handling"},
        )

    def on_error(payload: EventPayload) -> None:
        logger.error(
            "Error event: %s",
            _entity_id(payload.data, "message"),
            extra={"operation": "event_handling"},
        )

    bus.subscribe(EventType.USER_CREATED, on_user_created)
    bus.subscribe(EventType.USER_UPDATED, on_user_updated)
    bus.subscribe(EventType.USER_DELETED, on_user_deleted)
    bus.subscribe(EventType.DATA_FETCHED, on_data_fetched)
    bus.subscribe(EventType.ERROR_OCCURRED, on_error)


event_bus = EventBus()
