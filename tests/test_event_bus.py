"""Unit tests for app.services.event_bus: subscribe, patterns, failure isolation."""

import unittest

from app.core.context import RequestContext
from app.services.event_bus import (
    ALL_EVENTS,
    EventBus,
    EventType,
    register_logging_listeners,
)


class TestEventBus(unittest.TestCase):

    def setUp(self) -> None:
        self.bus = EventBus()
        self.received: list[tuple[str, object]] = []

    def _record(self, tag: str):
        def handler(payload) -> None:
            self.received.append((tag, payload.type))

        return handler

    def test_exact_subscription(self) -> None:
        self.bus.subscribe(EventType.USER_CREATED, self._record("exact"))
        self.bus.emit(EventType.USER_CREATED, {"id": "user_1"})
        self.bus.emit(EventType.USER_DELETED, {"userId": "user_1"})
        self.assertEqual(self.received, [("exact", "user.created")])

    def test_segment_wildcard(self) -> None:
        self.bus.subscribe("user.*", self._record("users"))
        self.bus.emit(EventType.USER_CREATED)
        self.bus.emit(EventType.USER_UPDATED)
        self.bus.emit(EventType.AUTH_LOGIN)
        self.bus.emit("user.created.extra")
        self.assertEqual(self.received, [("users", "user.created"), ("users", "user.updated")])

    def test_catch_all(self) -> None:
        self.bus.subscribe(ALL_EVENTS, self._record("all"))
        self.bus.emit(EventType.API_REQUEST)
        self.bus.emit(EventType.AUTH_LOGOUT)
        self.assertEqual(len(self.received), 2)

    def test_failing_handler_does_not_stop_others(self) -> None:
        def broken(payload) -> None:
            raise RuntimeError("listener bug")

        self.bus.subscribe(EventType.DATA_FETCHED, broken)
        self.bus.subscribe(EventType.DATA_FETCHED, self._record("after"))
        with self.assertLogs("app.services.event_bus", level="ERROR"):
            self.bus.emit(EventType.DATA_FETCHED, {"count": 1})
        self.assertEqual(self.received, [("after", "data.fetched")])

    def test_unsubscribe(self) -> None:
        handler = self._record("gone")
        self.bus.subscribe(EventType.USER_UPDATED, handler)
        self.assertEqual(self.bus.listener_count(EventType.USER_UPDATED), 1)
        self.bus.unsubscribe(EventType.USER_UPDATED, handler)
        self.bus.emit(EventType.USER_UPDATED)
        self.assertEqual(self.received, [])
        self.assertNotIn(EventType.USER_UPDATED, self.bus.active_events())

    def test_payload_carries_correlation_id(self) -> None:
        context = RequestContext(request_id="req_test", method="GET", path="/x")
        payload = self.bus.emit(EventType.API_RESPONSE, {"statusCode": 200}, context)
        self.assertEqual(payload.correlation_id, "req_test")
        self.assertEqual(payload.source, "api")
        self.assertEqual(payload.data, {"statusCode": 200})
        self.assertTrue(payload.timestamp.endswith("Z"))


class TestLoggingListeners(unittest.TestCase):

    def test_user_events_log_entity_ids(self) -> None:
        bus = EventBus()
        register_logging_listeners(bus)
        with self.assertLogs("app.services.event_bus", level="INFO") as logs:
            bus.emit(EventType.USER_CREATED, {"id": "user_11"})
            bus.emit(EventType.USER_UPDATED, {"id": "user_2"})
            bus.emit(EventType.USER_DELETED, {"userId": "user_3"})
        self.assertEqual(
            [r.getMessage() for r in logs.records],
            ["User created: user_11", "User updated: user_2", "User deleted: user_3"],
        )
        self.assertTrue(all(r.operation == "event_handling" for r in logs.records))


if __name__ == "__main__":
    unittest.main()
