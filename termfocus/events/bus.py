"""Event bus for decoupled component communication.

Usage:
    bus = EventBus()

    def on_screen(event):
        print(f"Screen activated: {event.data['screen'].name}")

    bus.subscribe("screen.activated", on_screen, priority=10)
    bus.publish("screen.activated", {"screen": screen})

Handlers run synchronously, highest priority first. A handler that raises is
logged and skipped; it never reaches the publisher.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
import inspect
import logging
import threading
from types import MappingProxyType
from typing import Any
import uuid

from ..error_reporting import ErrorReporter
from ..exceptions import InvalidArgumentError

LOGGER = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1000

EventHandler = Callable[["Event"], Any]
EventPredicate = Callable[["Event"], bool]


@dataclass(frozen=True)
class EventRecord:
    """Immutable record of one publish call.

    ``metadata`` is a read-only view; subscribers share it with history.
    """

    name: str
    data: Any
    metadata: Mapping[str, Any]
    timestamp: datetime
    source: str | None = None
    thread_id: int | None = None


@dataclass(frozen=True)
class Event:
    """Arguments handed to subscribers, derived from an ``EventRecord``."""

    name: str
    data: Any
    metadata: Mapping[str, Any]
    timestamp: datetime
    source: str | None
    record: EventRecord = field(repr=False, compare=False)

    @classmethod
    def from_record(cls, record: EventRecord) -> Event:
        return cls(
            name=record.name,
            data=record.data,
            metadata=record.metadata,
            timestamp=record.timestamp,
            source=record.source,
            record=record,
        )


@dataclass(frozen=True)
class Subscription:
    """A handler bound to one event name."""

    id: str
    event_name: str
    handler: EventHandler
    priority: int = 0
    remove_on_error: bool = False
    subscribed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class EventBus:
    """Publish/subscribe broker with priorities, history and optional queuing.

    Enables loose coupling between components by allowing them to
    communicate via events rather than direct method calls.
    """

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        reporter: ErrorReporter | None = None,
    ) -> None:
        if isinstance(history_size, bool) or not isinstance(history_size, int):
            raise InvalidArgumentError("history_size must be an integer.")
        if history_size < 1:
            raise InvalidArgumentError("history_size must be at least 1.")
        self._lock = threading.RLock()
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._history: deque[EventRecord] = deque(maxlen=history_size)
        self._queue: deque[EventRecord] | None = None
        self._reporter = reporter or ErrorReporter()
        self._reporter.attach(self)

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter

    @property
    def history_size(self) -> int:
        return self._history.maxlen or 0

    @property
    def is_queuing(self) -> bool:
        with self._lock:
            return self._queue is not None

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue) if self._queue is not None else 0

    # -- subscriptions -----------------------------------------------------

    def subscribe(
        self,
        event_name: str,
        handler: EventHandler,
        subscription_id: str | None = None,
        priority: int = 0,
        remove_on_error: bool = False,
    ) -> str:
        """Subscribe to an event.

        Args:
            event_name: Event to listen for (e.g., "screen.activated")
            handler: Callable invoked with an ``Event`` on each publish
            subscription_id: Stable id; an existing subscription with the
                same id for this event is replaced
            priority: Higher values are invoked first
            remove_on_error: Drop the subscription after its handler raises

        Returns:
            The effective subscription id.
        """
        with self._reporter.report("EventBus", "subscribe"):
            _require_event_name(event_name)
            if not callable(handler):
                raise InvalidArgumentError("handler must be callable.")
            if inspect.iscoroutinefunction(handler):
                raise InvalidArgumentError(
                    "handler must be synchronous; coroutine handlers are never awaited."
                )
            if subscription_id is not None and (
                not isinstance(subscription_id, str) or not subscription_id.strip()
            ):
                raise InvalidArgumentError("subscription_id must be a non-empty string.")
            if isinstance(priority, bool) or not isinstance(priority, int):
                raise InvalidArgumentError("priority must be an integer.")

        effective_id = subscription_id or uuid.uuid4().hex
        subscription = Subscription(
            id=effective_id,
            event_name=event_name,
            handler=handler,
            priority=priority,
            remove_on_error=bool(remove_on_error),
        )
        with self._lock:
            entries = self._subscriptions.setdefault(event_name, [])
            if any(entry.id == effective_id for entry in entries):
                LOGGER.warning(
                    "bus.subscription.replaced",
                    extra={
                        "event": "bus.subscription.replaced",
                        "component": "EventBus",
                        "context": "subscribe",
                        "event_name": event_name,
                        "subscription_id": effective_id,
                    },
                )
                entries[:] = [entry for entry in entries if entry.id != effective_id]
            entries.append(subscription)
            # list.sort is stable, so equal priorities keep subscribe order.
            entries.sort(key=lambda entry: -entry.priority)
        LOGGER.debug(
            "bus.subscribed",
            extra={
                "event": "bus.subscribed",
                "event_name": event_name,
                "subscription_id": effective_id,
                "priority": priority,
            },
        )
        return effective_id

    def unsubscribe(self, event_name: str, subscription_id: str) -> bool:
        """Remove a subscription; returns False (with a warning) when absent."""
        with self._reporter.report("EventBus", "unsubscribe"):
            _require_event_name(event_name)
        if self._discard(event_name, subscription_id):
            LOGGER.debug(
                "bus.unsubscribed",
                extra={
                    "event": "bus.unsubscribed",
                    "event_name": event_name,
                    "subscription_id": subscription_id,
                },
            )
            return True
        LOGGER.warning(
            "bus.subscription.missing",
            extra={
                "event": "bus.subscription.missing",
                "component": "EventBus",
                "context": "unsubscribe",
                "event_name": event_name,
                "subscription_id": subscription_id,
            },
        )
        return False

    def clear_subscriptions(self, event_name: str | None = None) -> None:
        """Clear subscribers.

        Args:
            event_name: Specific event to clear, or None for all
        """
        if event_name is None:
            with self._lock:
                self._subscriptions.clear()
            return
        with self._reporter.report("EventBus", "clear_subscriptions"):
            _require_event_name(event_name)
        with self._lock:
            self._subscriptions.pop(event_name, None)

    def get_subscriptions(self, event_name: str | None = None) -> list[Subscription]:
        if event_name is not None:
            with self._reporter.report("EventBus", "get_subscriptions"):
                _require_event_name(event_name)
        with self._lock:
            if event_name is not None:
                return list(self._subscriptions.get(event_name, ()))
            return [entry for entries in self._subscriptions.values() for entry in entries]

    def _discard(self, event_name: str, subscription_id: str) -> bool:
        with self._lock:
            entries = self._subscriptions.get(event_name)
            if not entries:
                return False
            remaining = [entry for entry in entries if entry.id != subscription_id]
            if len(remaining) == len(entries):
                return False
            if remaining:
                self._subscriptions[event_name] = remaining
            else:
                del self._subscriptions[event_name]
            return True

    # -- publishing --------------------------------------------------------

    def publish(
        self,
        event_name: str,
        data: Any = None,
        metadata: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> EventRecord:
        """Publish an event to all subscribers.

        Args:
            event_name: Event name
            data: Event payload
            metadata: Optional free-form metadata
            source: Optional publisher identifier

        Returns:
            The record appended to history.
        """
        with self._reporter.report("EventBus", "publish"):
            _require_event_name(event_name)
            if metadata is not None and not isinstance(metadata, dict):
                raise InvalidArgumentError("metadata must be a dict.")

        record = EventRecord(
            name=event_name,
            data=data,
            metadata=MappingProxyType(dict(metadata or {})),
            timestamp=datetime.now(timezone.utc),
            source=source,
            thread_id=threading.get_ident(),
        )
        with self._lock:
            self._history.append(record)
            if self._queue is not None:
                self._queue.append(record)
                LOGGER.debug(
                    "bus.event.queued",
                    extra={
                        "event": "bus.event.queued",
                        "event_name": event_name,
                        "pending": len(self._queue),
                    },
                )
                return record
            subscribers = list(self._subscriptions.get(event_name, ()))

        if not subscribers:
            LOGGER.debug(
                "bus.event.unhandled",
                extra={"event": "bus.event.unhandled", "event_name": event_name},
            )
            return record
        self._dispatch(record, subscribers)
        return record

    def _dispatch(self, record: EventRecord, subscribers: list[Subscription]) -> None:
        event = Event.from_record(record)
        for subscription in subscribers:
            fault = self._invoke(subscription, event)
            if fault is None or not subscription.remove_on_error:
                continue
            if self._discard(subscription.event_name, subscription.id):
                LOGGER.warning(
                    "bus.subscriber.removed",
                    extra={
                        "event": "bus.subscriber.removed",
                        "component": "EventBus",
                        "context": "publish",
                        "event_name": record.name,
                        "subscription_id": subscription.id,
                    },
                )

    @staticmethod
    def _invoke(subscription: Subscription, event: Event) -> Exception | None:
        try:
            subscription.handler(event)
        except Exception as exc:
            LOGGER.error(
                "bus.subscriber.failed",
                exc_info=exc,
                extra={
                    "event": "bus.subscriber.failed",
                    "component": "EventBus",
                    "context": "publish",
                    "event_name": event.name,
                    "subscription_id": subscription.id,
                    "remove_on_error": subscription.remove_on_error,
                },
            )
            return exc
        return None

    # -- history -----------------------------------------------------------

    def get_history(
        self,
        event_name: str | None = None,
        last: int | None = None,
        since: datetime | None = None,
    ) -> list[EventRecord]:
        """Return recorded events, oldest first.

        ``since`` is inclusive; ``last`` keeps only the newest N matches.
        """
        with self._reporter.report("EventBus", "get_history"):
            if event_name is not None:
                _require_event_name(event_name)
            if last is not None and (
                isinstance(last, bool) or not isinstance(last, int) or last < 0
            ):
                raise InvalidArgumentError("last must be a non-negative integer.")
        with self._lock:
            records = list(self._history)
        if event_name is not None:
            records = [record for record in records if record.name == event_name]
        if since is not None:
            records = [record for record in records if record.timestamp >= since]
        if last is not None:
            records = records[-last:] if last else []
        return records

    # -- queuing -----------------------------------------------------------

    def enable_queue(self) -> None:
        """Hold published events until ``disable_queue`` is called."""
        with self._lock:
            if self._queue is not None:
                return
            self._queue = deque()
        LOGGER.info("bus.queue.enabled", extra={"event": "bus.queue.enabled"})

    def disable_queue(self, process_pending: bool = True) -> int:
        """Stop queuing; replay or discard what was held.

        Replayed events go through the full ``publish`` path, so they reach
        the subscribers registered at drain time.

        Returns:
            Number of events replayed.
        """
        with self._lock:
            pending = list(self._queue or ())
            self._queue = None
        LOGGER.info(
            "bus.queue.disabled",
            extra={
                "event": "bus.queue.disabled",
                "pending": len(pending),
                "process_pending": process_pending,
            },
        )
        if not process_pending:
            return 0
        for record in pending:
            self.publish(record.name, record.data, dict(record.metadata), record.source)
        return len(pending)

    # -- waiting -----------------------------------------------------------

    def wait_for(
        self,
        event_name: str,
        timeout: float,
        predicate: EventPredicate | None = None,
    ) -> EventRecord | None:
        """Block the calling thread until a matching event or the timeout.

        Returns the matching record, or None when the timeout elapses first.
        The event must be published from another thread.
        """
        self._validate_wait(event_name, timeout)
        signal = threading.Event()
        matched: list[EventRecord] = []

        def _on_event(event: Event) -> None:
            if signal.is_set():
                return
            if predicate is None or predicate(event):
                matched.append(event.record)
                signal.set()

        subscription_id = self._subscribe_waiter(event_name, _on_event)
        try:
            if signal.wait(timeout):
                return matched[0]
            self._log_wait_timeout(event_name, timeout)
            return None
        finally:
            self._discard(event_name, subscription_id)

    async def wait_for_async(
        self,
        event_name: str,
        timeout: float,
        predicate: EventPredicate | None = None,
    ) -> EventRecord | None:
        """Awaitable variant of ``wait_for`` for code running on an event loop."""
        self._validate_wait(event_name, timeout)
        loop = asyncio.get_running_loop()
        signal = asyncio.Event()
        matched: list[EventRecord] = []

        def _on_event(event: Event) -> None:
            if matched:
                return
            if predicate is None or predicate(event):
                matched.append(event.record)
                loop.call_soon_threadsafe(signal.set)

        subscription_id = self._subscribe_waiter(event_name, _on_event)
        try:
            await asyncio.wait_for(signal.wait(), timeout)
            return matched[0]
        except asyncio.TimeoutError:
            self._log_wait_timeout(event_name, timeout)
            return None
        finally:
            self._discard(event_name, subscription_id)

    def _validate_wait(self, event_name: str, timeout: float) -> None:
        with self._reporter.report("EventBus", "wait_for"):
            _require_event_name(event_name)
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise InvalidArgumentError("timeout must be a number of seconds.")
            if timeout < 0:
                raise InvalidArgumentError("timeout must not be negative.")

    def _subscribe_waiter(self, event_name: str, handler: EventHandler) -> str:
        return self.subscribe(
            event_name,
            handler,
            subscription_id=f"wait-for:{uuid.uuid4().hex}",
            remove_on_error=True,
        )

    @staticmethod
    def _log_wait_timeout(event_name: str, timeout: float) -> None:
        LOGGER.info(
            "bus.wait.timeout",
            extra={
                "event": "bus.wait.timeout",
                "event_name": event_name,
                "timeout_seconds": timeout,
            },
        )


def _require_event_name(event_name: Any) -> None:
    if not isinstance(event_name, str) or not event_name.strip():
        raise InvalidArgumentError("event_name must be a non-empty string.")
