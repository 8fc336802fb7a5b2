"""Focus coordination driven by screen activation events."""

from __future__ import annotations

from collections import deque
from enum import Enum
import logging
import threading
from typing import Any
import uuid

from .components import Component, FocusHook, Screen
from .events.bus import Event, EventBus
from .events.domain import FOCUS_CHANGED, SCREEN_ACTIVATED, FocusChangedEvent
from .exceptions import InvalidArgumentError

LOGGER = logging.getLogger(__name__)


class FocusReason(str, Enum):
    """Why a focus transition was requested."""

    SCREEN_CHANGE = "ScreenChange"
    INITIAL_FOCUS = "InitialFocus"
    NAVIGATION = "Navigation"
    PROGRAMMATIC = "Programmatic"


class FocusCoordinator:
    """Own the tab order and the single focused component.

    The coordinator subscribes to ``SCREEN_ACTIVATED`` on construction and
    rebuilds the tab order from the activated screen's tree.
    """

    def __init__(self, bus: EventBus, priority: int = 100) -> None:
        self._bus = bus
        self._lock = threading.RLock()
        self._tab_order: list[Component] = []
        self._focused: Component | None = None
        self._transitioning = False
        self._deferred: deque[tuple[Component | None, FocusReason | str]] = deque()
        self._subscription_id = bus.subscribe(
            SCREEN_ACTIVATED,
            self._on_screen_activated,
            subscription_id=f"focus-coordinator:{uuid.uuid4().hex[:8]}",
            priority=priority,
        )

    @property
    def tab_order(self) -> tuple[Component, ...]:
        with self._lock:
            return tuple(self._tab_order)

    def get_focused(self) -> Component | None:
        with self._lock:
            return self._focused

    def close(self) -> None:
        """Stop listening for screen activations."""
        self._bus.unsubscribe(SCREEN_ACTIVATED, self._subscription_id)

    def request_focus(
        self,
        target: Component | None,
        reason: FocusReason | str = FocusReason.PROGRAMMATIC,
    ) -> bool:
        """Move focus to ``target`` (or clear it when ``target`` is None).

        Returns True when the focus state changed. A request made from an
        ``on_focus``/``on_blur`` hook is deferred until the running transition
        has completed and been published, and returns False.
        """
        with self._bus.reporter.report("FocusCoordinator", "request_focus"):
            if target is not None and not isinstance(target, Component):
                raise InvalidArgumentError("target must be a Component or None.")
        reason_text = reason.value if isinstance(reason, FocusReason) else str(reason)

        with self._lock:
            if self._transitioning:
                self._deferred.append((target, reason))
                LOGGER.debug(
                    "focus.request.deferred",
                    extra={
                        "event": "focus.request.deferred",
                        "component_id": target.id if target is not None else None,
                        "reason": reason_text,
                    },
                )
                return False
            if target is not None and target.focusable is False:
                LOGGER.debug(
                    "focus.request.ignored",
                    extra={
                        "event": "focus.request.ignored",
                        "component_id": target.id,
                        "reason": reason_text,
                    },
                )
                return False
            previous = self._focused
            if _same_target(previous, target):
                return False

            self._transitioning = True
            try:
                if previous is not None:
                    previous.focused = False
                    _run_hook(previous, previous.on_blur, "on_blur")
                self._focused = target
                if target is not None:
                    target.focused = True
                    _run_hook(target, target.on_focus, "on_focus")
            finally:
                self._transitioning = False

        change = FocusChangedEvent(
            previous=previous.id if previous is not None else None,
            current=target.id if target is not None else None,
            reason=reason_text,
        )
        LOGGER.debug(
            "focus.changed",
            extra={
                "event": "focus.changed",
                "previous": change.previous,
                "current": change.current,
                "reason": change.reason,
            },
        )
        self._bus.publish(FOCUS_CHANGED, change.as_payload(), source="FocusCoordinator")
        self._run_deferred()
        return True

    def _run_deferred(self) -> None:
        while True:
            with self._lock:
                if not self._deferred:
                    return
                target, reason = self._deferred.popleft()
            self.request_focus(target, reason)

    def move_focus(self, reverse: bool = False) -> bool:
        """Step focus through the tab order, wrapping at both ends."""
        with self._lock:
            order = list(self._tab_order)
            if not order:
                return False
            index = _index_of(order, self._focused)
            if index is None:
                target = order[-1] if reverse else order[0]
            else:
                step = -1 if reverse else 1
                target = order[(index + step + len(order)) % len(order)]
            return self.request_focus(target, FocusReason.NAVIGATION)

    def handle_screen_activated(self, screen: Screen) -> None:
        """Rebuild the tab order from ``screen`` and focus its first entry."""
        with self._lock:
            self._tab_order = []
            self.request_focus(None, FocusReason.SCREEN_CHANGE)
            if screen.root is None:
                LOGGER.warning(
                    "focus.screen.no_root",
                    extra={
                        "event": "focus.screen.no_root",
                        "component": "FocusCoordinator",
                        "context": "screen_activated",
                        "screen": screen.name,
                    },
                )
                return
            self._tab_order = build_tab_order(screen.root)
            LOGGER.debug(
                "focus.tab_order.rebuilt",
                extra={
                    "event": "focus.tab_order.rebuilt",
                    "screen": screen.name,
                    "size": len(self._tab_order),
                },
            )
            if self._tab_order:
                self.request_focus(self._tab_order[0], FocusReason.INITIAL_FOCUS)

    def _on_screen_activated(self, event: Event) -> None:
        screen = _screen_from_payload(event.data)
        if screen is None:
            LOGGER.warning(
                "focus.screen.missing",
                extra={
                    "event": "focus.screen.missing",
                    "component": "FocusCoordinator",
                    "context": "screen_activated",
                },
            )
            return
        self.handle_screen_activated(screen)


def build_tab_order(root: Component) -> list[Component]:
    """Collect focusable, visible nodes in breadth-first order."""
    order: list[Component] = []
    pending: deque[Component] = deque([root])
    while pending:
        node = pending.popleft()
        if node.navigable:
            order.append(node)
        pending.extend(node.iter_children())
    return order


def _same_target(current: Component | None, target: Component | None) -> bool:
    if current is None or target is None:
        return current is target
    return current.id == target.id


def _index_of(order: list[Component], component: Component | None) -> int | None:
    if component is None:
        return None
    for index, candidate in enumerate(order):
        if candidate.id == component.id:
            return index
    return None


def _run_hook(component: Component, hook: FocusHook | None, hook_name: str) -> None:
    if hook is None:
        return
    try:
        hook()
    except Exception as exc:
        LOGGER.error(
            "focus.hook.failed",
            exc_info=exc,
            extra={
                "event": "focus.hook.failed",
                "component": "FocusCoordinator",
                "context": hook_name,
                "component_id": component.id,
            },
        )


def _screen_from_payload(data: Any) -> Screen | None:
    if isinstance(data, Screen):
        return data
    if isinstance(data, dict):
        screen = data.get("screen")
        if isinstance(screen, Screen):
            return screen
    return None
