"""Top-level package for termfocus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import FocusApp
    from .components import Component, Screen
    from .config import ensure_config_dir, load_config
    from .error_reporting import ErrorReport, ErrorReporter
    from .events import Event, EventBus, EventRecord, Subscription
    from .exceptions import ConfigValidationError, InvalidArgumentError, TermFocusError
    from .focus import FocusCoordinator, FocusReason

__all__ = [
    "Component",
    "ConfigValidationError",
    "ErrorReport",
    "ErrorReporter",
    "Event",
    "EventBus",
    "EventRecord",
    "FocusApp",
    "FocusCoordinator",
    "FocusReason",
    "InvalidArgumentError",
    "Screen",
    "Subscription",
    "TermFocusError",
    "ensure_config_dir",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the Textual UI optional at import time."""
    if name in {"Event", "EventBus", "EventRecord", "Subscription"}:
        from . import events

        return getattr(events, name)
    if name in {"FocusCoordinator", "FocusReason"}:
        from . import focus

        return getattr(focus, name)
    if name in {"Component", "Screen"}:
        from . import components

        return getattr(components, name)
    if name in {"ErrorReport", "ErrorReporter"}:
        from . import error_reporting

        return getattr(error_reporting, name)
    if name in {"ConfigValidationError", "InvalidArgumentError", "TermFocusError"}:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"ensure_config_dir", "load_config"}:
        from .config import ensure_config_dir, load_config

        return {"ensure_config_dir": ensure_config_dir, "load_config": load_config}[name]
    if name == "FocusApp":
        from .app import FocusApp

        return FocusApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
