"""Labelled execution wrapper that reports failures before re-raising them."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
import logging
import time
import traceback
from typing import Any, Protocol, TypeVar

LOGGER = logging.getLogger(__name__)

APPLICATION_ERROR = "application.error"

T = TypeVar("T")


class _Publisher(Protocol):
    def publish(
        self,
        event_name: str,
        data: Any = None,
        metadata: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> Any: ...


@dataclass(frozen=True)
class ErrorReport:
    """Enriched description of a failed unit of work."""

    component: str
    context: str
    message: str
    error_type: str
    elapsed_seconds: float
    stack: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class ErrorReporter:
    """Run labelled work, log and broadcast failures, then re-raise them.

    When a publisher is attached, each report is also published under
    ``APPLICATION_ERROR`` so UI listeners can surface it.
    """

    def __init__(self, publisher: _Publisher | None = None) -> None:
        self._publisher = publisher

    def attach(self, publisher: _Publisher | None) -> None:
        self._publisher = publisher

    def run(
        self,
        component: str,
        context: str,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute ``func`` under ``report()`` and return its result."""
        with self.report(component, context):
            return func(*args, **kwargs)

    @contextmanager
    def report(self, component: str, context: str) -> Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            elapsed = time.perf_counter() - started
            self._emit(
                ErrorReport(
                    component=component,
                    context=context,
                    message=str(exc),
                    error_type=type(exc).__name__,
                    elapsed_seconds=elapsed,
                    stack="".join(traceback.format_exception(exc)),
                )
            )
            raise

    def _emit(self, report: ErrorReport) -> None:
        LOGGER.error(
            "error.reported",
            extra={
                "event": "error.reported",
                "component": report.component,
                "context": report.context,
                "error_message": report.message,
                "error_type": report.error_type,
                "elapsed_seconds": round(report.elapsed_seconds, 6),
            },
        )
        if self._publisher is None:
            return
        try:
            self._publisher.publish(
                APPLICATION_ERROR,
                report.as_dict(),
                source=f"{report.component}.{report.context}",
            )
        except Exception:
            # The original failure is re-raised by the caller either way.
            LOGGER.exception(
                "error.publish_failed",
                extra={"event": "error.publish_failed", "component": report.component},
            )
