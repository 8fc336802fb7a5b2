"""Well-known event names and their payload shapes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..components import Screen

SCREEN_ACTIVATED = "screen.activated"
FOCUS_CHANGED = "focus.changed"


@dataclass
class ScreenActivatedEvent:
    screen: Screen

    def as_payload(self) -> dict[str, Screen]:
        return {"screen": self.screen}


@dataclass
class FocusChangedEvent:
    previous: str | None
    current: str | None
    reason: str

    def as_payload(self) -> dict[str, str | None]:
        return {"previous": self.previous, "current": self.current, "reason": self.reason}
