"""Textual application wiring the event bus to focus management."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from textual.app import App
from textual.binding import Binding
from textual.screen import Screen as TextualScreen

from .config import load_config
from .dom import screen_from_textual
from .events.bus import EventBus, EventPredicate, EventRecord
from .events.domain import SCREEN_ACTIVATED, ScreenActivatedEvent
from .focus import FocusCoordinator
from .logging_utils import configure_logging
from .screens import PanelScreen

LOGGER = logging.getLogger(__name__)

MAIN_SCREEN = "main"
SETTINGS_SCREEN = "settings"


class FocusApp(App[None]):
    """Two form screens whose keyboard focus is driven through the event bus."""

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "focus_next": "Next field",
        "focus_previous": "Previous field",
        "toggle_screen": "Switch screen",
        "quit": "Quit",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        config_path: Path | None = None,
    ) -> None:
        self.config = config if config is not None else load_config(config_path)
        configure_logging(self.config["logging"])
        events_cfg = self.config["events"]
        self.bus = EventBus(history_size=int(events_cfg["history_size"]))
        self.focus_coordinator = FocusCoordinator(self.bus)
        self._wait_timeout = float(events_cfg["wait_timeout_seconds"])
        self._binding_specs = self._binding_specs_from_config(self.config)
        super().__init__()

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    async def on_mount(self) -> None:
        """Register keybindings, install the screens and show the first one."""
        self.title = str(self.config["app"]["title"])
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )
        self.install_screen(
            PanelScreen("Profile", ["Name", "Email"], ["Save", "Cancel"], name=MAIN_SCREEN),
            name=MAIN_SCREEN,
        )
        self.install_screen(
            PanelScreen("Settings", ["Theme"], ["Apply"], name=SETTINGS_SCREEN),
            name=SETTINGS_SCREEN,
        )
        initial = str(self.config["app"]["initial_screen"])
        if initial not in (MAIN_SCREEN, SETTINGS_SCREEN):
            LOGGER.warning(
                "app.initial_screen.unknown",
                extra={"event": "app.initial_screen.unknown", "screen": initial},
            )
            initial = MAIN_SCREEN
        await self.push_screen(initial)

    def publish_screen_activated(self, screen: TextualScreen) -> EventRecord:
        """Announce ``screen`` on the bus so focus follows it."""
        payload = ScreenActivatedEvent(screen=screen_from_textual(screen))
        LOGGER.info(
            "app.screen.activated",
            extra={"event": "app.screen.activated", "screen": payload.screen.name},
        )
        return self.bus.publish(SCREEN_ACTIVATED, payload.as_payload(), source="FocusApp")

    async def wait_for_event(
        self,
        event_name: str,
        predicate: EventPredicate | None = None,
        timeout: float | None = None,
    ) -> EventRecord | None:
        """Await an event without blocking the UI; None on timeout."""
        return await self.bus.wait_for_async(
            event_name,
            self._wait_timeout if timeout is None else timeout,
            predicate,
        )

    def action_focus_next(self) -> None:
        self.focus_coordinator.move_focus(reverse=False)

    def action_focus_previous(self) -> None:
        self.focus_coordinator.move_focus(reverse=True)

    async def action_toggle_screen(self) -> None:
        target = SETTINGS_SCREEN if self.screen.name == MAIN_SCREEN else MAIN_SCREEN
        await self.switch_screen(target)

    async def action_quit(self) -> None:
        self.focus_coordinator.close()
        self.exit()
