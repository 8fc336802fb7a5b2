"""Form screens whose focus is managed by the focus coordinator."""

from __future__ import annotations

import re

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Input, Static


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "item"


class PanelScreen(Screen[None]):
    """A titled panel of text inputs followed by a row of buttons."""

    # Initial focus comes from the coordinator, not Textual.
    AUTO_FOCUS = ""

    DEFAULT_CSS = """
    PanelScreen {
        align: center middle;
    }

    PanelScreen #panel {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    PanelScreen #panel-title {
        padding-bottom: 1;
        text-style: bold;
    }

    PanelScreen #panel-actions {
        height: auto;
        align: right middle;
    }
    """

    def __init__(
        self,
        title: str,
        fields: list[str],
        actions: list[str],
        name: str | None = None,
    ) -> None:
        super().__init__(name=name)
        self._title = title
        self._fields = fields
        self._actions = actions

    def compose(self) -> ComposeResult:
        prefix = _slug(self.name or self._title)
        with Vertical(id="panel"):
            yield Static(self._title, id="panel-title")
            for label in self._fields:
                yield Input(placeholder=label, id=f"{prefix}-{_slug(label)}-input")
            with Horizontal(id="panel-actions"):
                for label in self._actions:
                    yield Button(label, id=f"{prefix}-{_slug(label)}-button")

    def on_screen_resume(self) -> None:
        publish = getattr(self.app, "publish_screen_activated", None)
        if callable(publish):
            publish(self)

    def action_focus_next(self) -> None:
        self.app.action_focus_next()

    def action_focus_previous(self) -> None:
        self.app.action_focus_previous()
