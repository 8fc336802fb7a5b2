"""Bridge Textual DOM nodes to focus components."""

from __future__ import annotations

from textual.screen import Screen as TextualScreen
from textual.widget import Widget

from .components import Component, Screen


def widget_key(widget: Widget) -> str:
    """Stable identity for a widget: its DOM id, else a per-object key."""
    return widget.id or f"{type(widget).__name__}-{id(widget):x}"


def component_from_widget(widget: Widget) -> Component:
    return Component(
        id=widget_key(widget),
        focusable=bool(widget.focusable),
        visible=bool(widget.display and widget.visible),
        children=[component_from_widget(child) for child in widget.children],
        on_focus=widget.focus,
        on_blur=widget.blur,
        widget=widget,
    )


def screen_from_textual(screen: TextualScreen, name: str | None = None) -> Screen:
    """Describe a mounted Textual screen as a focus ``Screen``.

    The screen node itself is never a focus target.
    """
    root = Component(
        id=widget_key(screen),
        focusable=False,
        visible=True,
        children=[component_from_widget(child) for child in screen.children],
        widget=screen,
    )
    return Screen(name=name or screen.name or root.id, root=root)
