"""Runtime-style tests for the Textual host integration."""

from __future__ import annotations

import asyncio
import logging
import unittest

from termfocus.config import DEFAULT_CONFIG
from termfocus.events.domain import FOCUS_CHANGED, SCREEN_ACTIVATED
from termfocus.focus import build_tab_order

try:
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Button, Input, Static

    from termfocus.app import FocusApp
    from termfocus.dom import screen_from_textual, widget_key
except ModuleNotFoundError:
    App = None  # type: ignore[assignment,misc]
    FocusApp = None  # type: ignore[assignment,misc]


def _test_config() -> dict[str, dict[str, object]]:
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    config["logging"]["structured"] = False
    return config


class _RootLoggerGuard:
    """FocusApp configures logging; restore the root logger afterwards."""

    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)


@unittest.skipIf(App is None, "textual is not installed")
class DomBridgeTests(unittest.IsolatedAsyncioTestCase):
    """Validate translation of a Textual DOM into focus components."""

    async def test_screen_translation_keeps_only_visible_focusables(self) -> None:
        class _TestApp(App[None]):
            def compose(self) -> ComposeResult:
                hidden = Input(id="hidden")
                hidden.display = False
                with Vertical(id="outer"):
                    yield Static("title", id="title")
                    yield Input(id="first")
                    yield hidden
                    with Horizontal(id="row"):
                        yield Button("Go", id="go")
                yield Input(id="top")

        app = _TestApp()
        async with app.run_test() as pilot:
            await pilot.pause()
            screen = screen_from_textual(app.screen, name="test")
            assert screen.root is not None
            self.assertEqual(screen.name, "test")
            self.assertFalse(screen.root.focusable)
            ids = [component.id for component in build_tab_order(screen.root)]
            self.assertEqual(ids, ["top", "first", "go"])

    async def test_widget_key_falls_back_for_anonymous_widgets(self) -> None:
        anonymous = Static("x")
        self.assertTrue(widget_key(anonymous).startswith("Static-"))
        self.assertEqual(widget_key(Static("y", id="named")), "named")


@unittest.skipIf(FocusApp is None, "textual is not installed")
class FocusAppTests(_RootLoggerGuard, unittest.IsolatedAsyncioTestCase):
    """Validate that screen activation and tab keys drive the coordinator."""

    async def test_initial_screen_focuses_first_input(self) -> None:
        assert FocusApp is not None
        app = FocusApp(config=_test_config())
        async with app.run_test() as pilot:
            await pilot.pause()
            focused = app.focus_coordinator.get_focused()
            assert focused is not None
            self.assertEqual(focused.id, "main-name-input")
            self.assertEqual(
                [c.id for c in app.focus_coordinator.tab_order],
                [
                    "main-name-input",
                    "main-email-input",
                    "main-save-button",
                    "main-cancel-button",
                ],
            )
            self.assertTrue(app.bus.get_history(SCREEN_ACTIVATED))
            self.assertIsNotNone(app.focused)
            self.assertEqual(app.focused.id, "main-name-input")

    async def test_tab_keys_cycle_through_coordinator(self) -> None:
        assert FocusApp is not None
        app = FocusApp(config=_test_config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("tab")
            await pilot.pause()
            self.assertEqual(
                app.focus_coordinator.get_focused().id, "main-email-input"
            )
            await pilot.press("shift+tab")
            await pilot.press("shift+tab")
            await pilot.pause()
            self.assertEqual(
                app.focus_coordinator.get_focused().id, "main-cancel-button"
            )
            self.assertEqual(app.focused.id, "main-cancel-button")

    async def test_toggle_screen_rebuilds_tab_order(self) -> None:
        assert FocusApp is not None
        app = FocusApp(config=_test_config())
        async with app.run_test() as pilot:
            await pilot.pause()
            await app.run_action("toggle_screen")
            await pilot.pause()
            self.assertEqual(app.screen.name, "settings")
            self.assertEqual(
                [c.id for c in app.focus_coordinator.tab_order],
                ["settings-theme-input", "settings-apply-button"],
            )
            self.assertEqual(
                app.focus_coordinator.get_focused().id, "settings-theme-input"
            )

    async def test_wait_for_event_sees_focus_changes(self) -> None:
        assert FocusApp is not None
        app = FocusApp(config=_test_config())
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, app.bus.publish, FOCUS_CHANGED, {"current": "x"})
        record = await app.wait_for_event(
            FOCUS_CHANGED, predicate=lambda event: event.data["current"] == "x"
        )
        assert record is not None
        self.assertEqual(record.data["current"], "x")

    async def test_wait_for_event_uses_explicit_timeout(self) -> None:
        assert FocusApp is not None
        app = FocusApp(config=_test_config())
        self.assertIsNone(await app.wait_for_event("never", timeout=0.01))


if __name__ == "__main__":
    unittest.main()
