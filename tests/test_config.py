"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from termfocus.config import DEFAULT_CONFIG, ensure_config_dir, load_config


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config = load_config(config_path=config_path)
            self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])
            self.assertEqual(config["events"]["history_size"], 1000)
            self.assertEqual(config["keybinds"]["focus_next"], "tab")
            self.assertEqual(config["keybinds"]["focus_previous"], "shift+tab")
            self.assertEqual(
                config["logging"]["level"], DEFAULT_CONFIG["logging"]["level"]
            )

    def test_events_section_only_holds_settings_the_app_reads(self) -> None:
        self.assertEqual(
            set(DEFAULT_CONFIG["events"]), {"history_size", "wait_timeout_seconds"}
        )

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[events]
history_size = 50

[keybinds]
toggle_screen = "f2"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["events"]["history_size"], 50)
            self.assertEqual(config["keybinds"]["toggle_screen"], "f2")
            self.assertEqual(config["keybinds"]["quit"], "ctrl+q")
            self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])

    def test_invalid_values_fallback_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[events]
history_size = 0

[logging]
level = "LOUD"
                """.strip(),
                encoding="utf-8",
            )
            with self.assertLogs("termfocus.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_unparseable_toml_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[events\nhistory_size = ", encoding="utf-8")
            with self.assertLogs("termfocus.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_log_level_is_normalised(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text('[logging]\nlevel = " debug "\n', encoding="utf-8")
            config = load_config(config_path=config_path)
            self.assertEqual(config["logging"]["level"], "DEBUG")

    def test_ensure_config_dir_creates_directory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            target = Path(temp_dir) / "nested" / "termfocus"
            self.assertEqual(ensure_config_dir(target), target)
            self.assertTrue(target.is_dir())


if __name__ == "__main__":
    unittest.main()
