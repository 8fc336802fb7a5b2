"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import termfocus


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        self.assertTrue(callable(termfocus.load_config))
        self.assertTrue(callable(termfocus.ensure_config_dir))
        self.assertIsNotNone(termfocus.EventBus)
        self.assertIsNotNone(termfocus.Event)
        self.assertIsNotNone(termfocus.EventRecord)
        self.assertIsNotNone(termfocus.Subscription)
        self.assertIsNotNone(termfocus.FocusCoordinator)
        self.assertIsNotNone(termfocus.FocusReason)
        self.assertIsNotNone(termfocus.Component)
        self.assertIsNotNone(termfocus.Screen)
        self.assertIsNotNone(termfocus.ErrorReporter)
        self.assertIsNotNone(termfocus.InvalidArgumentError)
        self.assertIsNotNone(termfocus.TermFocusError)

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(termfocus, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
