"""Tests for the logging helpers."""

import io
import unittest
from contextlib import redirect_stdout

from clustercode.utils.logging import (
    create_progress_bar,
    get_logger,
    set_debug_mode,
    set_log_level,
    set_quiet_mode,
)


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.logger = get_logger("scanner")

    def tearDown(self):
        set_debug_mode(False)
        set_quiet_mode(False)
        set_log_level("INFO")

    def _capture(self, func, message):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            func(message)
        return buffer.getvalue()

    def test_tags_and_prefix(self):
        self.assertEqual(self._capture(self.logger.info, "hello"), "[INFO] [scanner] hello\n")
        self.assertEqual(self._capture(self.logger.discovery, "3 lanes"), "[DISCOVERY] [scanner] 3 lanes\n")
        self.assertEqual(self._capture(self.logger.error, "boom"), "[ERROR] [scanner] boom\n")

    def test_debug_requires_debug_mode(self):
        self.assertEqual(self._capture(self.logger.debug, "hidden"), "")

        set_debug_mode(True)

        self.assertEqual(self._capture(self.logger.debug, "shown"), "[DEBUG] [scanner] shown\n")

    def test_quiet_mode_keeps_errors(self):
        set_quiet_mode(True)

        self.assertEqual(self._capture(self.logger.info, "hidden"), "")
        self.assertEqual(self._capture(self.logger.warn, "kept"), "[WARN] [scanner] kept\n")

    def test_log_level(self):
        set_log_level("error")

        self.assertEqual(self._capture(self.logger.warn, "hidden"), "")
        self.assertEqual(self._capture(self.logger.error, "kept"), "[ERROR] [scanner] kept\n")

    def test_unknown_log_level(self):
        with self.assertRaises(ValueError):
            set_log_level("chatty")

    def test_quiet_mode_disables_progress_bar(self):
        set_quiet_mode(True)

        with create_progress_bar(total=2, desc="lanes") as pbar:
            pbar.update(1)

        self.assertTrue(pbar.disable)


if __name__ == '__main__':
    unittest.main()
