"""Regression tests for raw-key decoding.

Covers ESC timing, arrow sequences, control-key tokens, and UTF-8 text.
"""

from __future__ import annotations

import os
import time
import unittest

from lazypicker import input as input_mod


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _keys(self, payload: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._keys(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_page_sequences(self) -> None:
        self.assertEqual(
            self._keys(b"\x1b[A\x1b[B\x1bOA\x1b[5~\x1b[6~", 5),
            ["UP", "DOWN", "UP", "PAGE_UP", "PAGE_DOWN"],
        )

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._keys(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys(self) -> None:
        self.assertEqual(
            self._keys(b"\x10\x0e\x15\x17\x7f\r\x03", 7),
            ["CTRL_P", "CTRL_N", "CTRL_U", "CTRL_W", "BACKSPACE", "ENTER", "CTRL_C"],
        )

    def test_multibyte_utf8_is_one_key(self) -> None:
        self.assertEqual(self._keys("é漢".encode("utf-8"), 2), ["é", "漢"])

    def test_timeout_returns_empty_string(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertEqual(input_mod.read_key(read_fd, timeout_ms=10), "")
        finally:
            os.close(read_fd)
            os.close(write_fd)


if __name__ == "__main__":
    unittest.main()
