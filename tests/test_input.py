"""Regression tests for raw-key decoding.

Covers ESC timing, CSI navigation sequences and control-key token mapping.
"""

import os
import time
import unittest

from cewatch.input import reader as input_mod


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_all(self, payload: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_all(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_navigation_sequences(self) -> None:
        keys = self._read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[5~\x1b[6~\x1b[H\x1b[Z", 8)
        self.assertEqual(
            keys,
            ["UP", "DOWN", "RIGHT", "LEFT", "PAGE_UP", "PAGE_DOWN", "HOME", "SHIFT_TAB"],
        )

    def test_modified_arrow_maps_to_plain_arrow(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[1;2C", 1), ["RIGHT"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        keys = self._read_all(b"\x1bq", 2)
        self.assertEqual(keys, ["ESC", "q"])
        self.assertFalse(input_mod.has_pending_input())

    def test_control_keys_map_to_named_tokens(self) -> None:
        keys = self._read_all(b"\x03\t\r\n\x7f", 5)
        self.assertEqual(keys, ["CTRL_C", "TAB", "ENTER_CR", "ENTER_LF", "BACKSPACE"])

    def test_multibyte_utf8_character_is_one_key(self) -> None:
        self.assertEqual(self._read_all("é".encode("utf-8"), 1), ["é"])

    def test_timeout_without_input_returns_empty_string(self) -> None:
        self.assertEqual(self._read_all(b"", 1), [""])


if __name__ == "__main__":
    unittest.main()
