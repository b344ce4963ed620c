from __future__ import annotations

import errno
import os
import unittest

from cewatch.input import InputBridge, InputClosed, KeyPress, Resize
from cewatch.input import reader as input_mod


class InputBridgeTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()
        for fd in (self.read_fd, self.write_fd):
            try:
                os.close(fd)
            except OSError:
                pass

    async def test_keys_are_delivered_in_order(self) -> None:
        bridge = InputBridge(self.read_fd, watch_resize=False)
        bridge.start()
        os.write(self.write_fd, b"jk\x1b[B")

        events = [await bridge.next_event() for _ in range(3)]
        bridge.close()

        self.assertEqual(events, [KeyPress("j"), KeyPress("k"), KeyPress("DOWN")])

    async def test_lookahead_byte_after_escape_is_not_dropped(self) -> None:
        bridge = InputBridge(self.read_fd, watch_resize=False)
        bridge.start()
        os.write(self.write_fd, b"\x1bq")

        first = await bridge.next_event()
        second = await bridge.next_event()
        bridge.close()

        self.assertEqual((first, second), (KeyPress("ESC"), KeyPress("q")))

    async def test_end_of_input_yields_input_closed(self) -> None:
        bridge = InputBridge(self.read_fd, watch_resize=False)
        bridge.start()
        os.close(self.write_fd)

        event = await bridge.next_event()

        self.assertEqual(event, InputClosed())
        self.assertTrue(bridge.closed)

    async def test_read_error_closes_bridge(self) -> None:
        def hung_up(fd: int) -> str:
            raise OSError(errno.EIO, "Input/output error")

        bridge = InputBridge(self.read_fd, watch_resize=False, read_key_fn=hung_up)
        bridge.start()
        os.write(self.write_fd, b"j")

        event = await bridge.next_event()

        self.assertEqual(event, InputClosed())
        self.assertTrue(bridge.closed)
        self.assertFalse(bridge._reading)

    async def test_close_wakes_waiting_consumer(self) -> None:
        bridge = InputBridge(self.read_fd, watch_resize=False)
        bridge.start()
        bridge.close()
        bridge.close()

        self.assertEqual(await bridge.next_event(), InputClosed())

    async def test_resize_signal_is_queued_as_event(self) -> None:
        bridge = InputBridge(self.read_fd, watch_resize=False)
        bridge.start()
        bridge._on_resize()

        self.assertEqual(await bridge.next_event(), Resize())
        bridge.close()


if __name__ == "__main__":
    unittest.main()
