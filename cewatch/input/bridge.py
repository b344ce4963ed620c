"""Adapt terminal input into an awaitable stream of events.

Stdin readability and ``SIGWINCH`` are registered on the running asyncio
loop, so no thread is involved. Events are queued FIFO and never dropped.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from .reader import has_pending_input, read_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Resize:
    pass


@dataclass(frozen=True)
class InputClosed:
    """Stdin reached EOF or the bridge was torn down."""


InputEvent = Union[KeyPress, Resize, InputClosed]


class InputBridge:
    """Lazy, unending sequence of terminal events for the session loop."""

    def __init__(
        self,
        fd: int,
        *,
        watch_resize: bool = True,
        read_key_fn: Callable[[int], str] = read_key,
        pending_fn: Callable[[], bool] = has_pending_input,
    ) -> None:
        self.fd = fd
        self._watch_resize = watch_resize
        self._read_key = read_key_fn
        self._has_pending = pending_fn
        self._queue: asyncio.Queue[InputEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._reading = False
        self._closed = False

    def start(self) -> None:
        """Attach to the running loop's reader and signal hooks."""
        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self.fd, self._on_readable)
        self._reading = True
        if self._watch_resize:
            self._loop.add_signal_handler(signal.SIGWINCH, self._on_resize)

    def _detach(self) -> None:
        if self._loop is None:
            return
        if self._reading:
            self._loop.remove_reader(self.fd)
            self._reading = False
        if self._watch_resize:
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._watch_resize = False

    def _on_readable(self) -> None:
        try:
            key = self._read_key(self.fd)
            if key == "":
                logger.info("stdin reached end of input")
                self.close()
                return
            self._queue.put_nowait(KeyPress(key))
            # Lookahead bytes never make the fd readable again; drain them here.
            while self._has_pending():
                self._queue.put_nowait(KeyPress(self._read_key(self.fd)))
        except OSError as exc:
            logger.error("reading stdin failed: %s", exc)
            self.close()

    def _on_resize(self) -> None:
        self._queue.put_nowait(Resize())

    async def next_event(self) -> InputEvent:
        """Suspend until the next event is available."""
        return await self._queue.get()

    def close(self) -> None:
        """Detach from the loop and wake consumers with ``InputClosed``."""
        if self._closed:
            return
        self._closed = True
        self._detach()
        self._queue.put_nowait(InputClosed())

    @property
    def closed(self) -> bool:
        return self._closed
