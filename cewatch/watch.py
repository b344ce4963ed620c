"""Directory watch bridge for the tracked source file.

Watches the file's parent directory (editors often save by writing a temp
file and renaming it over the original) and forwards only create/write
events whose canonical path is the tracked file. ``watchfiles`` runs the
native watcher on one worker thread; its stop event is the shutdown flag.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from watchfiles import Change, awatch

from .errors import WatchRuntimeError, WatchSetupError

logger = logging.getLogger(__name__)

WATCH_DEBOUNCE_MS = 100
WATCH_STEP_MS = 50
_RELEVANT_CHANGES = frozenset({Change.added, Change.modified})


@dataclass(frozen=True)
class FileChanged:
    path: Path


@dataclass(frozen=True)
class WatchFailed:
    error: WatchRuntimeError


WatchEvent = Union[FileChanged, WatchFailed]


def canonical_file_path(path: Path) -> Path:
    """Resolve ``path`` to its absolute, symlink-free form.

    Raises ``WatchSetupError`` when the file or its directory is unusable.
    """
    try:
        resolved = Path(path).resolve(strict=True)
    except OSError as exc:
        raise WatchSetupError(f"{path}: {exc.strerror or exc}") from exc
    if not resolved.parent.is_dir():
        raise WatchSetupError(f"{resolved.parent} is not a directory")
    return resolved


class FileWatcherBridge:
    """Forward changes of one file from a directory watch onto a queue."""

    def __init__(
        self,
        path: Path,
        *,
        watch_fn: Callable[..., object] = awatch,
        debounce_ms: int = WATCH_DEBOUNCE_MS,
    ) -> None:
        self.path = canonical_file_path(path)
        self.directory = self.path.parent
        self._watch_fn = watch_fn
        self._debounce_ms = debounce_ms
        self._queue: asyncio.Queue[WatchEvent] = asyncio.Queue()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        """Begin forwarding events; must be called with a running loop."""
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._pump(), name="cewatch-watch")
        logger.info("watching %s for changes to %s", self.directory, self.path.name)

    def _is_tracked(self, raw_path: str) -> bool:
        try:
            resolved = Path(raw_path).resolve(strict=True)
        except OSError:
            # Mid-rename during an atomic save; the follow-up event will match.
            logger.debug("skipping unresolvable path %s", raw_path)
            return False
        return resolved == self.path

    def _forward(self, changes) -> None:
        for change, raw_path in changes:
            if change in _RELEVANT_CHANGES and self._is_tracked(raw_path):
                self._queue.put_nowait(FileChanged(self.path))
                return

    async def _pump(self) -> None:
        assert self._stop_event is not None
        try:
            async for changes in self._watch_fn(
                self.directory,
                watch_filter=None,
                debounce=self._debounce_ms,
                step=WATCH_STEP_MS,
                stop_event=self._stop_event,
                recursive=False,
            ):
                self._forward(changes)
        except Exception as exc:
            logger.error("directory watch failed: %s", exc)
            self._queue.put_nowait(WatchFailed(WatchRuntimeError(str(exc) or type(exc).__name__)))
            return
        if not self._stop_event.is_set():
            logger.error("directory watch ended unexpectedly")
            self._queue.put_nowait(WatchFailed(WatchRuntimeError(f"watch on {self.directory} ended")))

    async def next_event(self) -> WatchEvent:
        """Suspend until the next forwarded event."""
        return await self._queue.get()

    def stop(self) -> None:
        """Signal the watcher thread to finish; it is not joined."""
        if self._stop_event is not None:
            self._stop_event.set()
