"""Session loop: merges input, file-change and compile-completion events.

All ``SessionState`` mutation happens here, one event at a time, on the
asyncio loop. At most one compile is in flight; every readable file change
bumps a generation counter and a completed compile whose generation is no
longer current is discarded.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..compiler.models import CompileResult
from ..errors import CompileError, SourceError
from ..input import InputClosed, InputEvent
from ..ui import Transition, UIStateMachine
from ..watch import FileChanged, WatchEvent, WatchFailed
from .source import read_source

logger = logging.getLogger(__name__)

CompileFn = Callable[[str], Awaitable[CompileResult]]


class InputSource(Protocol):
    async def next_event(self) -> InputEvent: ...


class WatchSource(Protocol):
    async def next_event(self) -> WatchEvent: ...


class Display(Protocol):
    def size(self) -> tuple[int, int]: ...

    def write_frame(self, rows: list[str]) -> None: ...


class OutcomeKind(enum.Enum):
    QUIT = "quit"
    INPUT_CLOSED = "input closed"
    WATCH_FAILED = "watch failed"


@dataclass(frozen=True)
class SessionOutcome:
    kind: OutcomeKind
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.WATCH_FAILED


class Session:
    """Single-consumer event loop driving the UI state machine."""

    def __init__(
        self,
        *,
        path: Path,
        machine: UIStateMachine,
        compile_source: CompileFn,
        input_events: InputSource,
        watch_events: WatchSource,
        display: Display,
        read_source_fn: Callable[[Path], str] = read_source,
    ) -> None:
        self.path = path
        self.machine = machine
        self._compile_source = compile_source
        self._input_events = input_events
        self._watch_events = watch_events
        self._display = display
        self._read_source = read_source_fn
        self.generation = 0
        self._compile_task: asyncio.Task | None = None
        self._compile_generation = 0
        self._pending_source: str | None = None
        self._needs_render = False
        self.compile_requests = 0

    def _note(self, transition: Transition) -> None:
        self._needs_render = self._needs_render or transition.needs_render

    def _flush_render(self) -> None:
        if not self._needs_render:
            return
        self._needs_render = False
        columns, rows = self._display.size()
        self._display.write_frame(self.machine.render(columns, rows).rows)

    # Startup

    async def startup(self) -> None:
        """Compile the current file once so the first frame shows data."""
        try:
            source = self._read_source(self.path)
        except SourceError as exc:
            logger.warning("initial read failed: %s", exc)
            self._note(self.machine.set_status(exc.status_text()))
            return
        self.compile_requests += 1
        logger.info("initial compile of %s (%d bytes)", self.path, len(source))
        try:
            result = await self._compile_source(source)
        except CompileError as exc:
            logger.warning("initial compile failed: %s", exc)
            self._note(self.machine.set_status(exc.status_text()))
            return
        self._note(self.machine.apply_result(result))

    # Compile bookkeeping

    @property
    def compile_in_flight(self) -> bool:
        return self._compile_task is not None

    def _start_compile(self, source: str) -> None:
        self._compile_generation = self.generation
        self.compile_requests += 1
        logger.info("compile generation %d (%d bytes)", self.generation, len(source))
        self._compile_task = asyncio.get_running_loop().create_task(
            self._compile_source(source), name=f"cewatch-compile-{self.generation}"
        )
        self._note(self.machine.set_compiling(True))

    def _finish_compile(self, task: asyncio.Task) -> None:
        generation = self._compile_generation
        self._compile_task = None
        error: CompileError | None = None
        result: CompileResult | None = None
        try:
            result = task.result()
        except CompileError as exc:
            error = exc

        if generation != self.generation:
            logger.info("discarding compile generation %d; generation %d is newer", generation, self.generation)
        elif error is not None:
            logger.warning("compile generation %d failed: %s", generation, error)
            self._note(self.machine.set_status(error.status_text()))
        else:
            assert result is not None
            self._note(self.machine.apply_result(result))

        if self._pending_source is not None:
            source, self._pending_source = self._pending_source, None
            self._start_compile(source)
        else:
            self._note(self.machine.set_compiling(False))

    # Event handlers

    def _handle_watch_event(self, event: WatchEvent) -> SessionOutcome | None:
        if isinstance(event, WatchFailed):
            return SessionOutcome(OutcomeKind.WATCH_FAILED, event.error.status_text())
        assert isinstance(event, FileChanged)
        if event.path != self.path:
            logger.debug("ignoring change to %s", event.path)
            return None
        try:
            source = self._read_source(self.path)
        except SourceError as exc:
            logger.warning("%s", exc)
            self._note(self.machine.set_status(exc.status_text()))
            return None
        self.generation += 1
        if self._compile_task is not None:
            self._pending_source = source
        else:
            self._start_compile(source)
        return None

    def _handle_input(self, event: InputEvent) -> SessionOutcome | None:
        if isinstance(event, InputClosed):
            return SessionOutcome(OutcomeKind.INPUT_CLOSED)
        transition = self.machine.apply_input(event)
        if transition.should_quit:
            return SessionOutcome(OutcomeKind.QUIT)
        self._note(transition)
        return None

    # Main loop

    async def run(self) -> SessionOutcome:
        """Process events until quit, input closure or a watch failure."""
        loop = asyncio.get_running_loop()
        input_task: asyncio.Task | None = None
        watch_task: asyncio.Task | None = None
        self._needs_render = True
        try:
            while True:
                self._flush_render()
                if input_task is None:
                    input_task = loop.create_task(self._input_events.next_event())
                if watch_task is None:
                    watch_task = loop.create_task(self._watch_events.next_event())
                waiting = {input_task, watch_task}
                if self._compile_task is not None:
                    waiting.add(self._compile_task)
                done, _pending = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

                if self._compile_task is not None and self._compile_task in done:
                    self._finish_compile(self._compile_task)
                if watch_task in done:
                    event, watch_task = watch_task.result(), None
                    outcome = self._handle_watch_event(event)
                    if outcome is not None:
                        return self._finish(outcome)
                if input_task in done:
                    event, input_task = input_task.result(), None
                    outcome = self._handle_input(event)
                    if outcome is not None:
                        return self._finish(outcome)
        finally:
            for task in (input_task, watch_task, self._compile_task):
                if task is not None and not task.done():
                    task.cancel()

    def _finish(self, outcome: SessionOutcome) -> SessionOutcome:
        if outcome.failed:
            logger.error("session ending: %s", outcome.message)
        else:
            logger.info("session ending: %s", outcome.kind.value)
        return outcome
