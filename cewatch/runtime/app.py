"""Wire the compile client, bridges, terminal and session together."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from ..ansi import sanitize_service_text
from ..compiler import CompileResult, CompilerExplorerClient
from ..input import InputBridge
from ..terminal import TerminalController
from ..ui import Orientation, SessionState, UIStateMachine
from ..ui_theme import resolve_theme
from ..watch import FileWatcherBridge
from .session import Session, SessionOutcome
from .source import read_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionOptions:
    path: Path
    compiler_id: str
    service_url: str
    arguments: tuple[str, ...] = ()
    execute: bool = False
    orientation: Orientation = Orientation.VERTICAL
    style: str = "monokai"
    theme_name: str | None = None
    no_color: bool = False

    def make_client(self) -> CompilerExplorerClient:
        return CompilerExplorerClient(self.service_url, self.compiler_id)


async def run_interactive(options: SessionOptions, terminal: TerminalController) -> SessionOutcome:
    """Run the live session; the terminal is restored on every exit path."""
    watcher = FileWatcherBridge(options.path)
    client = options.make_client()
    machine = UIStateMachine(
        SessionState(orientation=options.orientation),
        theme=resolve_theme(options.theme_name, no_color=options.no_color),
        style=options.style,
    )
    inputs = InputBridge(terminal.stdin_fd)

    async def compile_source(source: str) -> CompileResult:
        return await client.compile(source, options.arguments, options.execute)

    session = Session(
        path=watcher.path,
        machine=machine,
        compile_source=compile_source,
        input_events=inputs,
        watch_events=watcher,
        display=terminal,
    )
    logger.info(
        "session start: %s compiler=%s url=%s args=%s execute=%s",
        watcher.path,
        options.compiler_id,
        options.service_url,
        list(options.arguments),
        options.execute,
    )
    watcher.start()
    try:
        await session.startup()
        with terminal.raw_mode():
            inputs.start()
            try:
                return await session.run()
            finally:
                inputs.close()
    finally:
        watcher.stop()
        await client.aclose()


def run_session(options: SessionOptions) -> SessionOutcome:
    """Run the interactive session on the process's controlling terminal."""
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    return asyncio.run(run_interactive(options, terminal))


def _write_stream(lines, out: TextIO) -> None:
    for line in lines:
        out.write(sanitize_service_text(line.text) + "\n")


def print_result(result: CompileResult, out: TextIO, err: TextIO) -> int:
    """Print a result non-interactively and return the process exit status."""
    _write_stream(result.assembly, out)
    _write_stream(result.stdout, out)
    _write_stream(result.stderr, err)
    if result.execution is not None:
        _write_stream(result.execution.stdout, out)
        _write_stream(result.execution.stderr, err)
    if result.exit_code != 0 or result.execution is None:
        return result.exit_code
    return result.execution.exit_code


async def compile_once(options: SessionOptions) -> CompileResult:
    """Read and compile the file a single time."""
    source = read_source(options.path)
    client = options.make_client()
    try:
        return await client.compile(source, options.arguments, options.execute)
    finally:
        await client.aclose()


def run_once(options: SessionOptions, out: TextIO | None = None, err: TextIO | None = None) -> int:
    """Compile once, print the streams, and return an exit status."""
    result = asyncio.run(compile_once(options))
    return print_result(result, out or sys.stdout, err or sys.stderr)
