"""Command-line front door for cewatch.

Parses options, layers them over the config file defaults, configures
logging and then runs either the live session or a single compile.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from . import config, logging_setup
from .errors import CompileError, SourceError, WatchSetupError
from .runtime import SessionOptions, run_once, run_session
from .ui import Orientation
from .ui_theme import available_theme_names

EXIT_COMPILE_FAILED = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cewatch",
        description="Run Compiler Explorer on a local source file whenever it changes.",
    )
    parser.add_argument("file", help="Source file to watch.")
    parser.add_argument(
        "compiler_args",
        nargs=argparse.REMAINDER,
        help="Compiler flags passed verbatim to the service; everything after FILE is forwarded.",
    )
    parser.add_argument("-c", "--compiler", default=None, help="Compiler id (default: clang_trunk).")
    parser.add_argument("--url", default=None, help="Compiler Explorer base URL (default: https://godbolt.org).")
    parser.add_argument(
        "--orientation",
        choices=config.ORIENTATION_NAMES,
        default=None,
        help="Stack panels vertically or place them side by side.",
    )
    parser.add_argument(
        "-x",
        "--execute",
        action="store_true",
        default=None,
        help="Also run the compiled program and show its output.",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for assembly highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--once", action="store_true", help="Compile once, print the output and exit.")
    parser.add_argument("--log-level", default=None, help="Log level for the log file (default: INFO).")
    return parser


def _compiler_args(raw: list[str]) -> tuple[str, ...]:
    if raw and raw[0] == "--":
        raw = raw[1:]
    return tuple(raw)


def resolve_options(args: argparse.Namespace) -> SessionOptions:
    """Merge parsed CLI arguments with config defaults."""
    orientation = args.orientation or config.load_orientation() or config.DEFAULT_ORIENTATION
    execute = args.execute if args.execute is not None else config.load_execute()
    service_url = args.url or config.load_service_url() or config.DEFAULT_SERVICE_URL
    return SessionOptions(
        path=Path(args.file),
        compiler_id=args.compiler or config.load_compiler_id() or config.DEFAULT_COMPILER_ID,
        service_url=service_url.rstrip("/"),
        arguments=_compiler_args(args.compiler_args),
        execute=bool(execute),
        orientation=Orientation(orientation),
        style=args.style or config.load_style() or config.DEFAULT_STYLE,
        theme_name=args.theme or config.load_theme_name(),
        no_color=bool(args.no_color),
    )


def _is_interactive() -> bool:
    try:
        return os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())
    except (OSError, ValueError):
        return False


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch cewatch on a source file."""
    args = build_parser().parse_args(argv)
    options = resolve_options(args)
    if not options.path.is_file():
        raise SystemExit(f"File not found: {options.path}")

    runtime = logging_setup.configure(args.log_level)

    if args.once or not _is_interactive():
        try:
            status = run_once(options)
        except (SourceError, CompileError) as exc:
            print(exc.status_text(), file=sys.stderr)
            raise SystemExit(EXIT_COMPILE_FAILED) from exc
        if status:
            raise SystemExit(status)
        return

    try:
        outcome = run_session(options)
    except WatchSetupError as exc:
        raise SystemExit(exc.status_text()) from exc
    except KeyboardInterrupt:
        raise SystemExit(EXIT_INTERRUPTED) from None
    if outcome.failed:
        raise SystemExit(f"{outcome.message} (log: {runtime.file_path})")


if __name__ == "__main__":
    main()
