"""Immutable value types describing one compile round trip."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceTag:
    """Source location a diagnostic line points at."""

    line_number: int
    label: str


@dataclass(frozen=True)
class StreamLine:
    text: str
    source_tag: SourceTag | None = None


@dataclass(frozen=True)
class SourceRef:
    """Source line an assembly instruction was generated from."""

    file: str | None
    line_number: int


@dataclass(frozen=True)
class AsmLine:
    text: str
    source_ref: SourceRef | None = None


@dataclass(frozen=True)
class ExecutionResult:
    exit_code: int
    stdout: tuple[StreamLine, ...] = ()
    stderr: tuple[StreamLine, ...] = ()


@dataclass(frozen=True)
class CompileResult:
    exit_code: int
    stdout: tuple[StreamLine, ...] = ()
    stderr: tuple[StreamLine, ...] = ()
    assembly: tuple[AsmLine, ...] = ()
    execution: ExecutionResult | None = None


@dataclass(frozen=True)
class CompileRequest:
    source: str
    user_arguments: tuple[str, ...] = ()
    execute: bool = False

    def to_json(self) -> dict[str, object]:
        """Build the Compiler Explorer ``/compile`` request body."""
        return {
            "source": self.source,
            "options": {
                "userArguments": " ".join(self.user_arguments),
                "filters": {
                    "execute": self.execute,
                    "intel": True,
                    "directives": True,
                    "commentOnly": True,
                    "labels": True,
                    "demangle": True,
                },
            },
            "allowStoreCodeDebug": True,
        }
