"""Project a ``CompileResult`` onto the three panel text streams."""

from __future__ import annotations

from ..compiler.models import AsmLine, CompileResult, StreamLine
from .state import PanelId


def panel_lines(result: CompileResult | None, panel: PanelId) -> list[AsmLine] | list[StreamLine]:
    """Return the lines shown in ``panel``.

    Execution output follows the compile-phase lines of the same stream.
    """
    if result is None:
        return []
    if panel is PanelId.ASSEMBLY:
        return list(result.assembly)
    execution = result.execution
    if panel is PanelId.STDOUT:
        lines = list(result.stdout)
        if execution is not None:
            lines.extend(execution.stdout)
        return lines
    lines = list(result.stderr)
    if execution is not None:
        lines.extend(execution.stderr)
    return lines


def panel_has_content(result: CompileResult | None, panel: PanelId) -> bool:
    return bool(panel_lines(result, panel))


def panels_with_content(result: CompileResult | None) -> list[PanelId]:
    return [panel for panel in PanelId if panel_has_content(result, panel)]


def panel_line_count(result: CompileResult | None, panel: PanelId) -> int:
    return len(panel_lines(result, panel))
