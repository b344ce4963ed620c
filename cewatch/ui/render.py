"""Frame composition for the panel view.

``render_frame`` is a pure function of ``SessionState`` and terminal size:
it lays out regions, draws borders and titles, wraps and scrolls panel text
and returns composed ANSI rows ready to paint.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ansi import display_width, pad_ansi_line, sanitize_service_text, slice_ansi_line, wrap_ansi_line
from ..compiler.models import StreamLine
from ..highlight import FALLBACK_STYLE, highlight_assembly
from ..ui_theme import DEFAULT_THEME, UITheme
from .content import panel_lines
from .layout import PanelRegion, Rect, plan_regions
from .state import PanelId, SessionState

BUSY_MARKER = "compiling…"
PLACEHOLDER_TITLE = "cewatch"
HELP_HINTS = (
    "j/k scroll  h/l pan  tab cycle panels",
    "enter focus  o orientation  q quit",
)


@dataclass(frozen=True)
class Frame:
    rows: list[str]
    regions: list[PanelRegion]
    scroll_limits: dict[PanelId, tuple[int, int]] = field(default_factory=dict)


def _diagnostic_style(line: StreamLine, theme: UITheme) -> str:
    if line.source_tag is None:
        return ""
    label = line.source_tag.label.lower()
    if "error" in label:
        return theme.diagnostic_error
    if "warning" in label:
        return theme.diagnostic_warning
    if "note" in label:
        return theme.diagnostic_note
    return ""


def styled_panel_lines(state: SessionState, panel: PanelId, theme: UITheme, style: str) -> list[str]:
    """Return display-ready (sanitized, optionally colored) lines for ``panel``."""
    lines = panel_lines(state.latest_result, panel)
    texts = [sanitize_service_text(line.text) for line in lines]
    if not theme.colored:
        return texts
    if panel is PanelId.ASSEMBLY:
        return highlight_assembly(texts, style)
    out: list[str] = []
    for line, text in zip(lines, texts):
        assert isinstance(line, StreamLine)
        sgr = _diagnostic_style(line, theme)
        out.append(f"{sgr}{text}{theme.reset}" if sgr and text else text)
    return out


def panel_title(state: SessionState, panel: PanelId) -> str:
    parts = [panel.title]
    result = state.latest_result
    if result is not None and panel is not PanelId.ASSEMBLY:
        parts.append(f"exit {result.exit_code}")
        if result.execution is not None:
            parts.append(f"run exit {result.execution.exit_code}")
    return " · ".join(parts)


def _border_top(width: int, title: str, busy: bool, border: str, theme: UITheme) -> str:
    inner = width - 2
    label = f" {title} "
    if busy:
        label_busy = f"{BUSY_MARKER} "
    else:
        label_busy = ""
    if display_width(label) + display_width(label_busy) > inner:
        label = slice_ansi_line(label, 0, max(0, inner))
        label_busy = ""
    fill = "─" * max(0, inner - display_width(label) - display_width(label_busy))
    title_text = f"{theme.title}{label}{theme.reset}" if theme.colored else label
    busy_text = f"{theme.title_busy}{label_busy}{theme.reset}" if theme.colored and label_busy else label_busy
    return f"{border}┌{theme.reset}{title_text}{border}{fill}{theme.reset}{busy_text}{border}┐{theme.reset}"


def _boxed(rect: Rect, title: str, body: list[str], busy: bool, border: str, theme: UITheme) -> list[str]:
    """Draw a bordered box exactly ``rect.width`` x ``rect.height`` cells."""
    if rect.width < 2 or rect.height < 2:
        return [" " * rect.width for _ in range(rect.height)]
    inner_w = rect.width - 2
    inner_h = rect.height - 2
    rows = [_border_top(rect.width, title, busy, border, theme)]
    for idx in range(inner_h):
        text = body[idx] if idx < len(body) else ""
        rows.append(f"{border}│{theme.reset}{pad_ansi_line(text, inner_w)}{border}│{theme.reset}")
    rows.append(f"{border}└{'─' * inner_w}┘{theme.reset}")
    return rows


def _panel_body(
    lines: list[str],
    inner_w: int,
    inner_h: int,
    vertical_offset: int,
    horizontal_offset: int,
) -> tuple[list[str], tuple[int, int]]:
    """Wrap, scroll and clip panel text; also return the offset limits."""
    wrapped: list[str] = []
    for line in lines:
        wrapped.extend(wrap_ansi_line(line, inner_w))
    widest = max((display_width(row) for row in wrapped), default=0)
    limits = (max(0, len(wrapped) - 1), max(0, widest - 1))
    top = min(vertical_offset, limits[0])
    left = min(horizontal_offset, limits[1])
    visible = wrapped[top:top + max(0, inner_h)]
    return [slice_ansi_line(row, left, inner_w) for row in visible], limits


def _placeholder_body(state: SessionState) -> list[str]:
    if state.latest_result is None:
        headline = "waiting for the first compile…" if state.compiling else "no compile result yet"
    else:
        headline = f"no output (exit {state.latest_result.exit_code})"
    return [headline, "", *HELP_HINTS]


def _compose(regions: list[tuple[Rect, list[str]]], columns: int, rows: int) -> list[str]:
    screen: list[str] = []
    for y in range(rows):
        covering = sorted(
            (rect.x, body[y - rect.y])
            for rect, body in regions
            if rect.y <= y < rect.y + rect.height
        )
        line = "".join(part for _x, part in covering)
        screen.append(line if covering else " " * columns)
    return screen


def render_frame(
    state: SessionState,
    columns: int,
    rows: int,
    theme: UITheme = DEFAULT_THEME,
    style: str = FALLBACK_STYLE,
) -> Frame:
    """Render the whole terminal for ``state`` at ``columns`` x ``rows``."""
    columns = max(1, columns)
    rows = max(1, rows)
    status_rows = 1 if state.status and rows > 1 else 0
    area = Rect(0, 0, columns, rows - status_rows)

    regions = plan_regions(state, area)
    drawn: list[tuple[Rect, list[str]]] = []
    limits: dict[PanelId, tuple[int, int]] = {}
    for region in regions:
        rect = region.rect
        border = theme.border_selected if region.selected else theme.border
        if region.panel is None:
            body = [f"{theme.placeholder}{line}{theme.reset}" if line else "" for line in _placeholder_body(state)]
            body = [slice_ansi_line(line, 0, max(0, rect.width - 2)) for line in body]
            drawn.append((rect, _boxed(rect, PLACEHOLDER_TITLE, body, state.compiling, border, theme)))
            continue
        view = state.view(region.panel)
        body, limits[region.panel] = _panel_body(
            styled_panel_lines(state, region.panel, theme, style),
            max(0, rect.width - 2),
            max(0, rect.height - 2),
            view.vertical_offset,
            view.horizontal_offset,
        )
        drawn.append(
            (rect, _boxed(rect, panel_title(state, region.panel), body, state.compiling, border, theme))
        )

    screen = _compose(drawn, columns, area.height)
    if status_rows:
        status = slice_ansi_line(" " + " ".join(state.status.split()), 0, columns)
        screen.append(f"{theme.status}{pad_ansi_line(status, columns)}{theme.reset}")
    return Frame(rows=screen, regions=regions, scroll_limits=limits)
