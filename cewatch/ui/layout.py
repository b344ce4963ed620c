"""Pure layout math: which panels get which screen rectangles."""

from __future__ import annotations

from dataclasses import dataclass

from .content import panels_with_content
from .state import Orientation, PanelId, SessionState


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class PanelRegion:
    """One bordered region; ``panel`` is ``None`` for the empty placeholder."""

    panel: PanelId | None
    rect: Rect
    selected: bool


def split_area(area: Rect, count: int, orientation: Orientation) -> list[Rect]:
    """Divide ``area`` into ``count`` equal slices.

    Vertical orientation stacks slices top to bottom, horizontal places them
    side by side. Leftover cells go to the leading slices, one each.
    """
    if count <= 0:
        return []
    total = area.height if orientation is Orientation.VERTICAL else area.width
    base, extra = divmod(total, count)
    rects: list[Rect] = []
    cursor = 0
    for idx in range(count):
        size = base + (1 if idx < extra else 0)
        if orientation is Orientation.VERTICAL:
            rects.append(Rect(area.x, area.y + cursor, area.width, size))
        else:
            rects.append(Rect(area.x + cursor, area.y, size, area.height))
        cursor += size
    return rects


def plan_regions(state: SessionState, area: Rect) -> list[PanelRegion]:
    """Assign screen regions for ``state``.

    A focused panel takes the whole area. Otherwise only panels with content
    share it; with none, a single placeholder region is shown.
    """
    if state.focused_panel is not None:
        return [PanelRegion(state.focused_panel, area, selected=False)]

    panels = panels_with_content(state.latest_result)
    if not panels:
        return [PanelRegion(None, area, selected=False)]

    rects = split_area(area, len(panels), state.orientation)
    return [
        PanelRegion(panel, rect, selected=panel is state.selected_panel)
        for panel, rect in zip(panels, rects)
    ]
