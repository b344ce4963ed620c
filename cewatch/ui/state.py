"""Mutable UI state for one session.

Per-panel view state lives in a fixed table indexed by ``PanelId``; panel
cycling is modular arithmetic over that index.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..compiler.models import CompileResult


class PanelId(enum.IntEnum):
    ASSEMBLY = 0
    STDOUT = 1
    STDERR = 2

    @property
    def title(self) -> str:
        return _PANEL_TITLES[self]

    def step(self, delta: int) -> PanelId:
        """Return the panel ``delta`` positions away, wrapping around."""
        return PanelId((int(self) + delta) % len(PanelId))


_PANEL_TITLES = {
    PanelId.ASSEMBLY: "Assembly",
    PanelId.STDOUT: "Stdout",
    PanelId.STDERR: "Stderr",
}


class Orientation(enum.Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    def toggled(self) -> Orientation:
        if self is Orientation.VERTICAL:
            return Orientation.HORIZONTAL
        return Orientation.VERTICAL


@dataclass
class PanelView:
    vertical_offset: int = 0
    horizontal_offset: int = 0

    def reset(self) -> None:
        self.vertical_offset = 0
        self.horizontal_offset = 0


def _new_panel_views() -> list[PanelView]:
    return [PanelView() for _ in PanelId]


@dataclass
class SessionState:
    orientation: Orientation = Orientation.VERTICAL
    panel_views: list[PanelView] = field(default_factory=_new_panel_views)
    selected_panel: PanelId = PanelId.ASSEMBLY
    focused_panel: PanelId | None = None
    latest_result: CompileResult | None = None
    status: str = ""
    compiling: bool = False
    # Largest (vertical, horizontal) offsets that still show content, as of the last frame.
    scroll_limits: dict[PanelId, tuple[int, int]] = field(default_factory=dict)

    def view(self, panel: PanelId) -> PanelView:
        return self.panel_views[panel]

    @property
    def selected_view(self) -> PanelView:
        return self.panel_views[self.selected_panel]

    @property
    def has_result(self) -> bool:
        return self.latest_result is not None
