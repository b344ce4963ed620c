"""Panel UI: session state, transitions, layout and frame rendering."""

from .layout import PanelRegion, Rect, plan_regions, split_area
from .machine import NO_CHANGE, QUIT, RENDER, Transition, UIStateMachine
from .render import Frame, render_frame
from .state import Orientation, PanelId, PanelView, SessionState

__all__ = [
    "Frame",
    "NO_CHANGE",
    "Orientation",
    "PanelId",
    "PanelRegion",
    "PanelView",
    "QUIT",
    "RENDER",
    "Rect",
    "SessionState",
    "Transition",
    "UIStateMachine",
    "plan_regions",
    "render_frame",
    "split_area",
]
