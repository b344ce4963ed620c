"""UI state machine: input and compile-result transitions over ``SessionState``.

Transitions report whether a repaint is needed and whether the session
should end; rendering itself is delegated to :mod:`cewatch.ui.render`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..compiler.models import CompileResult
from ..highlight import FALLBACK_STYLE
from ..input import InputClosed, InputEvent, KeyComboBinding, KeyComboRegistry, KeyPress, Resize
from ..ui_theme import DEFAULT_THEME, UITheme
from .content import panel_has_content, panel_line_count, panels_with_content
from .render import Frame, render_frame
from .state import Orientation, PanelId, SessionState

logger = logging.getLogger(__name__)

PAGE_ROWS = 10


@dataclass(frozen=True)
class Transition:
    needs_render: bool = False
    should_quit: bool = False


NO_CHANGE = Transition()
RENDER = Transition(needs_render=True)
QUIT = Transition(should_quit=True)


class UIStateMachine:
    """Owns ``SessionState`` and applies input, result and status transitions."""

    def __init__(
        self,
        state: SessionState | None = None,
        *,
        theme: UITheme = DEFAULT_THEME,
        style: str = FALLBACK_STYLE,
    ) -> None:
        self.state = state if state is not None else SessionState()
        self.theme = theme
        self.style = style
        self._quit_requested = False
        self._keys = KeyComboRegistry().register_bindings(
            KeyComboBinding("scroll_down", ("j", "DOWN"), lambda: self._scroll(1)),
            KeyComboBinding("scroll_up", ("k", "UP"), lambda: self._scroll(-1)),
            KeyComboBinding("page_down", ("PAGE_DOWN", " "), lambda: self._scroll(PAGE_ROWS)),
            KeyComboBinding("page_up", ("PAGE_UP",), lambda: self._scroll(-PAGE_ROWS)),
            KeyComboBinding("top", ("g", "HOME"), self._scroll_to_top),
            KeyComboBinding("pan_right", ("l", "RIGHT"), lambda: self._pan(1)),
            KeyComboBinding("pan_left", ("h", "LEFT"), lambda: self._pan(-1)),
            KeyComboBinding("next_panel", ("TAB",), lambda: self._cycle(1)),
            KeyComboBinding("previous_panel", ("SHIFT_TAB",), lambda: self._cycle(-1)),
            KeyComboBinding("next_panel_below", ("J",), lambda: self._cycle(1, Orientation.VERTICAL)),
            KeyComboBinding("previous_panel_above", ("K",), lambda: self._cycle(-1, Orientation.VERTICAL)),
            KeyComboBinding("next_panel_right", ("L",), lambda: self._cycle(1, Orientation.HORIZONTAL)),
            KeyComboBinding("previous_panel_left", ("H",), lambda: self._cycle(-1, Orientation.HORIZONTAL)),
            KeyComboBinding("toggle_focus", ("ENTER_CR", "ENTER_LF", "f"), self._toggle_focus),
            KeyComboBinding("leave_focus", ("ESC",), self._leave_focus),
            KeyComboBinding("toggle_orientation", ("o",), self._toggle_orientation),
            KeyComboBinding("quit", ("q", "CTRL_C"), self._request_quit),
        )

    # Input transitions

    def apply_input(self, event: InputEvent) -> Transition:
        """Apply one terminal event; unknown keys are no-ops."""
        if isinstance(event, Resize):
            return RENDER
        if isinstance(event, InputClosed):
            return NO_CHANGE
        assert isinstance(event, KeyPress)
        self._quit_requested = False
        handled = self._keys.dispatch(event.key)
        if self._quit_requested:
            return QUIT
        return RENDER if handled else NO_CHANGE

    def _request_quit(self) -> bool:
        self._quit_requested = True
        return False

    def _offset_limits(self, panel: PanelId) -> tuple[int, int | None]:
        limits = self.state.scroll_limits.get(panel)
        if limits is not None:
            return limits
        # Not drawn since the last result: bound by logical lines only.
        return max(0, panel_line_count(self.state.latest_result, panel) - 1), None

    def _scroll(self, delta: int) -> bool:
        view = self.state.selected_view
        max_vertical, _max_horizontal = self._offset_limits(self.state.selected_panel)
        if delta > 0:
            target = min(view.vertical_offset + delta, max(view.vertical_offset, max_vertical))
        else:
            target = max(0, view.vertical_offset + delta)
        if target == view.vertical_offset:
            return False
        view.vertical_offset = target
        return True

    def _scroll_to_top(self) -> bool:
        view = self.state.selected_view
        if view.vertical_offset == 0:
            return False
        view.vertical_offset = 0
        return True

    def _pan(self, delta: int) -> bool:
        view = self.state.selected_view
        _max_vertical, max_horizontal = self._offset_limits(self.state.selected_panel)
        target = max(0, view.horizontal_offset + delta)
        if delta > 0 and max_horizontal is not None:
            target = min(target, max(view.horizontal_offset, max_horizontal))
        if target == view.horizontal_offset:
            return False
        view.horizontal_offset = target
        return True

    def _cycle(self, delta: int, orientation: Orientation | None = None) -> bool:
        if self.state.focused_panel is not None:
            return False
        if orientation is not None and orientation is not self.state.orientation:
            return False
        self.state.selected_panel = self.state.selected_panel.step(delta)
        return True

    def _toggle_focus(self) -> bool:
        if self.state.focused_panel is None:
            if not panel_has_content(self.state.latest_result, self.state.selected_panel):
                return False
            self.state.focused_panel = self.state.selected_panel
        else:
            self.state.focused_panel = None
        return True

    def _leave_focus(self) -> bool:
        if self.state.focused_panel is None:
            return False
        self.state.focused_panel = None
        return True

    def _toggle_orientation(self) -> bool:
        self.state.orientation = self.state.orientation.toggled()
        return True

    # Session-driven transitions

    def apply_result(self, result: CompileResult) -> Transition:
        """Replace the displayed result and reset every panel to the top-left.

        Selection moves to the first drawn panel when the selected one is now
        empty, and focus on an emptied panel is dropped.
        """
        self.state.latest_result = result
        if not panel_has_content(result, self.state.selected_panel):
            shown = panels_with_content(result)
            if shown:
                self.state.selected_panel = shown[0]
        if self.state.focused_panel is not None and not panel_has_content(result, self.state.focused_panel):
            self.state.focused_panel = None
        for view in self.state.panel_views:
            view.reset()
        self.state.scroll_limits = {}
        self.state.status = ""
        return RENDER

    def set_status(self, text: str) -> Transition:
        """Annotate the current display with a one-line status message."""
        text = " ".join(str(text).split())
        if text == self.state.status:
            return NO_CHANGE
        self.state.status = text
        return RENDER

    def set_compiling(self, compiling: bool) -> Transition:
        if compiling == self.state.compiling:
            return NO_CHANGE
        self.state.compiling = compiling
        return RENDER

    # Projection

    def render(self, columns: int, rows: int) -> Frame:
        """Render the current state; remembers how far each drawn panel can scroll."""
        frame = render_frame(self.state, columns, rows, self.theme, self.style)
        self.state.scroll_limits = {**self.state.scroll_limits, **frame.scroll_limits}
        return frame
