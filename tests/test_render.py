"""Layout and frame rendering tests."""

from __future__ import annotations

import unittest

from cewatch.ansi import display_width, strip_ansi
from cewatch.compiler import AsmLine, CompileResult, ExecutionResult, SourceTag, StreamLine
from cewatch.ui import (
    Orientation,
    PanelId,
    PanelRegion,
    Rect,
    SessionState,
    plan_regions,
    render_frame,
    split_area,
)
from cewatch.ui.render import BUSY_MARKER, panel_title
from cewatch.ui_theme import DEFAULT_THEME, PLAIN_THEME, available_theme_names, resolve_theme


def _plain(frame) -> list[str]:
    return [strip_ansi(row) for row in frame.rows]


class SplitAreaTests(unittest.TestCase):
    def test_vertical_split_gives_leftover_rows_to_leading_slices(self) -> None:
        rects = split_area(Rect(0, 0, 20, 10), 3, Orientation.VERTICAL)
        self.assertEqual([r.height for r in rects], [4, 3, 3])
        self.assertEqual([r.y for r in rects], [0, 4, 7])
        self.assertTrue(all(r.width == 20 for r in rects))

    def test_horizontal_split_places_slices_side_by_side(self) -> None:
        rects = split_area(Rect(0, 0, 40, 12), 3, Orientation.HORIZONTAL)
        self.assertEqual([(r.x, r.width) for r in rects], [(0, 14), (14, 13), (27, 13)])
        self.assertTrue(all(r.height == 12 for r in rects))

    def test_zero_count_is_empty(self) -> None:
        self.assertEqual(split_area(Rect(0, 0, 5, 5), 0, Orientation.VERTICAL), [])


class PlanRegionsTests(unittest.TestCase):
    def test_only_assembly_fills_whole_display(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=0, assembly=(AsmLine("main:"), AsmLine("  ret")))
        )
        regions = plan_regions(state, Rect(0, 0, 80, 24))
        self.assertEqual(regions, [PanelRegion(PanelId.ASSEMBLY, Rect(0, 0, 80, 24), True)])

    def test_only_stderr_is_laid_out(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=1, stderr=(StreamLine("<source>:1:1: error: x"),))
        )
        regions = plan_regions(state, Rect(0, 0, 80, 24))
        self.assertEqual([r.panel for r in regions], [PanelId.STDERR])
        self.assertFalse(regions[0].selected)

    def test_focused_panel_takes_full_area_unselected(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=0,
                assembly=(AsmLine("ret"),),
                stdout=(StreamLine("hello"),),
            ),
            selected_panel=PanelId.STDOUT,
            focused_panel=PanelId.STDOUT,
        )
        regions = plan_regions(state, Rect(0, 0, 50, 20))
        self.assertEqual(regions, [PanelRegion(PanelId.STDOUT, Rect(0, 0, 50, 20), False)])

    def test_no_content_gives_placeholder(self) -> None:
        for result in (None, CompileResult(exit_code=0)):
            with self.subTest(result=result):
                regions = plan_regions(SessionState(latest_result=result), Rect(0, 0, 30, 8))
                self.assertEqual(regions, [PanelRegion(None, Rect(0, 0, 30, 8), False)])

    def test_execution_output_counts_as_content(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=0,
                execution=ExecutionResult(exit_code=0, stdout=(StreamLine("ran"),)),
            )
        )
        self.assertEqual([r.panel for r in plan_regions(state, Rect(0, 0, 30, 8))], [PanelId.STDOUT])


class RenderFrameTests(unittest.TestCase):
    def test_frame_has_exact_dimensions(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=0,
                assembly=(AsmLine("main:"), AsmLine("        mov     eax, 0")),
                stdout=(StreamLine("out"),),
                stderr=(StreamLine("warn", SourceTag(3, "warning")),),
            )
        )
        for theme in (DEFAULT_THEME, PLAIN_THEME):
            for orientation in Orientation:
                with self.subTest(theme=theme.name, orientation=orientation):
                    state.orientation = orientation
                    frame = render_frame(state, 41, 13, theme)
                    self.assertEqual(len(frame.rows), 13)
                    self.assertTrue(all(display_width(row) == 41 for row in frame.rows))

    def test_single_assembly_panel_shows_lines_in_border(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=0, assembly=(AsmLine("main:"), AsmLine("  ret")))
        )
        rows = _plain(render_frame(state, 30, 6, PLAIN_THEME))
        self.assertTrue(rows[0].startswith("┌ Assembly "))
        self.assertEqual(rows[1], "│main:" + " " * 23 + "│")
        self.assertEqual(rows[2], "│  ret" + " " * 23 + "│")
        self.assertEqual(rows[-1], "└" + "─" * 28 + "┘")

    def test_stderr_only_result_shows_diagnostic_text(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=1, stderr=(StreamLine("error: expected ';'"),))
        )
        frame = render_frame(state, 40, 5, PLAIN_THEME)
        rows = _plain(frame)
        self.assertIn("Stderr · exit 1", rows[0])
        self.assertIn("error: expected ';'", rows[1])
        self.assertEqual(set(frame.scroll_limits), {PanelId.STDERR})

    def test_long_lines_wrap_without_losing_characters(self) -> None:
        text = "abcdefghijklmnopqrstuvwxyz"
        state = SessionState(latest_result=CompileResult(exit_code=0, assembly=(AsmLine(text),)))
        frame = render_frame(state, 12, 6, PLAIN_THEME)
        body = "".join(row[1:-1] for row in _plain(frame)[1:4])
        self.assertEqual(body.rstrip(), text)
        self.assertEqual(frame.scroll_limits[PanelId.ASSEMBLY], (2, 9))

    def test_offsets_scroll_and_pan_body(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=0,
                assembly=tuple(AsmLine(f"line{i}") for i in range(10)),
            )
        )
        state.view(PanelId.ASSEMBLY).vertical_offset = 3
        state.view(PanelId.ASSEMBLY).horizontal_offset = 2
        rows = _plain(render_frame(state, 20, 5, PLAIN_THEME))
        self.assertTrue(rows[1].startswith("│ne3"))

    def test_placeholder_before_first_result(self) -> None:
        rows = _plain(render_frame(SessionState(compiling=True), 50, 8, PLAIN_THEME))
        self.assertIn("cewatch", rows[0])
        self.assertIn(BUSY_MARKER, rows[0])
        self.assertIn("waiting for the first compile…", rows[1])

    def test_placeholder_for_empty_result(self) -> None:
        rows = _plain(render_frame(SessionState(latest_result=CompileResult(exit_code=0)), 50, 8, PLAIN_THEME))
        self.assertIn("no output (exit 0)", rows[1])

    def test_status_row_is_last_and_shrinks_panels(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=0, assembly=(AsmLine("ret"),)),
            status="compile request failed: timeout",
        )
        frame = render_frame(state, 60, 10, PLAIN_THEME)
        rows = _plain(frame)
        self.assertEqual(len(rows), 10)
        self.assertIn("compile request failed: timeout", rows[-1])
        self.assertEqual(frame.regions[0].rect, Rect(0, 0, 60, 9))

    def test_execution_output_follows_compile_output(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=0,
                stdout=(StreamLine("compiler says hi"),),
                execution=ExecutionResult(exit_code=3, stdout=(StreamLine("program says hi"),)),
            )
        )
        self.assertEqual(panel_title(state, PanelId.STDOUT), "Stdout · exit 0 · run exit 3")
        rows = _plain(render_frame(state, 50, 6, PLAIN_THEME))
        self.assertIn("compiler says hi", rows[1])
        self.assertIn("program says hi", rows[2])

    def test_control_bytes_from_service_are_escaped(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=0, stdout=(StreamLine("bell\x07\x1b[31mred"),))
        )
        rows = _plain(render_frame(state, 40, 4, PLAIN_THEME))
        self.assertIn("bell\\x07red", rows[1])

    def test_render_does_not_mutate_state(self) -> None:
        state = SessionState(
            latest_result=CompileResult(exit_code=0, assembly=(AsmLine("ret"),)),
        )
        state.view(PanelId.ASSEMBLY).vertical_offset = 99
        render_frame(state, 20, 5, PLAIN_THEME)
        self.assertEqual(state.view(PanelId.ASSEMBLY).vertical_offset, 99)
        self.assertEqual(state.scroll_limits, {})


class ThemeTests(unittest.TestCase):
    def test_resolve_theme(self) -> None:
        self.assertIs(resolve_theme(None), DEFAULT_THEME)
        self.assertEqual(resolve_theme(" Ocean ").name, "ocean")
        self.assertIs(resolve_theme("nope"), DEFAULT_THEME)
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)
        self.assertFalse(PLAIN_THEME.colored)
        self.assertNotIn("plain", available_theme_names())

    def test_plain_theme_frame_has_no_escapes(self) -> None:
        state = SessionState(
            latest_result=CompileResult(
                exit_code=1,
                assembly=(AsmLine("mov eax, 1"),),
                stderr=(StreamLine("error: x", SourceTag(1, "error")),),
            ),
            status="busy",
        )
        frame = render_frame(state, 40, 10, PLAIN_THEME)
        self.assertFalse(any("\x1b" in row for row in frame.rows))


if __name__ == "__main__":
    unittest.main()
