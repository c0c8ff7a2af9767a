"""Tests for ascii_render module."""

import logging

from ascii_render import compute_scale, render
from gridplan import compile_grid


class TestComputeScale:
    """Tests for the character scale."""

    def test_multiple_of_all_bases(self) -> None:
        """container + gutter is a multiple of every basis."""
        plan = compile_grid(["x-x x", ("distribute", 2)])
        width = compute_scale(plan, min_width=40, gutter=1)
        assert width == 41
        assert (width + 1) % 6 == 0

    def test_at_least_min_width(self) -> None:
        """Small bases are scaled up to the minimum width."""
        plan = compile_grid(["x x"])
        assert compute_scale(plan, min_width=10, gutter=2) == 10

    def test_empty_plan(self) -> None:
        """With no cells the scale is just the minimum width."""
        assert compute_scale(compile_grid([]), min_width=40, gutter=1) == 40

    def test_capped(self, caplog) -> None:
        """The LCM stops growing past max_scale, and says so."""
        plan = compile_grid([("distribute", 7), ("distribute", 11)])
        with caplog.at_level(logging.INFO, logger="ascii_render"):
            width = compute_scale(plan, min_width=40, max_scale=10, gutter=1)
        assert width == 41
        assert "capped=True" in caplog.text


class TestRender:
    """Tests for the ASCII preview."""

    def test_two_rows(self) -> None:
        """Exact integer widths, gutters between cells and rows."""
        plan = compile_grid(["x-x x", ("distribute", 2)])
        assert render(plan, color=False) == (
            "1" * 27 + " " + "2" * 13 + "\n"
            "\n"
            + "3" * 20 + " " + "4" * 20
        )

    def test_offsets(self) -> None:
        """Blank columns render as leading space."""
        plan = compile_grid([" x", "x-x"])
        lines = render(plan, min_width=9, color=False).split("\n")
        assert lines == [" " * 5 + "1" * 4, "", "2" * 9]

    def test_full_rows_span_preview_width(self) -> None:
        """Every full row is exactly as wide as the container."""
        plan = compile_grid(["x x-x", "x  x", ("distribute", 4)])
        width = compute_scale(plan)
        for line in render(plan, color=False).split("\n"):
            if line:
                assert len(line) == width

    def test_blank_row(self) -> None:
        """A blank row renders as an empty line."""
        plan = compile_grid(["x", "", "x"])
        assert render(plan, min_width=3, color=False).split("\n") == ["111", "", "", "", "222"]

    def test_color(self) -> None:
        """Colored output keeps the cell bodies; plain output has no escapes."""
        plan = compile_grid([("distribute", 2)])
        colored = render(plan)
        assert "1" * 20 in colored and "2" * 20 in colored
        assert "\x1b[" not in render(plan, color=False)
