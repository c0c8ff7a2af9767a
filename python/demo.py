#!/usr/bin/env python3
"""
Demonstration of the gridplan layout compiler.
"""

import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ascii_render import render
from css_render import format_formula, render_css
from gridplan import LayoutPlan, compile_grid, compile_grid_text

LAYOUTS = {
    "gallery": [
        "x-x x",
        "x x-x",
        ("distribute", 4),
    ],
    "offsets": [
        " x-x-x",
        "x  x x",
        "",
        "x-x-x-x",
    ],
    "sidebar": "x x-x-x|x x-x-x|distribute 2",
}


def plan_table(plan: LayoutPlan) -> Table:
    """Tabulate the cells of a plan."""
    table = Table(title=f"{plan.columns} columns, {plan.row_count} rows")
    for header in ("#", "row", "width", "margin-left", "margin-right", "margin-bottom"):
        table.add_column(header)

    def fmt(formula) -> str:
        if formula is None:
            return "-"
        return format_formula(formula, plan.gutter_width, plan.gutter_height)

    for cell in plan.cells:
        table.add_row(
            str(cell.index),
            str(cell.row),
            fmt(cell.width),
            fmt(cell.margin_left),
            fmt(cell.margin_right),
            fmt(cell.margin_bottom),
        )
    return table


def show(console: Console, name: str, plan: LayoutPlan) -> None:
    """Print one compiled grid: table, preview and CSS."""
    console.rule(name)
    console.print(plan_table(plan))
    console.print(Panel(Text.from_ansi(render(plan, min_width=48)), title="preview"))
    console.print(Panel(render_css(plan, f".{name}"), title="css"))


def main() -> None:
    if "-v" in sys.argv[1:]:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    console = Console()
    for name, spec in LAYOUTS.items():
        if isinstance(spec, str):
            plan = compile_grid_text(spec, "20px", "1rem")
        else:
            plan = compile_grid(spec, "20px")
        show(console, name, plan)


if __name__ == "__main__":
    main()
