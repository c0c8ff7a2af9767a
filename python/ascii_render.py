"""
ASCII rendering for gridplan layouts.

Evaluates a LayoutPlan at a character scale where every width and margin is an
exact integer, then draws one line per row with colored cell bodies.
"""

from __future__ import annotations

import logging
from math import lcm
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import Formula, LayoutCell, LayoutPlan

__all__ = ["compute_scale", "render_row", "render"]

logger = logging.getLogger(__name__)

COLORS: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def compute_scale(
    plan: LayoutPlan,
    min_width: int = 40,
    max_scale: int = 10000,
    gutter: int = 1,
) -> int:
    """
    Compute a container width (in characters) giving exact integer cell sizes.

    Every width is span * (container + gutter) / basis - gutter, so
    container + gutter must be a multiple of the LCM of all bases.

    Args:
        plan: The layout to compute a scale for
        min_width: Smallest acceptable container width
        max_scale: Maximum LCM before giving up on exactness (default 10000)
        gutter: Gutter width in characters

    Returns:
        Container width in characters
    """
    scale = 1
    capped = False
    for basis in sorted({cell.basis for cell in plan.cells}):
        new_scale = lcm(scale, basis)
        if new_scale > max_scale:
            # Stop growing - some widths will be rounded
            capped = True
            break
        scale = new_scale

    multiple = max(1, -(-(min_width + gutter) // scale))
    width = scale * multiple - gutter

    logger.info(
        "compute_scale: common denominator=%d, width=%d, capped=%s (max_scale=%d)",
        scale,
        width,
        capped,
        max_scale,
    )
    return width


def _chars(formula: Formula | None, width: int, gutter: int) -> int:
    if formula is None:
        return 0
    return round(formula.evaluate(width, gutter))


def render_row(
    cells: tuple[LayoutCell, ...],
    width: int,
    gutter: int,
    color_fn: Callable[[int], Callable[[str], str]],
) -> str:
    """Render one row: left margin, body (last digit of the index), right margin."""
    parts: list[str] = []
    for cell in cells:
        body = str(cell.index % 10) * _chars(cell.width, width, gutter)
        parts.append(" " * _chars(cell.margin_left, width, gutter))
        parts.append(color_fn(cell.index)(body))
        parts.append(" " * _chars(cell.margin_right, width, gutter))
    return "".join(parts)


def render(
    plan: LayoutPlan,
    min_width: int = 40,
    max_scale: int = 10000,
    gutter: int = 1,
    color: bool = True,
) -> str:
    """
    Render a LayoutPlan as an ASCII preview.

    Args:
        plan: The layout to render
        min_width: Smallest container width in characters (default 40)
        max_scale: Maximum scale for exact widths (default 10000)
        gutter: Gutter width in characters, also the number of blank lines between rows
        color: Color cell bodies with ANSI codes

    Returns:
        One line per row, rows separated by `gutter` blank lines where the plan
        has a bottom margin
    """
    width = compute_scale(plan, min_width, max_scale, gutter)

    def color_fn(index: int) -> Callable[[str], str]:
        if not color:
            return lambda s: s
        return COLORS[(index - 1) % len(COLORS)]

    lines: list[str] = []
    for row_number, cells in enumerate(plan.rows(), start=1):
        lines.append(render_row(cells, width, gutter, color_fn))
        if row_number != plan.row_count:
            lines.extend([""] * gutter)

    return "\n".join(lines)
