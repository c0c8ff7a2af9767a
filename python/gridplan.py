"""
Grid layout compiler.
Pipeline: normalize (rows) -> resolve_columns -> layout (LayoutPlan).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from math import isfinite
from typing import Any, Sequence

from grid_parser import normalize, parse_grid_text
from grid_types import (
    FULL_WIDTH,
    GUTTER_HEIGHT,
    GUTTER_WIDTH,
    AsciiRow,
    ColumnOverflowError,
    DistributeRow,
    Formula,
    LayoutCell,
    LayoutOptions,
    LayoutPlan,
    Length,
    MalformedLengthError,
    MalformedSpecError,
    NormalizedRow,
    ParsedRow,
)

__all__ = [
    "AsciiRow",
    "DistributeRow",
    "LayoutOptions",
    "LayoutPlan",
    "LayoutState",
    "compile_grid",
    "compile_grid_text",
    "layout",
    "layout_row",
    "resolve_columns",
]

logger = logging.getLogger(__name__)


# =============================================================================
# Column Count
# =============================================================================


def resolve_columns(rows: Sequence[NormalizedRow]) -> int:
    """
    Unit-column count of the grid: the width of the widest ASCII row.

    Distribute rows carry their own count and are ignored. Returns 0 when
    there are no ASCII rows.
    """
    return max((row.width for row in rows if isinstance(row, ParsedRow)), default=0)


# =============================================================================
# Formulas
# =============================================================================


def column_pitch(basis: int) -> Formula:
    """One unit-column plus its trailing gutter: (100% + gutter) / basis."""
    return (FULL_WIDTH + GUTTER_WIDTH) * Fraction(1, basis)


def span_width(span: int, basis: int) -> Formula:
    """Width of a cell covering `span` of `basis` unit-columns, absorbing inner gutters."""
    return column_pitch(basis) * span - GUTTER_WIDTH


# =============================================================================
# Layout
# =============================================================================


@dataclass(frozen=True)
class LayoutState:
    """Counters threaded through the row fold."""

    row_index: int = 0
    cell_index: int = 0


def _layout_cell(
    state: LayoutState,
    position: int,
    last_position: int,
    row_count: int,
    span: int,
    blank: int,
    basis: int,
) -> LayoutCell:
    return LayoutCell(
        index=state.cell_index + position,
        row=state.row_index,
        position=position,
        span=span,
        blank_columns=blank,
        basis=basis,
        width=span_width(span, basis),
        margin_left=column_pitch(basis) * blank if blank else None,
        margin_right=GUTTER_WIDTH if position != last_position else None,
        margin_bottom=GUTTER_HEIGHT if state.row_index != row_count else None,
    )


def layout_row(
    row: NormalizedRow,
    state: LayoutState,
    columns: int,
    row_count: int,
) -> tuple[tuple[LayoutCell, ...], LayoutState]:
    """
    Lay out a single row.

    Args:
        row: The normalized row
        state: Counters after the previous row
        columns: Resolved (or overridden) unit-column count
        row_count: Total number of rows in the spec, for the last-row check

    Returns:
        Tuple of (cells of this row, counters after this row)

    Raises:
        ColumnOverflowError: If an ASCII row is wider than `columns`
        MalformedSpecError: If `row` is neither ParsedRow nor DistributeRow
    """
    state = LayoutState(state.row_index + 1, state.cell_index)

    match row:
        case ParsedRow(cells=cells):
            if cells and row.width > columns:
                raise ColumnOverflowError(
                    f"Row {state.row_index} is wider than the grid\n"
                    f"  Row width: {row.width} unit-columns\n"
                    f"  Grid columns: {columns}"
                )
            slots = [
                (cell.span, blank, columns)
                for cell, blank in zip(cells, row.blank_columns)
            ]
        case DistributeRow(count=count):
            slots = [(1, 0, count)] * count
        case _:
            raise MalformedSpecError(f"Unknown row type: {row!r}")

    laid_out = tuple(
        _layout_cell(state, position, len(slots), row_count, span, blank, basis)
        for position, (span, blank, basis) in enumerate(slots, start=1)
    )
    logger.debug("layout_row %d: %d cells", state.row_index, len(laid_out))
    return laid_out, LayoutState(state.row_index, state.cell_index + len(laid_out))


def layout(rows: Sequence[NormalizedRow], columns: int) -> tuple[LayoutCell, ...]:
    """Fold layout_row over all rows in order."""
    state = LayoutState()
    cells: list[LayoutCell] = []
    for row in rows:
        row_cells, state = layout_row(row, state, columns, len(rows))
        cells.extend(row_cells)
    return tuple(cells)


def _check_length(name: str, value: Any) -> None:
    # bool is an int subclass but never a length
    if isinstance(value, str):
        valid = bool(value.strip())
    elif isinstance(value, (int, float, Fraction)) and not isinstance(value, bool):
        valid = isfinite(value) and value >= 0
    else:
        valid = False

    if not valid:
        raise MalformedLengthError(
            f"Invalid {name}: {value!r}\n"
            f"  Expected a non-negative number (pixels) or a CSS length string, e.g. '20px'"
        )


def compile_grid(
    spec: Sequence[Any],
    gutter_width: Length = 0,
    gutter_height: Length | None = None,
    *,
    columns: int | None = None,
    options: LayoutOptions | None = None,
) -> LayoutPlan:
    """
    Compile a grid spec into a LayoutPlan.

    Args:
        spec: List of rows, each an ASCII row string or ('distribute', n)
        gutter_width: Horizontal gutter length (number = pixels, or CSS length string)
        gutter_height: Vertical gutter length, defaults to gutter_width
        columns: Optional explicit column count; narrower rows are fine, wider ones raise
        options: Full LayoutOptions, taking precedence over the keyword arguments

    Returns:
        LayoutPlan with one LayoutCell per rendered cell in row-major order
    """
    if options is None:
        options = LayoutOptions(gutter_width, gutter_height, columns)

    if options.columns is not None and (
        isinstance(options.columns, bool)
        or not isinstance(options.columns, int)
        or options.columns < 1
    ):
        raise MalformedSpecError(
            f"Invalid column count: {options.columns!r}\n"
            f"  Expected a positive integer or None (resolve from rows)"
        )

    _check_length("gutter_width", options.gutter_width)
    _check_length("gutter_height", options.resolved_gutter_height)

    rows = normalize(spec)
    resolved = resolve_columns(rows)
    total_columns = resolved if options.columns is None else options.columns
    cells = layout(rows, total_columns)

    logger.info(
        "compile_grid: rows=%d, columns=%d (resolved=%d), cells=%d",
        len(rows),
        total_columns,
        resolved,
        len(cells),
    )
    return LayoutPlan(
        cells=cells,
        columns=total_columns,
        row_count=len(rows),
        gutter_width=options.gutter_width,
        gutter_height=options.resolved_gutter_height,
    )


def compile_grid_text(definition: str, *args: Any, **kwargs: Any) -> LayoutPlan:
    """compile_grid() for the compact "x-x x|distribute 3" format."""
    return compile_grid(parse_grid_text(definition), *args, **kwargs)
