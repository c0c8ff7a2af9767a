"""
Shared type definitions for the gridplan system.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

# Lengths are kept symbolic: a number (pixels) or any CSS length string.
Length = int | float | Fraction | str


# =============================================================================
# Errors
# =============================================================================


class GridSpecError(ValueError):
    """Base class for everything wrong with a grid specification."""


class InvalidSpecTypeError(GridSpecError):
    """The top-level spec is not a list or tuple of rows."""


class MalformedCharacterError(GridSpecError):
    """An ASCII row contains a character outside 'x', '-' and space."""


class MalformedSpecError(GridSpecError):
    """A row entry (or a distribute count) is not well-formed."""


class ColumnOverflowError(GridSpecError):
    """An ASCII row is wider than the column count in use."""


class MalformedLengthError(GridSpecError):
    """A gutter length is neither a number nor a CSS length string."""


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class AsciiRow:
    """A raw ASCII-art row, e.g. 'x-x x'."""

    text: str


@dataclass(frozen=True)
class DistributeRow:
    """A row of `count` equal-width cells."""

    count: int


RowEntry = AsciiRow | DistributeRow


@dataclass(frozen=True)
class Cell:
    """One tokenized cell: `span` unit-columns after `offset` spaces."""

    span: int
    offset: int = 0


@dataclass(frozen=True)
class ParsedRow:
    """The cells of one ASCII row, left to right."""

    cells: tuple[Cell, ...] = ()

    @property
    def blank_columns(self) -> tuple[int, ...]:
        """
        Blank unit-columns reserved before each cell.

        Leading spaces map one to one. Between two cells the first space is
        the separator (the previous cell's gutter), so "x x" has no blank
        column and "x  x" has one.
        """
        return tuple(
            cell.offset if position == 0 else max(cell.offset - 1, 0)
            for position, cell in enumerate(self.cells)
        )

    @property
    def width(self) -> int:
        return sum(cell.span for cell in self.cells) + sum(self.blank_columns)


NormalizedRow = ParsedRow | DistributeRow


# =============================================================================
# Layout Types
# =============================================================================


@dataclass(frozen=True)
class Formula:
    """
    Exact linear combination of the container width and the two gutters.

    `percent` is in units of 1% of the container; `gutter_width` and
    `gutter_height` are multiples of the respective gutter lengths.
    """

    percent: Fraction = Fraction(0)
    gutter_width: Fraction = Fraction(0)
    gutter_height: Fraction = Fraction(0)

    def __add__(self, other: Formula) -> Formula:
        return Formula(
            self.percent + other.percent,
            self.gutter_width + other.gutter_width,
            self.gutter_height + other.gutter_height,
        )

    def __sub__(self, other: Formula) -> Formula:
        return self + other * -1

    def __mul__(self, factor: int | Fraction) -> Formula:
        return Formula(
            self.percent * factor,
            self.gutter_width * factor,
            self.gutter_height * factor,
        )

    __rmul__ = __mul__

    @property
    def is_zero(self) -> bool:
        return not (self.percent or self.gutter_width or self.gutter_height)

    def evaluate(
        self,
        container: int | Fraction,
        gutter_width: int | Fraction = 0,
        gutter_height: int | Fraction = 0,
    ) -> Fraction:
        """Resolve to an exact length given concrete container and gutter sizes."""
        return (
            self.percent * Fraction(container) / 100
            + self.gutter_width * Fraction(gutter_width)
            + self.gutter_height * Fraction(gutter_height)
        )


FULL_WIDTH = Formula(percent=Fraction(100))
GUTTER_WIDTH = Formula(gutter_width=Fraction(1))
GUTTER_HEIGHT = Formula(gutter_height=Fraction(1))


@dataclass(frozen=True)
class LayoutCell:
    """A rendered cell, addressed by its 1-based global index."""

    index: int
    row: int  # 1-based row of the whole spec
    position: int  # 1-based position within its row
    span: int
    blank_columns: int  # Blank unit-columns reserved before the cell
    basis: int  # Column count (ASCII rows) or distribute count
    width: Formula
    margin_left: Formula | None = None
    margin_right: Formula | None = None
    margin_bottom: Formula | None = None


@dataclass(frozen=True)
class LayoutPlan:
    """Every rendered cell in row-major order, plus the grid-level parameters."""

    cells: tuple[LayoutCell, ...]
    columns: int
    row_count: int
    gutter_width: Length = 0
    gutter_height: Length = 0

    def rows(self) -> tuple[tuple[LayoutCell, ...], ...]:
        grouped: list[list[LayoutCell]] = [[] for _ in range(self.row_count)]
        for cell in self.cells:
            grouped[cell.row - 1].append(cell)
        return tuple(tuple(row) for row in grouped)


@dataclass(frozen=True)
class LayoutOptions:
    """Parameters governing layout."""

    gutter_width: Length = 0
    gutter_height: Length | None = None  # None = same as gutter_width
    columns: int | None = None  # None = resolve from the widest ASCII row

    @property
    def resolved_gutter_height(self) -> Length:
        return self.gutter_width if self.gutter_height is None else self.gutter_height
