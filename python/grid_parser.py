"""
Grid parsing utilities for gridplan.

Provides:
1. The row tokenizer, turning an ASCII-art row into (span, offset) cells
2. Row-entry parsing and validation into the AsciiRow / DistributeRow union
3. The spec normalizer, producing ParsedRow / DistributeRow values in order
4. A compact one-string format with rows separated by |
"""

from __future__ import annotations

import logging
import re
from typing import Any, Sequence

from grid_types import (
    AsciiRow,
    Cell,
    DistributeRow,
    InvalidSpecTypeError,
    MalformedCharacterError,
    MalformedSpecError,
    NormalizedRow,
    ParsedRow,
    RowEntry,
)

__all__ = [
    "tokenize_row",
    "validate_row",
    "parse_row_entry",
    "normalize",
    "parse_grid_text",
]

logger = logging.getLogger(__name__)

ROW_ALPHABET = frozenset("x- ")
DISTRIBUTE = "distribute"

_DIRECTIVE_COUNT = re.compile(r"^\s+(\d+)\s*$")


def tokenize_row(row: str) -> ParsedRow:
    """
    Tokenize one ASCII-art row into cells.

    Format:
    - 'x' is one unit-column of filled space
    - 'x' characters joined by '-' merge into a single cell ("x-x-x" spans 3)
    - ' ' is one unit-column of blank space, counted as the offset of the next cell
    - Adjacent 'x' characters without '-' are separate cells ("xx" is two cells)
    - Trailing spaces are dropped; an all-blank row has no cells

    Never fails: characters outside the alphabet are treated as blank space.
    Callers validate with validate_row() first.

    Example:
        "x-x-x x" -> ParsedRow((Cell(3, 0), Cell(1, 1)))
    """
    cells: list[Cell] = []
    current: Cell | None = None
    gap = 0
    joined = False

    for char in row:
        match char:
            case "x" if current is not None and joined:
                current = Cell(current.span + 1, current.offset)
            case "x":
                if current is not None:
                    cells.append(current)
                current = Cell(1, gap)
                gap = 0
            case "-":
                pass
            case _:
                if current is not None:
                    cells.append(current)
                    current = None
                gap += 1
        joined = char == "-"

    if current is not None:
        cells.append(current)

    return ParsedRow(tuple(cells))


def validate_row(text: str, row_index: int) -> None:
    """Raise MalformedCharacterError on the first character outside 'x', '-' and space."""
    for col_idx, char in enumerate(text):
        if char not in ROW_ALPHABET:
            raise MalformedCharacterError(
                f"Invalid character {char!r} in grid row\n"
                f"  Row {row_index}: \"{text}\"\n"
                f"  Position: column {col_idx}\n"
                f"  Valid characters: 'x' (cell), '-' (joins cells), ' ' (blank column)"
            )


def _check_count(count: Any, row_index: int) -> int:
    # bool is an int subclass but never a meaningful count
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise MalformedSpecError(
            f"Invalid distribute count: {count!r}\n"
            f"  Row {row_index}\n"
            f"  Expected a positive integer, e.g. ('distribute', 3)"
        )
    return count


def parse_row_entry(entry: Any, row_index: int) -> RowEntry:
    """
    Parse one raw spec entry into the AsciiRow / DistributeRow union.

    Accepted forms:
    - str: ASCII-art row over 'x', '-' and space
    - ("distribute", n) as a tuple or list, with n a positive integer
    - AsciiRow / DistributeRow instances (re-validated)

    Raises:
        MalformedCharacterError: If an ASCII row has an invalid character
        MalformedSpecError: For anything else that is not a well-formed row
    """
    match entry:
        case str() as text:
            validate_row(text, row_index)
            return AsciiRow(text)
        case AsciiRow(text=str() as text):
            validate_row(text, row_index)
            return entry
        case DistributeRow(count=count):
            _check_count(count, row_index)
            return entry
        case (str() as keyword, count) if keyword == DISTRIBUTE:
            return DistributeRow(_check_count(count, row_index))
        case _:
            raise MalformedSpecError(
                f"Invalid row entry: {entry!r}\n"
                f"  Row {row_index}\n"
                f"  Valid formats:\n"
                f"    - ASCII row string (e.g., 'x-x x')\n"
                f"    - Distribute directive (e.g., ('distribute', 3))"
            )


def normalize(spec: Sequence[Any]) -> tuple[NormalizedRow, ...]:
    """
    Normalize a whole grid spec into ParsedRow / DistributeRow values.

    Order is preserved one to one; rows are never merged or reordered.

    Raises:
        InvalidSpecTypeError: If spec is not a list or tuple
        MalformedCharacterError, MalformedSpecError: From parse_row_entry()
    """
    if not isinstance(spec, (list, tuple)):
        raise InvalidSpecTypeError(
            f"Grid spec must be a list of rows, got {type(spec).__name__}: {spec!r}"
        )

    rows: list[NormalizedRow] = []
    for row_idx, entry in enumerate(spec):
        match parse_row_entry(entry, row_idx):
            case AsciiRow(text=text):
                parsed = tokenize_row(text)
                logger.debug("row %d: %r -> %s", row_idx, text, parsed.cells)
                rows.append(parsed)
            case DistributeRow() as distribute:
                logger.debug("row %d: distribute %d", row_idx, distribute.count)
                rows.append(distribute)
            case other:
                raise MalformedSpecError(f"Unknown row type: {other!r}")

    return tuple(rows)


def parse_grid_text(definition: str) -> list[RowEntry]:
    """
    Parse a grid from a compact one-string format.

    Format:
    - Rows separated by |
    - "distribute N" (surrounding whitespace ignored): N equal-width cells
    - Any other segment starting with "distribute" is a malformed directive
    - Anything else is an ASCII row, kept verbatim (leading spaces are offsets)

    Example:
        "x-x x| x-x|distribute 4"
        Creates:
        [AsciiRow("x-x x"), AsciiRow(" x-x"), DistributeRow(4)]

    Raises:
        MalformedSpecError: If a distribute directive has a missing or bad count
        MalformedCharacterError: If an ASCII row has an invalid character
    """
    if not isinstance(definition, str):
        raise InvalidSpecTypeError(
            f"Grid text must be a string, got {type(definition).__name__}: {definition!r}"
        )

    entries: list[RowEntry] = []
    for row_idx, segment in enumerate(definition.split("|")):
        keyword = segment.lstrip()
        if not keyword.startswith(DISTRIBUTE):
            validate_row(segment, row_idx)
            entries.append(AsciiRow(segment))
            continue

        count = _DIRECTIVE_COUNT.match(keyword[len(DISTRIBUTE):])
        if count is None:
            raise MalformedSpecError(
                f"Invalid distribute directive: \"{segment}\"\n"
                f"  Row {row_idx}\n"
                f"  Expected format: 'distribute N' with N a positive integer"
            )
        entries.append(DistributeRow(_check_count(int(count.group(1)), row_idx)))

    return entries
