"""
CSS rendering for gridplan layouts.

Turns a LayoutPlan into a container rule plus one :nth-child rule per cell.
"""

from __future__ import annotations

import re
from fractions import Fraction

from grid_types import Formula, LayoutCell, LayoutPlan, Length

__all__ = ["format_length", "format_formula", "cell_declarations", "render_css"]

CONTAINER_DECLARATIONS = (("display", "flex"), ("flex-wrap", "wrap"))

_WHITESPACE = re.compile(r"\s")


def format_length(value: Length) -> str:
    """
    Numbers are pixels; strings are taken as CSS lengths.

    Integers and floats are written as given. A non-integral Fraction stays
    exact as calc(<num>px / <den>).
    """
    if isinstance(value, str):
        text = value.strip()
        if _WHITESPACE.search(text) and not text.endswith(")"):
            return f"calc({text})"
        return text
    if isinstance(value, Fraction) and value.denominator != 1:
        return f"calc({value.numerator}px / {value.denominator})"
    if value == 0:
        return "0"
    if isinstance(value, Fraction) or float(value).is_integer():
        return f"{int(value)}px"
    return f"{value}px"


def _operand(length: str) -> str:
    # Multi-token lengths must stay grouped when scaled
    return f"({length})" if _WHITESPACE.search(length) else length


def _term(magnitude: Fraction, unit: str) -> str:
    """One positive term: `n% / d` for percentages, `n * <length> / d` otherwise."""
    numerator, denominator = magnitude.numerator, magnitude.denominator
    if unit == "%":
        text = f"{numerator}%"
    elif numerator == 1:
        text = _operand(unit)
    else:
        text = f"{numerator} * {_operand(unit)}"
    return text if denominator == 1 else f"{text} / {denominator}"


def format_formula(formula: Formula, gutter_width: Length, gutter_height: Length) -> str:
    """
    Render a Formula as an exact CSS value.

    Coefficients are kept as integer ratios, so the terms of a full row add
    up to exactly 100%.

    Examples:
        Formula(percent=25)                        -> "25%"
        Formula(gutter_width=1), "20px"            -> "20px"
        Formula(percent=50, gutter_width=-1/2)     -> "calc(50% - 20px / 2)"
        Formula(percent=100/3, gutter_width=-2/3)  -> "calc(100% / 3 - 2 * 20px / 3)"
    """
    terms: list[tuple[Fraction, str]] = []
    if formula.percent:
        terms.append((formula.percent, "%"))
    if formula.gutter_width:
        terms.append((formula.gutter_width, format_length(gutter_width)))
    if formula.gutter_height:
        terms.append((formula.gutter_height, format_length(gutter_height)))

    if not terms:
        return "0"

    if len(terms) == 1:
        coefficient, unit = terms[0]
        if unit == "%" and coefficient.denominator == 1:
            return f"{coefficient.numerator}%"
        if coefficient == 1:
            return unit

    parts: list[str] = []
    for coefficient, unit in terms:
        text = _term(abs(coefficient), unit)
        if parts:
            parts.append(f"{'-' if coefficient < 0 else '+'} {text}")
        elif coefficient < 0:
            parts.append(f"-1 * {text}" if text.startswith("(") else f"-{text}")
        else:
            parts.append(text)

    return f"calc({' '.join(parts)})"


def cell_declarations(cell: LayoutCell, plan: LayoutPlan) -> list[tuple[str, str]]:
    """Property/value pairs for one cell, omitting absent margins."""
    declarations = [
        ("width", format_formula(cell.width, plan.gutter_width, plan.gutter_height))
    ]
    for prop, margin in (
        ("margin-left", cell.margin_left),
        ("margin-right", cell.margin_right),
        ("margin-bottom", cell.margin_bottom),
    ):
        if margin is not None:
            declarations.append(
                (prop, format_formula(margin, plan.gutter_width, plan.gutter_height))
            )
    return declarations


def _rule(selector: str, declarations: list[tuple[str, str]] | tuple[tuple[str, str], ...]) -> str:
    body = "\n".join(f"  {prop}: {value};" for prop, value in declarations)
    return f"{selector} {{\n{body}\n}}"


def render_css(plan: LayoutPlan, selector: str) -> str:
    """
    Render the whole plan as CSS.

    Args:
        plan: The compiled layout
        selector: Selector of the grid container, e.g. ".gallery"

    Returns:
        The container rule followed by one `selector > :nth-child(i)` rule per cell
    """
    rules = [_rule(selector, CONTAINER_DECLARATIONS)]
    for cell in plan.cells:
        rules.append(
            _rule(f"{selector} > :nth-child({cell.index})", cell_declarations(cell, plan))
        )
    return "\n\n".join(rules) + "\n"
