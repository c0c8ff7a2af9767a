"""Tests for css_render module."""

import re
from fractions import Fraction

import pytest

from css_render import cell_declarations, format_formula, format_length, render_css
from grid_types import FULL_WIDTH, GUTTER_HEIGHT, GUTTER_WIDTH, Formula
from gridplan import compile_grid


def parse_value(value: str, gutter: str) -> tuple[Fraction, Fraction]:
    """Read an emitted value back as exact (percent, gutter) coefficients."""
    body = value[len("calc("):-1] if value.startswith("calc(") else value
    tokens = re.split(r" ([+-]) ", body)
    signed = [("+", tokens[0])] + list(zip(tokens[1::2], tokens[2::2]))

    percent = Fraction(0)
    gutters = Fraction(0)
    for sign, term in signed:
        if term.startswith("-"):
            sign, term = "-", term[1:]
        factor = -1 if sign == "-" else 1
        match = re.fullmatch(r"(\d+)%(?: / (\d+))?", term)
        if match:
            percent += factor * Fraction(int(match[1]), int(match[2] or 1))
            continue
        match = re.fullmatch(r"(?:(\d+) \* )?" + re.escape(gutter) + r"(?: / (\d+))?", term)
        assert match, f"unexpected term {term!r} in {value!r}"
        gutters += factor * Fraction(int(match[1] or 1), int(match[2] or 1))
    return percent, gutters


class TestFormatLength:
    """Tests for length formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0"),
            (12, "12px"),
            (1.5, "1.5px"),
            (2.0, "2px"),
            (Fraction(1, 3), "calc(1px / 3)"),
            (" 2rem ", "2rem"),
            ("1rem + 2px", "calc(1rem + 2px)"),
            ("var(--gap)", "var(--gap)"),
        ],
    )
    def test_lengths(self, value: object, expected: str) -> None:
        """Numbers are pixels, strings pass through."""
        assert format_length(value) == expected  # type: ignore[arg-type]


class TestFormatFormula:
    """Tests for formula to CSS value conversion."""

    def test_zero(self) -> None:
        """The zero formula is a bare 0."""
        assert format_formula(Formula(), "20px", "10px") == "0"

    def test_pure_percent(self) -> None:
        """Integral percentages need no calc()."""
        assert format_formula(FULL_WIDTH, "20px", "10px") == "100%"
        assert format_formula(FULL_WIDTH * Fraction(1, 4), "20px", "10px") == "25%"
        assert format_formula(FULL_WIDTH * Fraction(1, 3), "20px", "10px") == "calc(100% / 3)"

    def test_bare_gutters(self) -> None:
        """A single gutter is the gutter length itself."""
        assert format_formula(GUTTER_WIDTH, "20px", "10px") == "20px"
        assert format_formula(GUTTER_HEIGHT, "20px", "10px") == "10px"

    def test_calc(self) -> None:
        """Mixed terms render as calc() with signs."""
        formula = Formula(Fraction(50), Fraction(-1, 2))
        assert format_formula(formula, "20px", "10px") == "calc(50% - 20px / 2)"

    def test_calc_keeps_exact_ratios(self) -> None:
        """Thirds stay integer ratios instead of rounded decimals."""
        formula = Formula(Fraction(100, 3), Fraction(-2, 3))
        assert format_formula(formula, "1em", 0) == "calc(100% / 3 - 2 * 1em / 3)"

    def test_unit_coefficient_omitted(self) -> None:
        """A coefficient of one is not written out."""
        formula = Formula(Fraction(100), Fraction(-1))
        assert format_formula(formula, "20px", "10px") == "calc(100% - 20px)"

    def test_multi_token_gutter_grouped(self) -> None:
        """Compound gutter lengths are parenthesised when scaled."""
        formula = Formula(Fraction(50), Fraction(-1, 2))
        assert format_formula(formula, "calc(1rem + 2px)", 0) == (
            "calc(50% - (calc(1rem + 2px)) / 2)"
        )

    def test_negative_grouped_first_term(self) -> None:
        """A leading negative compound gutter stays valid CSS."""
        formula = Formula(gutter_width=Fraction(-1, 2))
        assert format_formula(formula, "1rem + 2px", 0) == "calc(-1 * (calc(1rem + 2px)) / 2)"

    def test_numeric_gutter(self) -> None:
        """Numeric gutters are pixels."""
        assert format_formula(GUTTER_WIDTH, 8, 8) == "8px"


class TestRenderCss:
    """Tests for whole-plan CSS."""

    def test_declarations_order(self) -> None:
        """width, then margins in left/right/bottom order."""
        plan = compile_grid([" x x", "x x-x"], "20px")
        assert [prop for prop, _ in cell_declarations(plan.cells[0], plan)] == [
            "width",
            "margin-left",
            "margin-right",
            "margin-bottom",
        ]
        assert [prop for prop, _ in cell_declarations(plan.cells[-1], plan)] == ["width"]

    @pytest.mark.parametrize("basis", [3, 6, 7])
    def test_full_row_sums_exactly(self, basis: int) -> None:
        """Emitted widths and margins of a full row add up to exactly 100%."""
        plan = compile_grid(
            [("distribute", basis), " " + "x " * (basis - 1), "x-" * (basis - 1) + "x"],
            "20px",
        )
        for row in plan.rows():
            percent = gutters = Fraction(0)
            for cell in row:
                for prop, value in cell_declarations(cell, plan):
                    if prop == "margin-bottom":
                        continue
                    p, g = parse_value(value, "20px")
                    percent += p
                    gutters += g
            assert percent == 100
            assert gutters == 0

    def test_ascii_then_distribute(self) -> None:
        """Full CSS output for a two-row grid."""
        plan = compile_grid(["x-x x", ("distribute", 2)], "20px")
        assert render_css(plan, ".grid") == (
            ".grid {\n"
            "  display: flex;\n"
            "  flex-wrap: wrap;\n"
            "}\n"
            "\n"
            ".grid > :nth-child(1) {\n"
            "  width: calc(200% / 3 - 20px / 3);\n"
            "  margin-right: 20px;\n"
            "  margin-bottom: 20px;\n"
            "}\n"
            "\n"
            ".grid > :nth-child(2) {\n"
            "  width: calc(100% / 3 - 2 * 20px / 3);\n"
            "  margin-bottom: 20px;\n"
            "}\n"
            "\n"
            ".grid > :nth-child(3) {\n"
            "  width: calc(50% - 20px / 2);\n"
            "  margin-right: 20px;\n"
            "}\n"
            "\n"
            ".grid > :nth-child(4) {\n"
            "  width: calc(50% - 20px / 2);\n"
            "}\n"
        )

    def test_separate_gutter_height(self) -> None:
        """Bottom margins use the vertical gutter."""
        plan = compile_grid(["x", "x"], "20px", "1rem")
        assert ("margin-bottom", "1rem") in cell_declarations(plan.cells[0], plan)

    def test_container_rule_once(self) -> None:
        """flex and wrap appear exactly once."""
        css = render_css(compile_grid([("distribute", 5)], 4), "#main")
        assert css.count("display: flex") == 1
        assert css.count("flex-wrap: wrap") == 1
        assert css.count(":nth-child(") == 5

    def test_full_span_width(self) -> None:
        """A cell spanning the grid is exactly 100%."""
        plan = compile_grid(["x-x-x"], "20px")
        assert cell_declarations(plan.cells[0], plan) == [("width", "100%")]
