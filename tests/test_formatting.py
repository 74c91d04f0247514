"""Tests for the equation readout and the LaTeX export."""

from __future__ import annotations

import math

import pytest

from poly_canvas.formatting import (
    PolynomialLaTeX,
    format_equation,
    format_terms,
    round_half_up,
)


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        "value, precision, expected",
        [(0.125, 2, 0.13), (-0.125, 2, -0.12), (2.5, 0, 3.0), (-2.5, 0, -2.0), (1.234, 1, 1.2)],
    )
    def test_values(self, value, precision, expected):
        assert round_half_up(value, precision) == pytest.approx(expected)


class TestFormatTerms:
    """Tests for format_terms and format_equation."""

    def test_highest_power_first(self):
        assert format_terms([3.875, -0.41666, 0.041666]) == ["0.04x^2", "-0.42x", "3.88"]

    def test_zero_terms_dropped(self):
        assert format_terms([0.0, 1.25, 0.001, 0.0]) == ["1.25x"]

    def test_non_finite_terms_dropped(self):
        assert format_terms([1.0, math.nan, math.inf]) == ["1.00"]

    def test_equation(self):
        assert format_equation([3.875, -0.41666, 0.041666]) == "y = 0.04x^2 - 0.42x + 3.88"

    def test_equation_leading_negative(self):
        assert format_equation([2.0, -1.5]) == "y = -1.50x + 2.00"

    def test_equation_all_zero(self):
        assert format_equation([0.0, 0.0001]) == "y = 0"
        assert format_equation([]) == "y = 0"

    def test_precision_zero(self):
        assert format_equation([0.4, 2.6], precision=0) == "y = 3x"


class TestPolynomialLaTeX:
    """Tests for PolynomialLaTeX."""

    def test_generate(self):
        latex = PolynomialLaTeX(2).generate([1.0, 0.0, 2.5])
        assert latex.startswith("$$f(x) = ")
        assert latex.endswith("$$")
        assert "x^{2}" in latex
        assert "2.5" in latex

    def test_empty(self):
        assert PolynomialLaTeX().generate([]) == "$$f(x) = 0$$"

    def test_reconfigure_clamps(self):
        generator = PolynomialLaTeX(2)
        generator.reconfigure(42)
        assert generator.decimals == 10
        generator.reconfigure(-1)
        assert generator.decimals == 0

    def test_rounded_away_terms_are_omitted(self):
        latex = PolynomialLaTeX(1).generate([0.01, 3.0])
        assert "x" in latex
        assert "0.0" not in latex
