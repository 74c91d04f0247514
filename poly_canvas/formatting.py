"""Human readable rendering of fitted coefficients.

Coefficients are stored lowest power first; every renderer here prints the
highest power first and drops terms whose coefficient rounds to zero at the
display precision.
"""

from __future__ import annotations

import math
from typing import Sequence

import sympy as sp


def round_half_up(value: float, precision: int) -> float:
    scale = 10.0 ** precision
    return math.floor(value * scale + 0.5) / scale


def _display_terms(coefficients: Sequence[float], precision: int) -> list[tuple[int, float]]:
    """(power, rounded coefficient) pairs, highest power first, zeros dropped."""
    terms: list[tuple[int, float]] = []
    for power in range(len(coefficients) - 1, -1, -1):
        value = float(coefficients[power])
        if not math.isfinite(value):
            continue
        rounded = round_half_up(value, precision)
        if rounded == 0:
            continue
        terms.append((power, rounded))
    return terms


def format_terms(coefficients: Sequence[float], precision: int = 2) -> list[str]:
    out: list[str] = []
    for power, value in _display_terms(coefficients, precision):
        text = f"{value:.{precision}f}"
        if power > 1:
            out.append(f"{text}x^{power}")
        elif power == 1:
            out.append(f"{text}x")
        else:
            out.append(text)
    return out


def format_equation(coefficients: Sequence[float], precision: int = 2) -> str:
    """Single-line ``y = ...`` form, e.g. ``y = 0.04x^2 - 0.42x + 3.88``."""
    terms = format_terms(coefficients, precision)
    if not terms:
        return "y = 0"
    text = terms[0]
    for term in terms[1:]:
        if term.startswith("-"):
            text += f" - {term[1:]}"
        else:
            text += f" + {term}"
    return f"y = {text}"


class PolynomialLaTeX:
    """Converts a coefficient vector to a display-math LaTeX string.

    Parameters
    ----------
    decimals : int
        Digits after the decimal point for every coefficient.
    """

    def __init__(self, decimals: int = 2) -> None:
        self.decimals = max(0, min(10, int(decimals)))

    def reconfigure(self, decimals: int) -> None:
        self.decimals = max(0, min(10, int(decimals)))

    def _n(self, v: float) -> sp.Float:
        return sp.Float(f"{v:.{self.decimals}f}")

    def _round_floats(self, expr: sp.Basic) -> sp.Basic:
        """Round every sp.Float leaf of *expr* to self.decimals places."""
        if isinstance(expr, sp.Float):
            return sp.Float(f"{float(expr):.{self.decimals}f}")
        if expr.args:
            return expr.func(*[self._round_floats(a) for a in expr.args])
        return expr

    def expression(self, coefficients: Sequence[float]) -> sp.Expr:
        x = sp.Symbol("x")
        expr: sp.Expr = sp.Integer(0)
        for power, value in _display_terms(coefficients, self.decimals):
            expr += self._n(value) * x ** power
        return expr

    def generate(self, coefficients: Sequence[float]) -> str:
        expr = self._round_floats(self.expression(coefficients))
        return f"$$f(x) = {sp.latex(expr)}$$"
