"""Least-squares polynomial regression with animated coefficients.

The fit itself is a pure function of the sample points and the order
(:func:`refit`). :class:`PolynomialRegression` keeps two coefficient vectors:
the *target* produced by the latest fit and the *current* one used to draw the
curve, which eases toward the target once per frame (:func:`advance_coefficients`).
"""

from __future__ import annotations

import logging
import math
import operator
from typing import Any, Iterable, Optional, Sequence, Union

import numpy as np
from numpy.polynomial import polynomial as P

from .geometry import Vector2
from .solver import FloatArray, gaussian_elimination

SamplePoint = Union[Vector2, tuple[float, Optional[float]]]

_LOGGER = logging.getLogger(__name__)


# ===========================================================================
# Pure helpers
# ===========================================================================

def lerp(start: Any, end: Any, weight: float) -> Any:
    """Linear interpolation ``start*(1-weight) + end*weight``.

    Works on scalars and arrays. Where the result is not finite, *end* is
    returned in its place.
    """
    with np.errstate(invalid="ignore", over="ignore"):
        value = np.asarray(start, dtype=np.float64) * (1.0 - weight) + np.asarray(
            end, dtype=np.float64
        ) * weight
    value = np.where(np.isfinite(value), value, end)
    return float(value) if value.ndim == 0 else value


def advance_coefficients(
    current: Union[Sequence[float], FloatArray],
    target: Union[Sequence[float], FloatArray],
    weight: float,
) -> FloatArray:
    """Move *current* one step toward *target*.

    - Indices present in both vectors step with :func:`lerp`.
    - Trailing target coefficients that *current* lacks are copied as-is.
    - Trailing current coefficients that *target* lacks ease toward zero, so
      the result is never shorter than *current*.
    - A non-finite step falls back to the target value, or to the previous
      value when the target itself is not finite, or to 0.0.
    """
    cur = np.asarray(current, dtype=np.float64)
    tgt = np.asarray(target, dtype=np.float64)
    size = max(len(cur), len(tgt))

    goal = np.zeros(size, dtype=np.float64)
    goal[: len(tgt)] = tgt

    result = goal.copy()
    n = len(cur)
    # A non-finite target holds the previous value; lerp lands on this end
    # point whenever the step itself is not finite.
    end = np.where(np.isfinite(goal[:n]), goal[:n], cur)
    end = np.where(np.isfinite(end), end, 0.0)
    result[:n] = lerp(cur, end, weight)
    # New terms are seeded directly; a non-finite seed starts at zero.
    result[n:] = np.where(np.isfinite(result[n:]), result[n:], 0.0)
    return result


def _checked_order(order: int) -> int:
    try:
        value = operator.index(order)
    except TypeError:
        raise ValueError(f"order must be an integer, got {order!r}") from None
    if value < 0:
        raise ValueError(f"order must be non-negative, got {value}")
    return value


def _checked_weight(weight: float) -> float:
    value = float(weight)
    if not (0.0 <= value <= 1.0):
        raise ValueError(f"lerp_weight must be in [0, 1], got {weight}")
    return value


def _samples(points: Iterable[SamplePoint]) -> tuple[FloatArray, FloatArray]:
    """Split *points* into x and y arrays, dropping samples without a y value."""
    xs: list[float] = []
    ys: list[float] = []
    for point in points:
        x, y = (point.x, point.y) if isinstance(point, Vector2) else point
        if y is None or not math.isfinite(y) or not math.isfinite(x):
            continue
        xs.append(float(x))
        ys.append(float(y))
    return np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)


def normal_equations(xs: FloatArray, ys: FloatArray, order: int) -> FloatArray:
    """Augmented matrix [M | r] with M[i][j] = Σ x^(i+j) and r[i] = Σ x^i·y."""
    k = order + 1
    with np.errstate(over="ignore", invalid="ignore"):
        powers = np.power.outer(xs, np.arange(2 * k - 1, dtype=np.float64))
        sums = powers.sum(axis=0)
        augmented = np.empty((k, k + 1), dtype=np.float64)
        augmented[:, :k] = sums[np.add.outer(np.arange(k), np.arange(k))]
        augmented[:, k] = (powers[:, :k] * ys[:, None]).sum(axis=0)
    return augmented


def refit(points: Iterable[SamplePoint], order: int) -> FloatArray:
    """Least-squares polynomial coefficients (lowest power first).

    Returns an empty vector when no point has a defined y value; otherwise
    exactly ``order + 1`` coefficients.
    """
    order = _checked_order(order)
    xs, ys = _samples(points)
    if len(xs) == 0:
        return np.empty(0, dtype=np.float64)
    # Fit over x / max|x| so every power sum stays within [0, n].
    scale = float(np.max(np.abs(xs)))
    if not scale > 0:
        scale = 1.0
    scaled = gaussian_elimination(normal_equations(xs / scale, ys, order))
    with np.errstate(over="ignore"):
        return scaled / np.power(scale, np.arange(order + 1, dtype=np.float64))


# ===========================================================================
# Stateful engine
# ===========================================================================

class PolynomialRegression:
    """Fits the session's points and animates the displayed coefficients.

    Parameters
    ----------
    points : initial samples, in point space.
    order : polynomial degree (non-negative).
    lerp_weight : fraction of the remaining gap closed per :meth:`update`.
    """

    def __init__(
        self,
        points: Iterable[SamplePoint] = (),
        order: int = 5,
        lerp_weight: float = 0.1,
    ) -> None:
        self._points: tuple[SamplePoint, ...] = ()
        self._order = _checked_order(order)
        self._lerp_weight = _checked_weight(lerp_weight)
        self._target: FloatArray = np.empty(0, dtype=np.float64)
        self.set_points(points)
        # The first fit is shown immediately.
        self._coefficients: FloatArray = self._target.copy()

    @property
    def order(self) -> int:
        return self._order

    @property
    def lerp_weight(self) -> float:
        return self._lerp_weight

    @property
    def points(self) -> tuple[SamplePoint, ...]:
        return self._points

    @property
    def coefficients(self) -> FloatArray:
        """Coefficients currently displayed (lowest power first)."""
        return self._coefficients.copy()

    @property
    def target_coefficients(self) -> FloatArray:
        """Coefficients of the most recent fit (lowest power first)."""
        return self._target.copy()

    def set_points(self, points: Iterable[SamplePoint]) -> None:
        self._points = tuple(points)
        self._refit()

    def set_order(self, order: int) -> None:
        self._order = _checked_order(order)
        self._refit()

    def set_lerp_weight(self, lerp_weight: float) -> None:
        self._lerp_weight = _checked_weight(lerp_weight)

    def _refit(self) -> None:
        self._target = refit(self._points, self._order)
        _LOGGER.debug(
            "Refit order %d over %d points -> %d coefficients",
            self._order,
            len(self._points),
            len(self._target),
        )

    def update(self) -> None:
        """Advance the displayed coefficients one frame toward the target."""
        self._coefficients = advance_coefficients(
            self._coefficients, self._target, self._lerp_weight
        )

    def is_settled(self, tol: float = 1e-9) -> bool:
        n = len(self._target)
        if len(self._coefficients) < n:
            return False
        return bool(
            np.allclose(self._coefficients[:n], self._target, rtol=0.0, atol=tol)
            and np.all(np.abs(self._coefficients[n:]) <= tol)
        )

    def predict(self, x: Any) -> Any:
        """Evaluate Σ current[i]·x^i for a scalar or an array of x values."""
        if len(self._coefficients) == 0:
            return 0.0 if np.ndim(x) == 0 else np.zeros(np.shape(x), dtype=np.float64)
        with np.errstate(over="ignore", invalid="ignore"):
            y = P.polyval(np.asarray(x, dtype=np.float64), self._coefficients)
        return float(y) if np.ndim(y) == 0 else np.asarray(y, dtype=np.float64)
