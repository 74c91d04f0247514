"""2-D value type shared by the camera, the coordinate transforms and the editor."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union


class Axis(Enum):
    X = 0
    Y = 1


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2-D vector.

    Every operation returns a new instance; the same class is used for screen,
    world and point coordinates, the space is implied by the function that
    produced the value.
    """

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, other: Union[Vector2, float]) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x / other.x, self.y / other.y)
        return Vector2(self.x / other, self.y / other)

    def get(self, axis: Axis) -> float:
        return self.x if axis is Axis.X else self.y

    def with_axis(self, axis: Axis, value: float) -> Vector2:
        """Return a copy with the component on *axis* replaced by *value*."""
        if axis is Axis.X:
            return Vector2(value, self.y)
        return Vector2(self.x, value)

    def flipped(self) -> Vector2:
        return Vector2(self.y, self.x)

    def rounded(self) -> Vector2:
        # Half-way values round up, matching canvas pixel snapping.
        return Vector2(float(math.floor(self.x + 0.5)), float(math.floor(self.y + 0.5)))

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

