"""Mappings between screen, world and point space.

Screen space is the viewport in pixels (origin top-left, y down). World space
is screen space moved by the camera position and scaled by the camera zoom.
Point space is world space divided by the point spacing; it is the unit grid
the user places points on and the space the polynomial is fitted in.

All functions read the camera's actual state at call time, so they are pure
for a given camera state and spacing.
"""

from __future__ import annotations

import math
from typing import Optional

from .camera import Camera
from .geometry import Vector2


class CoordinateTransformer:

    def __init__(self, camera: Camera, point_spacing: float) -> None:
        self._camera = camera
        self._point_spacing = self._checked_spacing(point_spacing)

    @staticmethod
    def _checked_spacing(point_spacing: float) -> float:
        value = float(point_spacing)
        if not (math.isfinite(value) and value > 0):
            raise ValueError(f"point_spacing must be positive, got {point_spacing}")
        return value

    @property
    def camera(self) -> Camera:
        return self._camera

    @property
    def point_spacing(self) -> float:
        return self._point_spacing

    @point_spacing.setter
    def point_spacing(self, point_spacing: float) -> None:
        self._point_spacing = self._checked_spacing(point_spacing)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def screen_to_world(self, screen_position: Vector2, zoom: Optional[float] = None) -> Vector2:
        if zoom is None:
            zoom = self._camera.zoom
        return self._camera.position + screen_position / zoom

    def world_to_screen(self, world_position: Vector2) -> Vector2:
        return (world_position - self._camera.position) * self._camera.zoom

    def point_to_world(self, point_position: Vector2) -> Vector2:
        return point_position * self._point_spacing

    def world_to_point(self, world_position: Vector2) -> Vector2:
        return world_position / self._point_spacing

    def screen_to_point(self, screen_position: Vector2) -> Vector2:
        return self.world_to_point(self.screen_to_world(screen_position))

    def point_to_screen(self, point_position: Vector2) -> Vector2:
        return self.world_to_screen(self.point_to_world(point_position))

    def world_to_closest_point(self, world_position: Vector2) -> Vector2:
        """Nearest integer grid anchor, in point space."""
        return self.world_to_point(world_position).rounded()

    # ------------------------------------------------------------------
    # Sizes
    # A size is the difference of two positions, so the camera translation
    # cancels out.
    # ------------------------------------------------------------------

    def world_to_screen_size(self, world_size: Vector2) -> Vector2:
        origin = self._camera.position
        return self.world_to_screen(origin + world_size) - self.world_to_screen(origin)

    def screen_to_world_size(self, screen_size: Vector2) -> Vector2:
        origin = Vector2(0.0, 0.0)
        return self.screen_to_world(origin + screen_size) - self.screen_to_world(origin)

    def point_to_screen_size(self, point_size: Vector2) -> Vector2:
        return self.world_to_screen_size(self.point_to_world(point_size))
