"""Viewport camera: world position and zoom, split into actual and target states.

Input handlers only write the target state. :meth:`Camera.update` moves the
actual state (the one every coordinate transform reads) to the target once
per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .geometry import Vector2

DEFAULT_ZOOM: float = 0.25
MIN_ZOOM: float = 0.1
MAX_ZOOM: float = 3.0


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, float(zoom)))


@dataclass(frozen=True, slots=True)
class CameraState:
    position: Vector2 = Vector2(0.0, 0.0)
    zoom: float = DEFAULT_ZOOM


def advance_camera(actual: CameraState, target: CameraState) -> CameraState:
    """Next actual state. Snaps straight to the target."""
    return target


def zoom_about(state: CameraState, screen_anchor: Vector2, zoom: float) -> CameraState:
    """State zoomed to *zoom* with the world point under *screen_anchor* kept in place."""
    before = state.position + screen_anchor / state.zoom
    after = state.position + screen_anchor / zoom
    return CameraState(state.position - (after - before), zoom)


def camera_changed(before: CameraState, after: CameraState) -> bool:
    position_changed = before.position != after.position
    zoom_changed = before.zoom != after.zoom
    return position_changed or zoom_changed


class Camera:

    def __init__(self, position: Vector2 = Vector2(0.0, 0.0), zoom: float = DEFAULT_ZOOM) -> None:
        self._actual = CameraState(position, float(zoom))
        self._target = self._actual

    # -- target setters -------------------------------------------------

    def set_x(self, x: float) -> None:
        self._target = replace(self._target, position=Vector2(float(x), self._target.position.y))

    def set_y(self, y: float) -> None:
        self._target = replace(self._target, position=Vector2(self._target.position.x, float(y)))

    def set_zoom(self, zoom: float) -> None:
        self._target = replace(self._target, zoom=float(zoom))

    def set_position(self, position: Vector2) -> None:
        self._target = replace(self._target, position=position)

    def reset(self) -> None:
        self._target = CameraState()

    # -- actual getters -------------------------------------------------

    @property
    def x(self) -> float:
        return self._actual.position.x

    @property
    def y(self) -> float:
        return self._actual.position.y

    @property
    def zoom(self) -> float:
        return self._actual.zoom

    @property
    def position(self) -> Vector2:
        return self._actual.position

    @property
    def state(self) -> CameraState:
        return self._actual

    @property
    def target(self) -> CameraState:
        return self._target

    def update(self) -> bool:
        """Advance the actual state; return True if position or zoom changed."""
        before = self._actual
        self._actual = advance_camera(before, self._target)
        return camera_changed(before, self._actual)
