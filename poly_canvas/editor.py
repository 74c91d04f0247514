"""Interaction controller for one graph editing session.

:class:`GraphEditor` owns the point set, the camera, the regression engine and
the coordinate transformer. The host forwards pointer events in screen space
and calls :meth:`GraphEditor.tick` once per frame; everything the renderer
needs (curve samples, grid lines, point positions) is computed here so the
host only has to paint.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

import numpy as np

from .camera import Camera, clamp_zoom, zoom_about
from .formatting import format_equation
from .geometry import Axis, Vector2
from .regression import PolynomialRegression
from .settings import PAN_SPEED, ZOOM_SENSITIVITY, GraphSettings
from .transform import CoordinateTransformer

DEFAULT_POINTS: tuple[Vector2, ...] = (Vector2(3, 3), Vector2(7, 3), Vector2(15, 7))

_LOGGER = logging.getLogger(__name__)


class PointerButton(Enum):
    PRIMARY = "primary"
    MIDDLE = "middle"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class GraphPoint:
    id: int
    position: Vector2   # point space


@dataclass(frozen=True, slots=True)
class GridLine:
    value: int          # point-space coordinate along the axis
    screen: float       # screen coordinate of the line along the same axis


# ===========================================================================
# Point store
# ===========================================================================

class PointStore:
    """Ordered point set where every point keeps the id it was created with."""

    def __init__(self, positions: Iterable[Vector2] = ()) -> None:
        self._points: dict[int, Vector2] = {}
        self._ids = itertools.count(1)
        for position in positions:
            self.add(position)

    def add(self, position: Vector2) -> int:
        point_id = next(self._ids)
        self._points[point_id] = position
        return point_id

    def remove(self, point_id: int) -> None:
        del self._points[point_id]

    def move(self, point_id: int, position: Vector2) -> None:
        if point_id not in self._points:
            raise KeyError(point_id)
        self._points[point_id] = position

    def get(self, point_id: int) -> Vector2:
        return self._points[point_id]

    def positions(self) -> list[Vector2]:
        return list(self._points.values())

    def __iter__(self) -> Iterator[GraphPoint]:
        return (GraphPoint(i, p) for i, p in self._points.items())

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._points


# ===========================================================================
# Editor
# ===========================================================================

class GraphEditor:

    def __init__(
        self,
        settings: Optional[GraphSettings] = None,
        camera: Optional[Camera] = None,
        points: Iterable[Vector2] = DEFAULT_POINTS,
    ) -> None:
        self._settings = settings if settings is not None else GraphSettings()
        self.camera = camera if camera is not None else Camera()
        self.points = PointStore(points)
        self.transformer = CoordinateTransformer(self.camera, self._settings.point_spacing)
        self.regression = PolynomialRegression(
            self.points.positions(),
            self._settings.polynomial_order,
            self._settings.lerp_weight,
        )
        self._dragged: Optional[int] = None
        self._panning = False
        self._last_pointer: Optional[Vector2] = None

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def settings(self) -> GraphSettings:
        return self._settings

    def apply_settings(self, settings: GraphSettings) -> None:
        old = self._settings
        if settings.lerp_weight != old.lerp_weight:
            self.regression.set_lerp_weight(settings.lerp_weight)
        if settings.point_spacing != old.point_spacing:
            self.transformer.point_spacing = settings.point_spacing
        if settings.polynomial_order != old.polynomial_order:
            self.regression.set_order(settings.polynomial_order)
        self._settings = settings
        _LOGGER.debug("Applied settings %s", settings)

    def reset(self) -> None:
        """Restore default settings and send the camera home. Points are kept."""
        self.apply_settings(GraphSettings())
        self.camera.reset()

    # ------------------------------------------------------------------
    # Point editing
    # ------------------------------------------------------------------

    def _refit(self) -> None:
        self.regression.set_points(self.points.positions())

    def add_point(self, position: Vector2) -> int:
        point_id = self.points.add(position)
        _LOGGER.debug("Added point %d at (%.3f, %.3f)", point_id, position.x, position.y)
        self._refit()
        return point_id

    def remove_point(self, point_id: int) -> None:
        self.points.remove(point_id)
        if self._dragged == point_id:
            self._dragged = None
        _LOGGER.debug("Removed point %d", point_id)
        self._refit()

    def move_point(self, point_id: int, position: Vector2) -> None:
        self.points.move(point_id, position)
        self._refit()

    def point_at(self, screen_position: Vector2) -> Optional[int]:
        """Id of the first point within two radii of *screen_position*, if any."""
        world = self.transformer.screen_to_world(screen_position)
        reach = self._settings.point_radius * 2
        for point in self.points:
            if world.distance_to(self.transformer.point_to_world(point.position)) <= reach:
                return point.id
        return None

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    @property
    def dragged_point(self) -> Optional[int]:
        return self._dragged

    @property
    def is_panning(self) -> bool:
        return self._panning

    def press(self, screen_position: Vector2, button: PointerButton) -> None:
        self._last_pointer = screen_position
        if button is not PointerButton.MIDDLE:
            point_id = self.point_at(screen_position)
            if point_id is None:
                if button is PointerButton.SECONDARY:
                    self.add_point(self.transformer.screen_to_point(screen_position))
            else:
                if button is PointerButton.PRIMARY:
                    self._dragged = point_id
                else:
                    self.remove_point(point_id)
                return
        self._panning = True

    def move(self, screen_position: Vector2, movement: Optional[Vector2] = None) -> None:
        """Pointer moved to *screen_position*.

        *movement* is the pixel delta since the previous event; it defaults to
        the difference from the last known pointer position.
        """
        if movement is None:
            last = self._last_pointer if self._last_pointer is not None else screen_position
            movement = screen_position - last
        self._last_pointer = screen_position

        if self._dragged is not None:
            self.move_point(self._dragged, self.transformer.screen_to_point(screen_position))

        if self._panning:
            target = self.camera.target
            self.camera.set_x(target.position.x - movement.x * PAN_SPEED / target.zoom)
            self.camera.set_y(target.position.y - movement.y * PAN_SPEED / target.zoom)

    def release(self) -> None:
        self._panning = False
        self._dragged = None

    def leave(self) -> None:
        self.release()
        self._last_pointer = None

    def wheel(self, screen_position: Vector2, delta_y: float) -> bool:
        """Zoom about *screen_position*; positive *delta_y* zooms out.

        Returns False when the zoom is already at the bound in that direction.
        """
        target = self.camera.target
        requested = target.zoom - delta_y * ZOOM_SENSITIVITY
        zoom = clamp_zoom(requested)
        if zoom != requested:
            _LOGGER.debug("Zoom %.4f clamped to %.4f", requested, zoom)
        if zoom == target.zoom:
            return False
        state = zoom_about(target, screen_position, zoom)
        self.camera.set_zoom(state.zoom)
        self.camera.set_position(state.position)
        return True

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Advance the curve animation and the camera; True if the camera moved."""
        self.regression.update()
        return self.camera.update()

    # ------------------------------------------------------------------
    # Layout for the renderer
    # ------------------------------------------------------------------

    def equation(self) -> str:
        return format_equation(
            self.regression.target_coefficients, self._settings.display_precision
        )

    def point_screen_radius(self) -> float:
        return self.transformer.world_to_screen_size(Vector2(self._settings.point_radius, 0)).x

    def point_screen_positions(self) -> list[tuple[int, Vector2]]:
        return [(p.id, self.transformer.point_to_screen(p.position)) for p in self.points]

    def curve_polyline(self, width: float) -> list[Vector2]:
        """Screen-space samples of the current curve across the viewport.

        Samples are spaced ``graph_step`` world units apart; samples whose
        value is not finite are left out.
        """
        start = self.transformer.screen_to_world(Vector2(0, 0)).x
        end = self.transformer.screen_to_world(Vector2(width, 0)).x
        step = self._settings.graph_step
        if end < start:
            return []
        count = int(math.floor((end - start) / step)) + 1
        world_x = start + step * np.arange(count, dtype=np.float64)
        spacing = self.transformer.point_spacing
        world_y = np.asarray(self.regression.predict(world_x / spacing), dtype=np.float64) * spacing

        samples: list[Vector2] = []
        for wx, wy in zip(world_x, world_y):
            if not math.isfinite(wy):
                continue
            samples.append(self.transformer.world_to_screen(Vector2(float(wx), float(wy))))
        return samples

    def grid_lines(self, axis: Axis, width: float, height: float) -> list[GridLine]:
        """Integer point-space grid lines visible along *axis*, origin excluded."""
        first = self.transformer.world_to_closest_point(self.camera.position).get(axis)
        last = self.transformer.world_to_closest_point(
            self.transformer.screen_to_world(Vector2(width, height))
        ).get(axis)

        lines: list[GridLine] = []
        for value in range(int(first), int(last) + 1):
            if value == 0:
                continue
            anchor = Vector2(0, 0).with_axis(axis, value)
            lines.append(GridLine(value, self.transformer.point_to_screen(anchor).get(axis)))
        return lines

    def origin_screen_position(self) -> Vector2:
        return self.transformer.point_to_screen(Vector2(0, 0))
