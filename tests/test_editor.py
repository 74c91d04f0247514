"""Tests for the graph editing session: pointer handling, frame ticks and render layout."""

from __future__ import annotations

import pytest

from poly_canvas.camera import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM
from poly_canvas.editor import DEFAULT_POINTS, GraphEditor, PointerButton, PointStore
from poly_canvas.geometry import Axis, Vector2
from poly_canvas.settings import GraphSettings

# Default camera (origin, zoom 0.25) and spacing 300: point (3, 3) is drawn at (225, 225).
FIRST_POINT_SCREEN = Vector2(225.0, 225.0)
EMPTY_SCREEN = Vector2(700.0, 500.0)


@pytest.fixture
def editor():
    return GraphEditor()


def _approx(vector, expected, abs=1e-9):
    assert vector.x == pytest.approx(expected.x, abs=abs)
    assert vector.y == pytest.approx(expected.y, abs=abs)


class TestPointStore:
    """Tests for PointStore."""

    def test_ids_are_stable(self):
        store = PointStore([Vector2(1, 1), Vector2(2, 2), Vector2(3, 3)])
        store.remove(2)
        new_id = store.add(Vector2(4, 4))
        assert new_id == 4
        assert [p.id for p in store] == [1, 3, 4]

    def test_coincident_points_are_distinct(self):
        store = PointStore()
        a = store.add(Vector2(1, 1))
        b = store.add(Vector2(1, 1))
        assert a != b
        store.remove(a)
        assert b in store
        assert len(store) == 1

    def test_move_unknown_id(self):
        with pytest.raises(KeyError):
            PointStore().move(7, Vector2(0, 0))


class TestEditing:
    """Point creation, removal and dragging."""

    def test_default_points(self, editor):
        assert editor.points.positions() == list(DEFAULT_POINTS)
        assert len(editor.regression.target_coefficients) == 6

    def test_hit_test(self, editor):
        assert editor.point_at(FIRST_POINT_SCREEN) == 1
        # 60 world units away, radius 40: inside the 2x reach.
        assert editor.point_at(Vector2(240.0, 225.0)) == 1
        # 100 world units away.
        assert editor.point_at(Vector2(250.0, 225.0)) is None

    def test_secondary_on_empty_adds_point(self, editor):
        editor.press(Vector2(525.0, 150.0), PointerButton.SECONDARY)
        assert len(editor.points) == 4
        _approx(editor.points.get(4), Vector2(7.0, 2.0))
        assert editor.regression.points[-1] == Vector2(7.0, 2.0)

    def test_secondary_on_point_deletes_it(self, editor):
        editor.press(FIRST_POINT_SCREEN, PointerButton.SECONDARY)
        assert 1 not in editor.points
        assert len(editor.regression.points) == 2
        assert not editor.is_panning

    def test_drag(self, editor):
        editor.press(FIRST_POINT_SCREEN, PointerButton.PRIMARY)
        assert editor.dragged_point == 1
        assert not editor.is_panning
        editor.move(Vector2(300.0, 150.0))
        assert editor.points.get(1) == Vector2(4.0, 2.0)
        assert Vector2(4.0, 2.0) in editor.regression.points
        editor.release()
        assert editor.dragged_point is None
        editor.move(Vector2(0.0, 0.0))
        assert editor.points.get(1) == Vector2(4.0, 2.0)

    def test_drag_onto_another_point_keeps_both(self, editor):
        editor.press(FIRST_POINT_SCREEN, PointerButton.PRIMARY)
        editor.move(Vector2(525.0, 225.0))  # on top of (7, 3)
        editor.release()
        assert len(editor.points) == 3
        editor.press(Vector2(525.0, 225.0), PointerButton.SECONDARY)
        assert len(editor.points) == 2
        assert editor.points.get(2) == Vector2(7.0, 3.0)

    def test_removing_dragged_point_stops_drag(self, editor):
        editor.press(FIRST_POINT_SCREEN, PointerButton.PRIMARY)
        editor.remove_point(1)
        assert editor.dragged_point is None
        editor.move(Vector2(10.0, 10.0))
        assert len(editor.points) == 2

    def test_edit_refits(self, editor):
        before = editor.regression.target_coefficients
        editor.add_point(Vector2(10.0, -4.0))
        assert not (editor.regression.target_coefficients == before).all()


class TestPanAndZoom:
    """Camera control through pointer input."""

    def test_primary_on_empty_pans(self, editor):
        editor.press(EMPTY_SCREEN, PointerButton.PRIMARY)
        assert editor.is_panning
        editor.move(EMPTY_SCREEN + Vector2(10.0, -4.0))
        target = editor.camera.target.position
        assert target.x == pytest.approx(-10.0 * 3 / DEFAULT_ZOOM)
        assert target.y == pytest.approx(4.0 * 3 / DEFAULT_ZOOM)
        # Actual state only follows on the next tick.
        assert editor.camera.position == Vector2(0.0, 0.0)
        assert editor.tick() is True
        assert editor.camera.position == target

    def test_explicit_movement(self, editor):
        editor.press(EMPTY_SCREEN, PointerButton.PRIMARY)
        editor.move(EMPTY_SCREEN, movement=Vector2(-2.0, 0.0))
        assert editor.camera.target.position.x == pytest.approx(24.0)

    def test_middle_button_pans_over_point(self, editor):
        editor.press(FIRST_POINT_SCREEN, PointerButton.MIDDLE)
        assert editor.is_panning
        assert editor.dragged_point is None

    def test_leave_stops_panning(self, editor):
        editor.press(EMPTY_SCREEN, PointerButton.PRIMARY)
        editor.leave()
        assert not editor.is_panning
        editor.move(Vector2(0.0, 0.0), movement=Vector2(50.0, 50.0))
        assert editor.camera.target.position == Vector2(0.0, 0.0)

    def test_wheel_keeps_anchor_fixed(self, editor):
        anchor = Vector2(400.0, 300.0)
        world_before = editor.transformer.screen_to_world(anchor)
        assert editor.wheel(anchor, -250.0) is True
        assert editor.camera.target.zoom == pytest.approx(0.5)
        editor.tick()
        _approx(editor.transformer.screen_to_world(anchor), world_before, abs=1e-6)

    def test_wheel_clamps_to_max(self, editor):
        assert editor.wheel(Vector2(0.0, 0.0), -10_000.0) is True
        assert editor.camera.target.zoom == MAX_ZOOM
        assert editor.wheel(Vector2(0.0, 0.0), -1.0) is False

    def test_wheel_clamps_to_min(self, editor):
        assert editor.wheel(Vector2(100.0, 100.0), 1_000.0) is True
        assert editor.camera.target.zoom == MIN_ZOOM
        assert editor.wheel(Vector2(100.0, 100.0), 5.0) is False

    def test_tick_without_input(self, editor):
        assert editor.tick() is False


class TestSettings:
    """Applying and resetting settings."""

    def test_apply_settings(self, editor):
        editor.apply_settings(
            GraphSettings(point_spacing=200, lerp_weight=0.5, polynomial_order=2)
        )
        assert editor.regression.order == 2
        assert editor.regression.lerp_weight == 0.5
        assert editor.transformer.point_spacing == 200
        assert len(editor.regression.target_coefficients) == 3

    def test_reset_keeps_points(self, editor):
        editor.apply_settings(GraphSettings(polynomial_order=1, point_radius=5))
        editor.camera.set_position(Vector2(80.0, 80.0))
        editor.camera.set_zoom(2.0)
        editor.tick()
        editor.add_point(Vector2(1.0, 1.0))
        editor.reset()
        editor.tick()
        assert editor.settings == GraphSettings()
        assert editor.regression.order == 5
        assert editor.camera.position == Vector2(0.0, 0.0)
        assert editor.camera.zoom == DEFAULT_ZOOM
        assert len(editor.points) == 4


class TestLayout:
    """Render layout helpers."""

    def test_point_screen_radius(self, editor):
        assert editor.point_screen_radius() == pytest.approx(10.0)

    def test_point_screen_positions(self, editor):
        positions = dict(editor.point_screen_positions())
        _approx(positions[1], FIRST_POINT_SCREEN)
        _approx(positions[3], Vector2(1125.0, 525.0))

    def test_origin_screen_position(self, editor):
        assert editor.origin_screen_position() == Vector2(0.0, 0.0)

    def test_curve_passes_through_points(self, editor):
        samples = editor.curve_polyline(800)
        assert len(samples) == 321
        assert samples[0].x == pytest.approx(0.0)
        # World x = 900 is point x = 3.
        assert samples[90].x == pytest.approx(225.0)
        assert samples[90].y == pytest.approx(225.0, abs=0.1)

    def test_curve_for_empty_session(self):
        editor = GraphEditor(points=())
        samples = editor.curve_polyline(100)
        assert all(s.y == 0.0 for s in samples)

    def test_grid_lines(self, editor):
        xs = editor.grid_lines(Axis.X, 800, 600)
        ys = editor.grid_lines(Axis.Y, 800, 600)
        assert [line.value for line in xs] == list(range(1, 12))
        assert [line.value for line in ys] == list(range(1, 9))
        assert xs[0].screen == pytest.approx(75.0)

    def test_grid_lines_skip_origin(self, editor):
        editor.camera.set_position(Vector2(-1000.0, -1000.0))
        editor.tick()
        values = [line.value for line in editor.grid_lines(Axis.X, 800, 600)]
        assert 0 not in values
        assert values[0] == -3
        assert values[-1] == 7

    def test_equation(self, editor):
        assert editor.equation().startswith("y = 0.04x^2 - 0.42x + 3.8")
