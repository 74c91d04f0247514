"""
Polynomial Canvas: desktop host.

Place points on an infinite, pannable and zoomable plane and watch the
least-squares polynomial that fits them ease into its new shape.

Mouse
-----
Right click on empty space       add a point
Right click on a point           delete it
Left drag on a point             move it
Left drag elsewhere / middle     pan
Wheel                            zoom about the cursor
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from typing import Any, Optional, Union

import pyqtgraph as pg
from PySide6.QtCore import QPointF, QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QFont, QMouseEvent, QPainter, QPaintEvent, QPolygonF, QWheelEvent
from PySide6.QtWidgets import (
    QApplication,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from .cmdline import parse_command_line
from .editor import GraphEditor, PointerButton
from .formatting import PolynomialLaTeX
from .geometry import Axis, Vector2
from .settings import FRAME_INTERVAL_MS, SETTING_RANGES, GraphSettings

_LOGGER = logging.getLogger(__name__)

# Canvas font size in pixels before text_scale and zoom are applied.
_BASE_FONT_PX: float = 10.0
_AXIS_WIDTH: float = 10.0              # world units
_TICK_SIZE: Vector2 = Vector2(10, 50)  # world units, for ticks on the x axis
_LABEL_PADDING: float = 10.0           # world units

_BUTTONS: dict[Qt.MouseButton, PointerButton] = {
    Qt.MouseButton.LeftButton: PointerButton.PRIMARY,
    Qt.MouseButton.MiddleButton: PointerButton.MIDDLE,
    Qt.MouseButton.RightButton: PointerButton.SECONDARY,
}


def _vec(pos: QPointF) -> Vector2:
    return Vector2(float(pos.x()), float(pos.y()))


def _qpoint(v: Vector2) -> QPointF:
    return QPointF(v.x, v.y)


# ===========================================================================
# Canvas
# ===========================================================================

class GraphCanvas(QWidget):
    """Paints the editor state and forwards pointer input to it."""

    edited: Signal = Signal()

    def __init__(self, editor: GraphEditor, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._editor = editor
        self.setMouseTracking(True)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.PreventContextMenu)
        self.setMinimumSize(480, 360)

        self._grid_pen = pg.mkPen("lightgray", width=1)
        self._axis_brush = pg.mkBrush("gray")
        self._point_brush = pg.mkBrush((220, 80, 80))
        self._curve_pen = pg.mkPen((220, 40, 40), width=2)
        self._text_pen = pg.mkPen("k")
        self._background = pg.mkBrush("w")

        self._timer = QTimer(self)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start()

    def _on_frame(self) -> None:
        self._editor.tick()
        self.update()

    def stop(self) -> None:
        self._timer.stop()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        button = _BUTTONS.get(event.button())
        if button is None:
            return super().mousePressEvent(event)
        count = len(self._editor.points)
        self._editor.press(_vec(event.position()), button)
        if len(self._editor.points) != count:
            self.edited.emit()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        self._editor.move(_vec(event.position()))
        if self._editor.dragged_point is not None:
            self.edited.emit()
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        self._editor.release()
        event.accept()

    def leaveEvent(self, event: Any) -> None:  # noqa: N802
        self._editor.leave()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802
        # Qt reports +120 per notch away from the user; the editor expects
        # positive deltas to zoom out.
        self._editor.wheel(_vec(event.position()), -float(event.angleDelta().y()))
        event.accept()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        width, height = float(self.width()), float(self.height())
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(QRectF(0, 0, width, height), self._background)
            self._paint_grid(painter, width, height)
            self._paint_axes(painter, width, height)
            self._paint_labels(painter, width, height)
            self._paint_points(painter)
            self._paint_curve(painter, width)
        finally:
            painter.end()

    def _paint_grid(self, painter: QPainter, width: float, height: float) -> None:
        painter.setPen(self._grid_pen)
        for line in self._editor.grid_lines(Axis.X, width, height):
            painter.drawLine(QPointF(line.screen, 0), QPointF(line.screen, height))
        for line in self._editor.grid_lines(Axis.Y, width, height):
            painter.drawLine(QPointF(0, line.screen), QPointF(width, line.screen))

    def _paint_axes(self, painter: QPainter, width: float, height: float) -> None:
        tf = self._editor.transformer
        origin = self._editor.origin_screen_position()
        thickness = tf.world_to_screen_size(Vector2(_AXIS_WIDTH, _AXIS_WIDTH))
        painter.fillRect(
            QRectF(origin.x - thickness.x / 2, 0, thickness.x, height), self._axis_brush
        )
        painter.fillRect(
            QRectF(0, origin.y - thickness.y / 2, width, thickness.y), self._axis_brush
        )

        for axis in (Axis.X, Axis.Y):
            tick = _TICK_SIZE if axis is Axis.X else _TICK_SIZE.flipped()
            size = tf.world_to_screen_size(tick)
            for line in self._editor.grid_lines(axis, width, height):
                anchor = Vector2(0, 0).with_axis(axis, line.value)
                centre = tf.point_to_screen(anchor)
                painter.fillRect(
                    QRectF(centre.x - size.x / 2, centre.y - size.y / 2, size.x, size.y),
                    self._axis_brush,
                )

    def _paint_labels(self, painter: QPainter, width: float, height: float) -> None:
        tf = self._editor.transformer
        settings = self._editor.settings
        font = QFont()
        font.setPixelSize(max(1, int(_BASE_FONT_PX * settings.text_scale * tf.camera.zoom)))
        painter.setFont(font)
        painter.setPen(self._text_pen)
        metrics = painter.fontMetrics()
        padding = tf.world_to_screen_size(Vector2(_LABEL_PADDING, _LABEL_PADDING))
        tick = tf.world_to_screen_size(_TICK_SIZE)

        for line in self._editor.grid_lines(Axis.X, width, height):
            text = str(line.value)
            centre = tf.point_to_screen(Vector2(line.value, 0))
            x = centre.x - metrics.horizontalAdvance(text) / 2
            y = centre.y + tick.y / 2 + metrics.ascent() + padding.y
            painter.drawText(QPointF(x, y), text)

        for line in self._editor.grid_lines(Axis.Y, width, height):
            text = str(line.value)
            centre = tf.point_to_screen(Vector2(0, line.value))
            x = centre.x - tick.y / 2 - metrics.horizontalAdvance(text) - padding.x
            y = centre.y + metrics.ascent() / 2
            painter.drawText(QPointF(x, y), text)

    def _paint_points(self, painter: QPainter) -> None:
        radius = self._editor.point_screen_radius()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self._point_brush)
        for _, centre in self._editor.point_screen_positions():
            painter.drawEllipse(_qpoint(centre), radius, radius)
        painter.setBrush(Qt.BrushStyle.NoBrush)

    def _paint_curve(self, painter: QPainter, width: float) -> None:
        samples = self._editor.curve_polyline(width)
        if len(samples) < 2:
            return
        painter.setPen(self._curve_pen)
        painter.drawPolyline(QPolygonF([_qpoint(s) for s in samples]))


# ===========================================================================
# Settings panel
# ===========================================================================

class SettingsPanel(QGroupBox):
    """Collapsible editor for :class:`GraphSettings` plus the equation readout."""

    settings_changed: Signal = Signal(object)
    reset_requested: Signal = Signal()

    _LABELS: tuple[tuple[str, str], ...] = (
        ("point_spacing", "Point spacing:"),
        ("graph_step", "Graph step:"),
        ("point_radius", "Point radius:"),
        ("text_scale", "Text scale:"),
        ("lerp_weight", "Interpolation weight:"),
        ("polynomial_order", "Polynomial order:"),
        ("display_precision", "Equation digits:"),
    )

    def __init__(self, settings: GraphSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__("Settings", parent)
        self._settings = settings
        self._editors: dict[str, Union[QSpinBox, QDoubleSpinBox]] = {}
        self._latex_gen = PolynomialLaTeX(settings.display_precision)
        self._latex = ""
        self._build_ui()
        self.setCheckable(True)
        self.setChecked(True)
        self.toggled.connect(self._body.setVisible)

    def _build_ui(self) -> None:
        outer = QVBoxLayout(self)
        self._body = QWidget()
        outer.addWidget(self._body)
        layout = QVBoxLayout(self._body)

        form = QFormLayout()
        for name, label in self._LABELS:
            lo, hi = SETTING_RANGES[name]
            value = getattr(self._settings, name)
            if isinstance(value, int):
                box: Union[QSpinBox, QDoubleSpinBox] = QSpinBox()
                box.setRange(int(lo), int(hi))
            else:
                box = QDoubleSpinBox()
                box.setRange(float(lo), float(hi))
                if name == "lerp_weight":
                    box.setDecimals(2)
                    box.setSingleStep(0.01)
                else:
                    box.setDecimals(0)
            box.setValue(value)
            box.valueChanged.connect(lambda v, n=name: self._on_value_changed(n, v))
            self._editors[name] = box
            form.addRow(QLabel(label), box)
        layout.addLayout(form)

        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self.reset_requested.emit)
        layout.addWidget(reset_btn)

        layout.addWidget(QLabel("Fitted polynomial:"))
        self._equation = QLabel("")
        self._equation.setStyleSheet("font-family: 'Courier New';")
        self._equation.setWordWrap(True)
        self._equation.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self._equation)

        copy_btn = QPushButton("Copy LaTeX")
        copy_btn.clicked.connect(self.copy_latex)
        layout.addWidget(copy_btn)
        layout.addStretch(1)

    def _on_value_changed(self, name: str, value: float) -> None:
        if name in ("polynomial_order", "display_precision"):
            value = int(value)
        try:
            new_settings = replace(self._settings, **{name: value})
        except ValueError as exc:
            _LOGGER.warning("Rejected setting %s=%r: %s", name, value, exc)
            QMessageBox.critical(self, "Invalid Settings", str(exc))
            self.show_settings(self._settings)
            return
        self._settings = new_settings
        self._latex_gen.reconfigure(new_settings.display_precision)
        self.settings_changed.emit(new_settings)

    def show_settings(self, settings: GraphSettings) -> None:
        """Reflect *settings* in the widgets without emitting change signals."""
        self._settings = settings
        self._latex_gen.reconfigure(settings.display_precision)
        for name, box in self._editors.items():
            box.blockSignals(True)
            box.setValue(getattr(settings, name))
            box.blockSignals(False)

    def show_equation(self, equation: str, coefficients: Any) -> None:
        self._equation.setText(equation)
        self._latex = self._latex_gen.generate(coefficients)

    def copy_latex(self) -> None:
        if self._latex:
            QApplication.clipboard().setText(self._latex)
            QMessageBox.information(self, "Copied", "LaTeX copied to clipboard.")


# ===========================================================================
# Main window
# ===========================================================================

class GraphWindow(QMainWindow):

    def __init__(self, settings: Optional[GraphSettings] = None) -> None:
        super().__init__()
        self.setWindowTitle("Polynomial Canvas")
        self.setGeometry(100, 100, 1280, 780)

        self._editor = GraphEditor(settings)
        self._build_ui()
        self._refresh_equation()

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self._canvas = GraphCanvas(self._editor)
        self._canvas.edited.connect(self._refresh_equation)
        root.addWidget(self._canvas, 3)

        self._panel = SettingsPanel(self._editor.settings)
        self._panel.settings_changed.connect(self._on_settings_changed)
        self._panel.reset_requested.connect(self._on_reset)
        root.addWidget(self._panel, 1)

    def _on_settings_changed(self, settings: GraphSettings) -> None:
        try:
            self._editor.apply_settings(settings)
        except ValueError as exc:
            _LOGGER.warning("Settings rejected: %s", exc)
            QMessageBox.critical(self, "Invalid Settings", str(exc))
            self._panel.show_settings(self._editor.settings)
            return
        self._refresh_equation()

    def _on_reset(self) -> None:
        self._editor.reset()
        self._panel.show_settings(self._editor.settings)
        self._refresh_equation()

    def _refresh_equation(self) -> None:
        coefficients = self._editor.regression.target_coefficients
        self._panel.show_equation(self._editor.equation(), coefficients)

    def closeEvent(self, event: Any) -> None:  # noqa: N802
        self._canvas.stop()
        super().closeEvent(event)


# ===========================================================================
# Entry point
# ===========================================================================

def main() -> int:
    args = parse_command_line()
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        level=args.log_level,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    _LOGGER.info("Starting with %s", args.settings)
    app = QApplication(sys.argv[:1])
    window = GraphWindow(args.settings)
    window.show()
    return app.exec()
