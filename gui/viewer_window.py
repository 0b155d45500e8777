"""
Viewer Window

One window per SliceViewer: the rendered pane, navigation and range
controls, plane positions and actions that open derived data in new
windows.
"""

import logging
from typing import Callable, List, Optional

import numpy as np

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QGroupBox, QPushButton, QLabel, QLineEdit, QCheckBox,
    QMessageBox, QInputDialog, QStatusBar
)
from PySide6.QtCore import Qt, QObject, Signal, Slot

from config import DEFAULT_GUI, GUIConfig
from processing.conversions import FLOAT_TARGETS
from visualization.slice_viewer import SliceViewer
from .canvas import RasterCanvas
from .panels.position_panel import PositionPanel


# Windows spawned from derived data; kept alive until closed
_OPEN_WINDOWS: List["ViewerWindow"] = []


def open_viewer_window(viewer: SliceViewer, gui_config: Optional[GUIConfig] = None) -> "ViewerWindow":
    """Create, register and show a window for a viewer."""
    window = ViewerWindow(viewer, gui_config)
    _OPEN_WINDOWS.append(window)
    window.show()
    return window


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit - 1] + "…"


class FrameEmitter(QObject):
    """Hands animation frames from the worker thread to the GUI thread."""
    frame_ready = Signal(int, object)
    finished = Signal(bool)
    error = Signal(str)


class ViewerWindow(QMainWindow):
    """Window presenting one SliceViewer."""

    def __init__(self, viewer: SliceViewer, gui_config: Optional[GUIConfig] = None):
        super().__init__()
        self._viewer = viewer
        self._gui = gui_config or DEFAULT_GUI
        self._emitter = FrameEmitter(self)
        self._emitter.frame_ready.connect(self._on_frame)
        self._emitter.finished.connect(self._on_animation_finished)
        self._emitter.error.connect(self._on_animation_error)

        self._setup_ui()
        self._redraw()

    @property
    def viewer(self) -> SliceViewer:
        return self._viewer

    def _setup_ui(self) -> None:
        """Set up the window UI."""
        viewer = self._viewer
        dataset = viewer.dataset
        self.setWindowTitle(dataset.display_name)
        self.setAttribute(Qt.WA_DeleteOnClose)

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(8)

        # Pane and plane positions
        left = QVBoxLayout()
        engine = viewer.engine
        self._canvas = RasterCanvas(engine.pane_width, engine.pane_height)
        self._canvas.mouse_moved.connect(self._on_mouse_moved)
        self._canvas.mouse_left.connect(lambda: self._readout_label.setText(""))
        left.addWidget(self._canvas)

        self._readout_label = QLabel("")
        self._readout_label.setObjectName("readoutLabel")
        left.addWidget(self._readout_label)

        self._position_panel: Optional[PositionPanel] = None
        if viewer.positions_count > 0:
            self._position_panel = PositionPanel(viewer)
            self._position_panel.position_changed.connect(self._redraw)
            self._position_panel.animate_requested.connect(self._on_animate)
            self._position_panel.stop_requested.connect(viewer.stop_animation)
            left.addWidget(self._position_panel)
        left.addStretch()
        main_layout.addLayout(left)

        # Controls
        controls = QVBoxLayout()
        controls.addWidget(self._build_info_group())
        controls.addWidget(self._build_navigation_group())
        controls.addWidget(self._build_range_group())
        controls.addWidget(self._build_derive_group())
        controls.addStretch()
        main_layout.addLayout(controls)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)

    def _build_info_group(self) -> QGroupBox:
        viewer = self._viewer
        dataset = viewer.dataset
        group = QGroupBox("Dataset")
        layout = QVBoxLayout(group)
        layout.addWidget(QLabel(f"Type: {dataset.element_type.description or dataset.element_type.name}"))
        layout.addWidget(QLabel(f"Dimensions: {' x '.join(str(d) for d in dataset.dimensions)}"))
        if dataset.value_type or dataset.value_unit:
            layout.addWidget(QLabel(f"Values: {dataset.value_type or ''} {dataset.value_unit or ''}".strip()))
        self._scale_label = QLabel()
        layout.addWidget(self._scale_label)
        self._center_label = QLabel()
        layout.addWidget(self._center_label)
        return group

    def _build_navigation_group(self) -> QGroupBox:
        viewer = self._viewer
        group = QGroupBox("Navigation")
        grid = QGridLayout(group)

        buttons = [
            ("Zoom In", viewer.zoom_in, 0, 0),
            ("Zoom Out", viewer.zoom_out, 0, 2),
            ("Up", viewer.pan_up, 1, 1),
            ("Left", viewer.pan_left, 2, 0),
            ("Reset", viewer.reset_view, 2, 1),
            ("Right", viewer.pan_right, 2, 2),
            ("Down", viewer.pan_down, 3, 1),
        ]
        for text, action, row, col in buttons:
            btn = QPushButton(text)
            btn.clicked.connect(lambda _=False, a=action, t=text: self._navigate(t, a))
            grid.addWidget(btn, row, col)
        return group

    def _build_range_group(self) -> QGroupBox:
        viewer = self._viewer
        group = QGroupBox("Display Range")
        layout = QVBoxLayout(group)

        self._data_range_check = QCheckBox("Use data range")
        self._data_range_check.setChecked(viewer.prefer_data_range)
        self._data_range_check.toggled.connect(self._on_data_range_toggled)
        layout.addWidget(self._data_range_check)

        self._min_label = QLabel()
        self._max_label = QLabel()
        layout.addWidget(self._min_label)
        layout.addWidget(self._max_label)

        window_row = QHBoxLayout()
        self._low_edit = QLineEdit()
        self._low_edit.setPlaceholderText("min")
        self._high_edit = QLineEdit()
        self._high_edit.setPlaceholderText("max")
        apply_btn = QPushButton("Apply")
        apply_btn.clicked.connect(self._on_apply_window)
        window_row.addWidget(self._low_edit)
        window_row.addWidget(self._high_edit)
        window_row.addWidget(apply_btn)
        layout.addLayout(window_row)

        self._update_range_labels()
        return group

    def _build_derive_group(self) -> QGroupBox:
        group = QGroupBox("Derived Data")
        layout = QVBoxLayout(group)

        actions = [
            ("Snapshot", lambda: [self._viewer.open_snapshot()]),
            ("Grab Plane", lambda: [self._viewer.open_plane()]),
            ("Swap Axes ...", self._swap_axes),
            ("Explode ...", self._explode),
            ("To Float ...", self._to_float),
            ("To Color", lambda: [self._viewer.open_as_color()]),
            ("Magnitude", lambda: [self._viewer.open_magnitude()]),
        ]
        for text, action in actions:
            btn = QPushButton(text)
            btn.setObjectName("secondaryButton")
            btn.clicked.connect(lambda _=False, a=action, t=text: self._spawn(t, a))
            layout.addWidget(btn)
        return group

    # ========== Helper Methods ==========

    def _warn(self, title: str, error: Exception) -> None:
        logging.error(f"{title} failed: {error}")
        QMessageBox.warning(self, title, str(error))

    def _redraw(self) -> None:
        try:
            raster = self._viewer.render()
        except Exception as e:
            self._warn("Render", e)
            return
        self._show(raster)

    def _show(self, raster: np.ndarray) -> None:
        self._canvas.show_raster(raster)
        viewer = self._viewer
        self._scale_label.setText(f"Scale: {viewer.effective_scale()}")
        c0, c1 = viewer.zoom_center()
        decimals = self._gui.readout_decimals
        self._center_label.setText(f"Zoom Ctr: {c0:.{decimals}f}, {c1:.{decimals}f}")
        errors = viewer.last_parse_errors
        if errors:
            self._status_bar.showMessage(f"{len(errors)} value(s) could not be parsed")
        if self._position_panel is not None:
            self._position_panel.refresh()

    def _update_range_labels(self) -> None:
        limit = self._gui.label_char_limit
        low, high = self._viewer.effective_range
        self._min_label.setText(_truncate(f"Min: {low}", limit))
        self._max_label.setText(_truncate(f"Max: {high}", limit))
        self._min_label.setToolTip(str(low))
        self._max_label.setToolTip(str(high))

    def _navigate(self, name: str, action: Callable[[], Optional[bool]]) -> None:
        if action() is False:
            self._status_bar.showMessage(f"{name}: limit reached", 2000)
            return
        self._redraw()

    def _spawn(self, title: str, action: Callable[[], Optional[List[SliceViewer]]]) -> None:
        try:
            viewers = action()
        except Exception as e:
            self._warn(title, e)
            return
        for viewer in viewers or []:
            open_viewer_window(viewer, self._gui)

    # ========== Dialog Actions ==========

    def _swap_axes(self) -> Optional[List[SliceViewer]]:
        ndim = max(self._viewer.dataset.num_dimensions, 2)
        axis0, ok = QInputDialog.getInt(self, "Swap Axes", f"First axis (0 - {ndim - 1})", 1, 0, ndim - 1)
        if not ok:
            return None
        axis1, ok = QInputDialog.getInt(self, "Swap Axes", f"Second axis (0 - {ndim - 1})", 0, 0, ndim - 1)
        if not ok:
            return None
        return [self._viewer.swap_axes(axis0, axis1)]

    def _explode(self) -> Optional[List[SliceViewer]]:
        ndim = self._viewer.dataset.num_dimensions
        axis, ok = QInputDialog.getInt(
            self, "Explode", f"Axis along which the data is exploded (0 - {ndim - 1})", 0, 0, max(ndim - 1, 0)
        )
        if not ok:
            return None
        return self._viewer.open_exploded(axis)

    def _to_float(self) -> Optional[List[SliceViewer]]:
        name, ok = QInputDialog.getItem(self, "To Float", "Target type", list(FLOAT_TARGETS), 2, False)
        if not ok:
            return None
        return [self._viewer.open_as_float(name)]

    # ========== Event Handlers ==========

    def _on_mouse_moved(self, x: int, y: int) -> None:
        readout = self._viewer.readout(x, y)
        if readout is None:
            self._readout_label.setText("")
            return
        self._readout_label.setText(self._viewer.format_readout(readout, self._gui.readout_decimals))

    def _on_data_range_toggled(self, checked: bool) -> None:
        try:
            self._viewer.set_prefer_data_range(checked)
        except Exception as e:
            self._warn("Display Range", e)
            return
        self._update_range_labels()
        self._redraw()

    def _on_apply_window(self) -> None:
        try:
            self._viewer.set_display_window(self._low_edit.text(), self._high_edit.text())
        except Exception as e:
            self._warn("Display Window", e)
            return
        self._update_range_labels()
        self._redraw()

    def _on_animate(self, extra: int) -> None:
        try:
            started = self._viewer.animate(
                extra,
                on_frame=lambda i, raster: self._emitter.frame_ready.emit(i, raster),
                on_finished=self._emitter.finished.emit,
                on_error=lambda e: self._emitter.error.emit(str(e)),
            )
        except Exception as e:
            self._warn("Animate", e)
            return
        if started and self._position_panel is not None:
            self._position_panel.set_animating(True)

    @Slot(int, object)
    def _on_frame(self, position: int, raster: np.ndarray) -> None:
        self._show(raster)

    @Slot(str)
    def _on_animation_error(self, message: str) -> None:
        QMessageBox.warning(self, "Animate", message)

    @Slot(bool)
    def _on_animation_finished(self, stopped: bool) -> None:
        if self._position_panel is not None:
            self._position_panel.set_animating(False)
        self._status_bar.showMessage("Animation stopped" if stopped else "Animation finished", 2000)

    def closeEvent(self, event) -> None:
        self._viewer.close()
        if self in _OPEN_WINDOWS:
            _OPEN_WINDOWS.remove(self)
        super().closeEvent(event)
