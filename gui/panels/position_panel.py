"""
Position Panel

One row per non-plane axis with stepping and animation controls.
"""

from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLabel, QPushButton
)
from PySide6.QtCore import Signal

from visualization.slice_viewer import SliceViewer


class PositionPanel(QWidget):
    """
    Controls for the fixed positions of a viewer's non-plane axes.

    Emits ``position_changed`` after any step so the owner can re-render.
    """

    position_changed = Signal()
    animate_requested = Signal(int)
    stop_requested = Signal()

    def __init__(self, viewer: SliceViewer, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._viewer = viewer
        self._labels: List[QLabel] = []
        self._animate_buttons: List[QPushButton] = []
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Plane Position")
        group_layout = QVBoxLayout(group)

        viewer = self._viewer
        dataset = viewer.dataset
        for extra in range(viewer.positions_count):
            axis = viewer.selection.axis_number(extra)
            row = QHBoxLayout()

            name = dataset.axis_label(axis) or f"dim {axis}"
            row.addWidget(QLabel(f"{name}:"))

            for text, step in (("<<", viewer.first_position), ("<", viewer.decrement_position)):
                btn = QPushButton(text)
                btn.setFixedWidth(36)
                btn.clicked.connect(lambda _=False, s=step, e=extra: self._step(s, e))
                row.addWidget(btn)

            label = QLabel(viewer.position_label(extra))
            label.setMinimumWidth(80)
            self._labels.append(label)
            row.addWidget(label)

            for text, step in ((">", viewer.increment_position), (">>", viewer.last_position)):
                btn = QPushButton(text)
                btn.setFixedWidth(36)
                btn.clicked.connect(lambda _=False, s=step, e=extra: self._step(s, e))
                row.addWidget(btn)

            animate_btn = QPushButton("Animate")
            animate_btn.setObjectName("secondaryButton")
            animate_btn.clicked.connect(lambda _=False, e=extra: self.animate_requested.emit(e))
            self._animate_buttons.append(animate_btn)
            row.addWidget(animate_btn)

            row.addStretch()
            group_layout.addLayout(row)

        stop_btn = QPushButton("Stop Animation")
        stop_btn.setObjectName("secondaryButton")
        stop_btn.clicked.connect(self.stop_requested.emit)
        group_layout.addWidget(stop_btn)

        layout.addWidget(group)

    def _step(self, step, extra: int) -> None:
        if step(extra):
            self.refresh()
            self.position_changed.emit()

    def refresh(self) -> None:
        """Update position labels from the viewer."""
        for extra, label in enumerate(self._labels):
            label.setText(self._viewer.position_label(extra))

    def set_animating(self, animating: bool) -> None:
        for btn in self._animate_buttons:
            btn.setEnabled(not animating)
