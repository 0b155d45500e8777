"""
Raster Canvas

Shows a packed ARGB raster at 1:1 and reports the pixel under the mouse.
"""

from typing import Optional

import numpy as np

from PySide6.QtWidgets import QLabel, QWidget
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QImage, QPixmap

from .style import ViewerStyle


def raster_to_image(raster: np.ndarray) -> QImage:
    """
    Convert a (height, width) uint32 ARGB raster to a QImage.

    The image owns a copy of the pixels.
    """
    pixels = np.ascontiguousarray(raster, dtype=np.uint32)
    height, width = pixels.shape
    image = QImage(pixels.data, width, height, width * 4, QImage.Format_ARGB32)
    return image.copy()


class RasterCanvas(QLabel):
    """Fixed-size label displaying the viewer's pane."""

    mouse_moved = Signal(int, int)
    mouse_left = Signal()

    def __init__(self, width: int, height: int, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setFixedSize(width, height)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMouseTracking(True)
        self.setStyleSheet(f"background-color: {ViewerStyle.get_color('pane')};")

    def show_raster(self, raster: np.ndarray) -> None:
        self.setPixmap(QPixmap.fromImage(raster_to_image(raster)))

    def mouseMoveEvent(self, event) -> None:
        pos = event.position().toPoint()
        self.mouse_moved.emit(pos.x(), pos.y())
        super().mouseMoveEvent(event)

    def leaveEvent(self, event) -> None:
        self.mouse_left.emit()
        super().leaveEvent(event)
