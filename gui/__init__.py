"""GUI package for the slice viewer."""

from .panels import LogPanel, PositionPanel
from .main_window import MainWindow
from .viewer_window import ViewerWindow, open_viewer_window
from .canvas import RasterCanvas
from .style import ViewerStyle

__all__ = [
    "MainWindow",
    "ViewerWindow",
    "open_viewer_window",
    "RasterCanvas",
    "ViewerStyle",
    "LogPanel",
    "PositionPanel",
]
