"""
Slice Viewer

Main entry point for the application.

Usage:
    slice-viewer                  # launcher window only
    slice-viewer volume.npy       # open a file
    slice-viewer demo:waves       # open a generated demo dataset
"""

import sys
import logging

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from config import DEFAULT_GUI
from gui.main_window import MainWindow
from gui.style import ViewerStyle


def setup_logging():
    """Configure logging to stdout."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def main():
    """Application entry point."""
    setup_logging()

    # Enable High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName(DEFAULT_GUI.window_title)
    app.setApplicationVersion("1.0")

    app.setFont(QFont(DEFAULT_GUI.font_family, DEFAULT_GUI.font_size))
    ViewerStyle.apply(app)

    window = MainWindow()
    window.show()

    for source in app.arguments()[1:]:
        window.open_source(source)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
