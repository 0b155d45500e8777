"""
Main Window

Launcher window: opens datasets from files or demo generators, each in
its own viewer window, and shows the application log.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QGroupBox, QPushButton,
    QFileDialog, QMessageBox, QStatusBar
)
from PySide6.QtGui import QAction

from config import DEFAULT_GUI, DEFAULT_VIEWER, GUIConfig, ViewerConfig
from loaders import ArrayLoader, DEMOS, DEMO_PREFIX, load_dataset
from visualization.slice_viewer import SliceViewer
from .panels.log_panel import LogPanel
from .viewer_window import open_viewer_window


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        viewer_config: Optional[ViewerConfig] = None,
        gui_config: Optional[GUIConfig] = None
    ):
        super().__init__()
        self._viewer_config = viewer_config or DEFAULT_VIEWER
        self._gui = gui_config or DEFAULT_GUI

        self._setup_ui()
        self._setup_menu()

    def _setup_ui(self) -> None:
        """Set up the main window UI."""
        self.setWindowTitle(self._gui.window_title)
        self.resize(*self._gui.window_size)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)

        open_group = QGroupBox("Open")
        open_layout = QVBoxLayout(open_group)

        open_btn = QPushButton("Open Array File...")
        open_btn.clicked.connect(self._on_open_file)
        open_layout.addWidget(open_btn)

        for name in DEMOS:
            btn = QPushButton(f"Demo: {name}")
            btn.setObjectName("secondaryButton")
            btn.clicked.connect(lambda _=False, n=name: self.open_source(DEMO_PREFIX + n))
            open_layout.addWidget(btn)

        layout.addWidget(open_group)

        self._log_panel = LogPanel()
        layout.addWidget(self._log_panel, stretch=1)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

    def _setup_menu(self) -> None:
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        open_action = QAction("Open...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open_file)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def open_source(self, source: str) -> None:
        """Load a source and open it in a new viewer window."""
        try:
            dataset = load_dataset(source)
            viewer = SliceViewer(dataset, config=self._viewer_config)
        except Exception as e:
            logging.error(f"Failed to open {source}: {e}")
            QMessageBox.critical(self, "Open Failed", f"Could not open {source}:\n{e}")
            return
        open_viewer_window(viewer, self._gui)
        self._status_bar.showMessage(f"Opened {dataset.display_name}")

    def _on_open_file(self) -> None:
        filepath, _ = QFileDialog.getOpenFileName(
            self, "Open Array File", "", ArrayLoader.get_file_filter()
        )
        if filepath:
            self.open_source(filepath)

    def _on_about(self) -> None:
        QMessageBox.about(
            self,
            "About",
            f"{self._gui.window_title}\n\n"
            "Pan and zoom through 2-D planes of N-dimensional datasets."
        )

    def closeEvent(self, event) -> None:
        self._log_panel.detach()
        super().closeEvent(event)
