"""
Log Panel

Shows application log records as they are emitted, from any thread.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPlainTextEdit,
    QPushButton, QComboBox, QLabel
)
from PySide6.QtCore import Signal, Slot, QObject
from PySide6.QtGui import QFont


LEVEL_NAMES = ["DEBUG", "INFO", "WARNING", "ERROR"]
MAX_LOG_LINES = 2000


class LogEmitter(QObject):
    """Carries log records to the GUI thread."""
    log_message = Signal(str, int)


class QLogHandler(logging.Handler):
    """
    Logging handler that forwards formatted records through a Qt signal.

    Records logged on worker threads (e.g. animation) are queued to the
    thread owning the emitter.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__()
        self.emitter = LogEmitter(parent)

    def emit(self, record: logging.LogRecord) -> None:
        self.emitter.log_message.emit(self.format(record), record.levelno)


class LogPanel(QWidget):
    """Panel listing log messages with a level filter."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._setup_ui()
        self._setup_logging()

    def _setup_ui(self) -> None:
        """Set up the UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 0)
        toolbar.addWidget(QLabel("Level:"))

        self._level_combo = QComboBox()
        self._level_combo.addItems(LEVEL_NAMES)
        self._level_combo.setCurrentText(logging.getLevelName(logging.getLogger().level))
        self._level_combo.currentTextChanged.connect(self._on_level_changed)
        toolbar.addWidget(self._level_combo)
        toolbar.addStretch()

        clear_btn = QPushButton("Clear")
        clear_btn.setObjectName("secondaryButton")
        clear_btn.clicked.connect(self.clear)
        toolbar.addWidget(clear_btn)
        layout.addLayout(toolbar)

        self._text = QPlainTextEdit()
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(MAX_LOG_LINES)
        font = QFont("Consolas", 9)
        if not font.exactMatch():
            font = QFont("Monospace", 9)
        self._text.setFont(font)
        layout.addWidget(self._text)

    def _setup_logging(self) -> None:
        """Attach a handler to the root logger."""
        self._handler = QLogHandler(self)
        self._handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        self._handler.emitter.log_message.connect(self._append)
        logging.getLogger().addHandler(self._handler)

    def detach(self) -> None:
        """Remove the handler from the root logger."""
        logging.getLogger().removeHandler(self._handler)

    def _on_level_changed(self, text: str) -> None:
        logging.getLogger().setLevel(getattr(logging, text))
        logging.info(f"Log level set to {text}")

    @Slot(str, int)
    def _append(self, msg: str, levelno: int) -> None:
        if levelno >= logging.ERROR:
            msg = f"!! {msg}"
        elif levelno >= logging.WARNING:
            msg = f"!  {msg}"
        self._text.appendPlainText(msg)

    def clear(self) -> None:
        self._text.clear()
