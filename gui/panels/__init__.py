"""
GUI Panels Package

Contains the panel widgets used by the viewer windows.
"""

from .log_panel import LogPanel, QLogHandler
from .position_panel import PositionPanel

__all__ = [
    'LogPanel',
    'QLogHandler',
    'PositionPanel',
]
