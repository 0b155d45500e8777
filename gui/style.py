"""
Viewer Theme Stylesheet

Light Qt stylesheet for the launcher and viewer windows. The pane itself
is always drawn on black so rendered colors are not tinted by the theme.
"""

COLORS = {
    "background": "#FFFFFF",
    "background_alt": "#F5F6F8",
    "border": "#D9DCE1",
    "text": "#2B2B2B",
    "text_secondary": "#6B6B6B",
    "text_disabled": "#A0A0A0",
    "accent": "#00897B",
    "accent_hover": "#00796B",
    "accent_pressed": "#00695C",
    "accent_light": "#E0F2F1",
    "pane": "#000000",
}

FONTS = {
    "family": "Segoe UI, Roboto, Helvetica Neue, Arial, sans-serif",
    "size": "10pt",
    "size_small": "9pt",
    "mono": "Consolas, Menlo, DejaVu Sans Mono, monospace",
}


def get_stylesheet() -> str:
    """Get the Qt stylesheet for the viewer theme."""
    return f"""
    QWidget {{
        background-color: {COLORS["background"]};
        color: {COLORS["text"]};
        font-family: {FONTS["family"]};
        font-size: {FONTS["size"]};
    }}

    QGroupBox {{
        border: 1px solid {COLORS["border"]};
        border-radius: 4px;
        margin-top: 12px;
        padding: 8px 6px 6px 6px;
        font-weight: bold;
    }}

    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
        color: {COLORS["text_secondary"]};
    }}

    QPushButton {{
        background-color: {COLORS["accent"]};
        color: white;
        border: none;
        border-radius: 3px;
        padding: 5px 10px;
    }}

    QPushButton:hover {{
        background-color: {COLORS["accent_hover"]};
    }}

    QPushButton:pressed {{
        background-color: {COLORS["accent_pressed"]};
    }}

    QPushButton:disabled {{
        background-color: {COLORS["background_alt"]};
        color: {COLORS["text_disabled"]};
    }}

    QPushButton#secondaryButton {{
        background-color: {COLORS["background"]};
        color: {COLORS["accent"]};
        border: 1px solid {COLORS["accent"]};
    }}

    QPushButton#secondaryButton:hover {{
        background-color: {COLORS["accent_light"]};
    }}

    QLineEdit, QComboBox, QPlainTextEdit {{
        border: 1px solid {COLORS["border"]};
        border-radius: 3px;
        padding: 3px;
    }}

    QLineEdit:focus, QComboBox:focus {{
        border-color: {COLORS["accent"]};
    }}

    QLabel#readoutLabel {{
        font-family: {FONTS["mono"]};
        font-size: {FONTS["size_small"]};
        color: {COLORS["text_secondary"]};
    }}

    QStatusBar {{
        background-color: {COLORS["background_alt"]};
        border-top: 1px solid {COLORS["border"]};
        color: {COLORS["text_secondary"]};
    }}
    """


class ViewerStyle:
    """Helper class for applying the viewer theme."""

    @staticmethod
    def apply(app) -> None:
        """
        Apply the theme to a QApplication.

        Args:
            app: QApplication instance
        """
        app.setStyleSheet(get_stylesheet())

    @staticmethod
    def get_color(name: str) -> str:
        """Get a color value by name."""
        return COLORS.get(name, COLORS["text"])
