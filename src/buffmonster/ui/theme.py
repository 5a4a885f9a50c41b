"""Light and dark application palettes toggled by the ``dark_mode`` setting."""

from __future__ import annotations

from typing import Any, Dict

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication

from ..core.colors import ColorTuple

__all__ = ["DARK_PALETTE", "apply_color_scheme", "build_palette"]

QT_STYLE = "Fusion"

DARK_PALETTE: Dict[QPalette.ColorRole, ColorTuple] = {
    QPalette.ColorRole.Window: (30, 30, 30),
    QPalette.ColorRole.WindowText: (235, 235, 235),
    QPalette.ColorRole.Base: (26, 26, 27),
    QPalette.ColorRole.AlternateBase: (45, 45, 48),
    QPalette.ColorRole.Text: (235, 235, 235),
    QPalette.ColorRole.Button: (45, 45, 48),
    QPalette.ColorRole.ButtonText: (235, 235, 235),
    QPalette.ColorRole.Highlight: (38, 79, 120),
    QPalette.ColorRole.HighlightedText: (255, 255, 255),
    QPalette.ColorRole.Link: (108, 199, 255),
}


def build_palette(dark: bool, app: Any) -> QPalette:
    """Return the dark palette, or the style's stock palette for light mode."""

    palette = QPalette(app.style().standardPalette())
    if dark:
        for role, rgb in DARK_PALETTE.items():
            palette.setColor(role, QColor(*rgb))
    return palette


def apply_color_scheme(dark: bool, *, app: Any | None = None) -> bool:
    """Switch the running application to the light or dark palette.

    Returns ``False`` when no ``QApplication`` exists yet.
    """

    qt_app: Any = app if app is not None else QApplication.instance()
    if qt_app is None:
        return False
    if qt_app.style().objectName().lower() != QT_STYLE.lower():
        qt_app.setStyle(QT_STYLE)
    qt_app.setPalette(build_palette(dark, qt_app))
    return True
