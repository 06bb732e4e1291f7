"""Shared helpers for applying the application-wide theme."""
from __future__ import annotations

from PySide6 import QtGui, QtWidgets

BACKGROUND = QtGui.QColor(0x00, 0x2B, 0x36)
BACKGROUND_ALT = QtGui.QColor(0x07, 0x36, 0x42)
FOREGROUND = QtGui.QColor(0x83, 0x94, 0x96)
EMPHASIS = QtGui.QColor(0x93, 0xA1, 0xA1)
ACCENT = QtGui.QColor(0x26, 0x8B, 0xD2)


def apply_solarized_palette(app: QtWidgets.QApplication, font_size: int | None = None) -> None:
    """Configure the application with the dark solarized palette."""

    app.setStyle("Fusion")
    palette = QtGui.QPalette()
    palette.setColor(QtGui.QPalette.ColorRole.Window, BACKGROUND)
    palette.setColor(QtGui.QPalette.ColorRole.WindowText, FOREGROUND)
    palette.setColor(QtGui.QPalette.ColorRole.Base, BACKGROUND_ALT)
    palette.setColor(QtGui.QPalette.ColorRole.AlternateBase, BACKGROUND)
    palette.setColor(QtGui.QPalette.ColorRole.ToolTipBase, BACKGROUND_ALT)
    palette.setColor(QtGui.QPalette.ColorRole.ToolTipText, EMPHASIS)
    palette.setColor(QtGui.QPalette.ColorRole.Text, FOREGROUND)
    palette.setColor(QtGui.QPalette.ColorRole.PlaceholderText, QtGui.QColor(0x58, 0x6E, 0x75))
    palette.setColor(QtGui.QPalette.ColorRole.Button, BACKGROUND_ALT)
    palette.setColor(QtGui.QPalette.ColorRole.ButtonText, EMPHASIS)
    palette.setColor(QtGui.QPalette.ColorRole.BrightText, QtGui.QColor(0xDC, 0x32, 0x2F))
    palette.setColor(QtGui.QPalette.ColorRole.Highlight, ACCENT)
    palette.setColor(QtGui.QPalette.ColorRole.HighlightedText, QtGui.QColor(0xFD, 0xF6, 0xE3))
    app.setPalette(palette)

    if font_size:
        font = app.font()
        font.setPointSize(int(font_size))
        app.setFont(font)

    existing_stylesheet = app.styleSheet() or ""
    snippets = [existing_stylesheet.strip()] if existing_stylesheet.strip() else []
    snippets.extend(
        [
            "QLabel#themeTitle { font-weight: bold; }",
            "QToolTip { color: #93a1a1; background-color: #073642; border: 1px solid #586e75; }",
        ]
    )
    app.setStyleSheet("\n".join(snippets))
