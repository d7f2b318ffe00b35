# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from collections.abc import Callable

from blameoverlay.qt import *


def onAppThread():
    appInstance = QApplication.instance()
    return bool(appInstance and appInstance.thread() is QThread.currentThread())


def setFontFeature(font: QFont, fourCC: str, value: int = 1):
    try:
        font.setFeature(QFont.Tag(fourCC), value)
    except AttributeError:  # pragma: no cover
        # Mitigation for pre-Qt 6.7 bindings
        pass
    return font


def isDarkTheme(palette: QPalette | None = None):
    if palette is None:
        palette = QApplication.palette()
    themeBG = palette.color(QPalette.ColorRole.Base)  # standard theme background color
    themeFG = palette.color(QPalette.ColorRole.Text)  # standard theme foreground color
    return themeBG.value() < themeFG.value()


def mutedToolTipColorHex() -> str:
    mutedColor = QApplication.palette().toolTipText().color()
    mutedColor.setAlphaF(.6)
    return mutedColor.name(QColor.NameFormat.HexArgb)


def asyncMessageBox(parent: QWidget | None, title: str, text: str,
                    icon=QMessageBox.Icon.Warning) -> QMessageBox:
    """
    Create a non-blocking message box. The caller must show() it.
    The message box deletes itself when it's closed.
    """
    qmb = QMessageBox(icon, title, text, QMessageBox.StandardButton.Ok, parent)
    qmb.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
    qmb.setWindowModality(Qt.WindowModality.NonModal)
    return qmb


class CallbackAccumulator(QTimer):
    def __init__(self, parent: QObject, callback: Callable, delay: int = 0):
        super().__init__(parent)
        self.setObjectName("CallbackAccumulator")
        self.setSingleShot(True)
        self.setInterval(delay)
        self.timeout.connect(callback)


__all__ = [
    "CallbackAccumulator",
    "asyncMessageBox",
    "isDarkTheme",
    "mutedToolTipColorHex",
    "onAppThread",
    "setFontFeature",
]
