# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from blameoverlay.qt import *


class StatusIndicator(QWidget):
    """
    Single-line busy indicator (icon + text) meant to sit in a status bar.

    showStatus() and hideStatus() may be called from any thread;
    the widget is always updated on the thread that owns it.
    """

    statusRequested = Signal(str, str)
    hideRequested = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("StatusIndicator")

        self.iconLabel = QLabel(self)
        self.iconLabel.setFixedSize(16, 16)
        self.textLabel = QLabel(self)
        # Emojis may increase the label's height
        self.setMaximumHeight(self.fontMetrics().height())

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.iconLabel)
        layout.addWidget(self.textLabel, 1)

        self.statusRequested.connect(self._applyStatus)
        self.hideRequested.connect(self._applyHide)

        self.isStatusSet = False
        self.setVisible(False)

    @property
    def text(self) -> str:
        return self.textLabel.text()

    @staticmethod
    def formatText(message: str) -> str:
        return f"{APP_DISPLAY_NAME}: {message}"

    def showStatus(self, message: str, icon: str = ""):
        self.statusRequested.emit(message, icon)

    def hideStatus(self):
        self.hideRequested.emit()

    def _applyStatus(self, message: str, icon: str):
        self.textLabel.setText(self.formatText(message))

        iconPixmap = QIcon.fromTheme(icon).pixmap(16, 16) if icon else QPixmap()
        self.iconLabel.setPixmap(iconPixmap)
        self.iconLabel.setVisible(not iconPixmap.isNull())

        self.isStatusSet = True
        self.setVisible(True)

    def _applyHide(self):
        self.isStatusSet = False
        self.setVisible(False)
