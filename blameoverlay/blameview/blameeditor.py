# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
import os
from typing import TYPE_CHECKING

from blameoverlay.blame.annotation import DecorationKind
from blameoverlay.blameview.blamegutter import BlameGutter
from blameoverlay.blameview.decorations import DecorationRenderer
from blameoverlay.qt import *
from blameoverlay.toolbox import *

if TYPE_CHECKING:
    from blameoverlay.blameview.decorations import Decoration

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SelectionChangeEvent:
    editor: BlameEditor | None
    line: int
    "1-based line number of the caret"


class BlameEditor(QPlainTextEdit):
    """
    Read-only text view of one file that draws blame decorations.
    """

    caretMoved = Signal(SelectionChangeEvent)

    fileName: str
    gutter: BlameGutter
    isClosed: bool
    decorations: dict[int, list[Decoration]]

    def __init__(self, fileName: str, parent=None):
        super().__init__(parent)
        self.fileName = fileName
        self.isClosed = False
        self.decorations = {}

        self.setReadOnly(True)
        self.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse | Qt.TextInteractionFlag.TextSelectableByKeyboard)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))

        self.gutter = BlameGutter(self)
        self.updateRequest.connect(self.gutter.onParentUpdateRequest)
        self.syncViewportMarginsWithGutter()

        # Many decorations change at once when a file is blamed; repaint once
        self.refreshDecorationsLater = CallbackAccumulator(self, self.refreshDecorations)

        self.cursorPositionChanged.connect(self.onCursorPositionChanged)

    def __repr__(self):
        return f"<BlameEditor {os.path.basename(self.fileName)}>"

    def loadFile(self):
        with open(self.fileName, encoding="utf-8", errors="replace") as f:
            text = f.read()
        self.setPlainText(text)
        self.syncViewportMarginsWithGutter()

    def markClosed(self):
        """
        The document is going away. Decorations may still be disposed
        afterwards, but they won't touch the widget anymore.
        """
        self.isClosed = True
        self.refreshDecorationsLater.stop()

    def caretLine(self) -> int:
        return self.textCursor().blockNumber() + 1

    def setCaretLine(self, line: int):
        block = self.document().findBlockByNumber(line - 1)
        if not block.isValid():
            return
        cursor = QTextCursor(block)
        self.setTextCursor(cursor)

    def onCursorPositionChanged(self):
        self.caretMoved.emit(SelectionChangeEvent(self, self.caretLine()))

    # ---------------------------------------------
    # Decorations

    def attachDecoration(self, decoration: Decoration):
        self.decorations.setdefault(decoration.line, []).append(decoration)
        if not self.isClosed:
            self.refreshDecorationsLater.start()

    def detachDecoration(self, decoration: Decoration):
        try:
            lineDecorations = self.decorations[decoration.line]
            lineDecorations.remove(decoration)
        except (KeyError, ValueError):
            logger.warning(f"Decoration wasn't attached to {self}: {decoration}")
            return

        if not lineDecorations:
            del self.decorations[decoration.line]

        if not self.isClosed:
            self.refreshDecorationsLater.start()

    def decorationAt(self, line: int) -> Decoration | None:
        try:
            return self.decorations[line][-1]
        except (KeyError, IndexError):
            return None

    def liveDecorations(self) -> list[Decoration]:
        return [d for lineDecorations in self.decorations.values() for d in lineDecorations]

    def refreshDecorations(self):
        if self.isClosed:
            return

        self.refreshDecorationsLater.stop()

        highlightColor = QColor(self.palette().color(QPalette.ColorRole.Highlight))
        highlightColor.setAlphaF(.15)

        selections = []
        for line, lineDecorations in self.decorations.items():
            if not any(d.kind == DecorationKind.ActiveLine for d in lineDecorations):
                continue
            block = self.document().findBlockByNumber(line - 1)
            if not block.isValid():
                continue
            selection = QTextEdit.ExtraSelection()
            selection.format.setBackground(highlightColor)
            selection.format.setProperty(QTextFormat.Property.FullWidthSelection, True)
            selection.cursor = QTextCursor(block)
            selections.append(selection)

        self.setExtraSelections(selections)
        self.syncViewportMarginsWithGutter()
        self.viewport().update()
        self.gutter.update()

    # ---------------------------------------------
    # Qt events

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self.resizeGutter()

    def paintEvent(self, event: QPaintEvent):
        super().paintEvent(event)
        self.paintActiveLineText()

    def paintActiveLineText(self):
        painter = QPainter(self.viewport())

        textColor = QColor(self.palette().color(QPalette.ColorRole.Text))
        textColor.setAlphaF(.5)
        painter.setPen(textColor)

        font = QFont(self.font())
        font.setItalic(True)
        painter.setFont(font)
        gap = self.fontMetrics().horizontalAdvance("M" * 3)

        for line, lineDecorations in self.decorations.items():
            decoration = lineDecorations[-1]
            if decoration.kind != DecorationKind.ActiveLine:
                continue

            block = self.document().findBlockByNumber(line - 1)
            if not block.isValid() or not block.isVisible():
                continue

            rect = self.blockBoundingGeometry(block).translated(self.contentOffset())
            layout = block.layout()
            if layout.lineCount() == 0:
                continue
            lastLine = layout.lineAt(layout.lineCount() - 1)
            x = rect.left() + lastLine.naturalTextWidth() + gap
            textRect = QRectF(x, rect.top(), self.viewport().width() - x, lastLine.height())

            text = DecorationRenderer.activeLineText(decoration.metadata)
            painter.drawText(textRect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter, text)

        painter.end()

    # ---------------------------------------------
    # Gutter

    def resizeGutter(self):
        cr: QRect = self.contentsRect()
        cr.setWidth(self.gutter.calcWidth())
        self.gutter.setGeometry(cr)

    def syncViewportMarginsWithGutter(self):
        self.gutter.refreshMetrics()
        gutterWidth = self.gutter.calcWidth()

        # Prevent Qt freeze if margin width exceeds widget width, e.g. when window is very narrow
        self.setMinimumWidth(gutterWidth * 2)

        self.setViewportMargins(gutterWidth, 0, 0, 0)
        self.resizeGutter()
