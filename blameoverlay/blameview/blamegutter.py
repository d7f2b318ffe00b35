# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import TYPE_CHECKING

from blameoverlay.blame.annotation import DecorationKind
from blameoverlay.blameview.decorations import DecorationRenderer
from blameoverlay.qt import *
from blameoverlay.toolbox import *

if TYPE_CHECKING:
    from blameoverlay.blameview.blameeditor import BlameEditor


class BlameGutter(QWidget):
    """
    Gutter on the left of a BlameEditor. Shows line numbers, and the
    author and date of each blamed line.
    """
    # Inspired by https://doc.qt.io/qt-6.2/qtwidgets-widgets-codeeditor-example.html

    codeView: BlameEditor

    def __init__(self, parent: BlameEditor):
        super().__init__(parent)
        self.codeView = parent

        font = QFontDatabase.systemFont(QFontDatabase.SystemFont.SmallestReadableFont)
        setFontFeature(font, "tnum")  # Tabular numbers
        self.setFont(font)

        self.boldFont = QFont(font)
        self.boldFont.setBold(True)

        self.installEventFilter(self)

        self.columnMetrics = []
        self.preferredWidth = 0
        self.lineHeight = 12
        self.refreshMetrics()

    def refreshMetrics(self):
        fontMetrics = self.fontMetrics()

        maxLineNumber = self.codeView.blockCount()

        if self.codeView.decorations:
            captionWidth = fontMetrics.horizontalAdvance("M" * 8 + "2000-00-00 ")
        else:
            captionWidth = 0
        lnWidth = fontMetrics.horizontalAdvance(" " + "0" * len(str(maxLineNumber)))

        self.columnMetrics = []
        x = 2
        for w in (captionWidth, lnWidth):
            self.columnMetrics.append((x, w))
            x += w
        x += 3
        self.preferredWidth = x

        self.lineHeight = max(fontMetrics.height(), self.codeView.fontMetrics().height())

    def calcWidth(self) -> int:
        return self.preferredWidth

    def sizeHint(self) -> QSize:
        return QSize(self.calcWidth(), 0)

    def onParentUpdateRequest(self, rect: QRect, dy: int):
        if dy != 0:
            self.scroll(0, dy)
        else:
            self.update(0, rect.y(), self.width(), rect.height())

    def wheelEvent(self, event: QWheelEvent):
        # Forward mouse wheel to parent widget
        self.parentWidget().wheelEvent(event)

    def eventFilter(self, watched, event: QEvent):
        if event.type() == QEvent.Type.ToolTip:
            return self.doToolTip(event)
        return False

    def paintBlocks(self, event: QPaintEvent, painter: QPainter, lineColor: QColor):
        # Set up colors
        palette = self.palette()
        themeBG = palette.color(QPalette.ColorRole.Base)  # standard theme background color
        if isDarkTheme(palette):
            gutterColor = themeBG.darker(105)
        else:
            gutterColor = themeBG.lighter(140)

        # Gather some metrics
        paintRect = event.rect()
        gutterRect = self.rect()
        rightEdge = gutterRect.width() - 1

        # Clip painting to QScrollArea viewport rect (don't draw beneath horizontal scroll bar)
        vpRect = self.codeView.viewport().rect()
        vpRect.setWidth(paintRect.width())  # vpRect is adjusted by gutter width, so undo this
        paintRect = paintRect.intersected(vpRect)
        painter.setClipRect(paintRect)

        # Draw background
        painter.fillRect(paintRect, gutterColor)

        # Draw vertical separator line
        painter.fillRect(rightEdge, paintRect.y(), 1, paintRect.height(), lineColor)

        block: QTextBlock = self.codeView.firstVisibleBlock()
        top = round(self.codeView.blockBoundingGeometry(block).translated(self.codeView.contentOffset()).top())
        bottom = top + round(self.codeView.blockBoundingRect(block).height())

        while block.isValid() and top <= paintRect.bottom():
            if block.isVisible() and bottom >= paintRect.top():
                yield block, top, bottom

            block = block.next()
            top = bottom
            bottom = top + round(self.codeView.blockBoundingRect(block).height())

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)

        # Set up colors
        palette = self.palette()
        themeFG = palette.color(QPalette.ColorRole.Text)  # standard theme foreground color
        lineColor = QColor(*themeFG.getRgb()[:3], 80)
        textPen = QPen(QColor(*themeFG.getRgb()[:3], 160))
        boldTextPen = QPen(QColor(*themeFG.getRgb()[:3], 210))
        activeColor = QColor(palette.color(QPalette.ColorRole.Highlight))
        activeColor.setAlphaF(.3)

        rightEdge = self.rect().width() - 1
        lh = self.lineHeight
        alignLeft = Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter
        alignRight = Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        captionL, captionW = self.columnMetrics[0]
        lineNumL, lineNumW = self.columnMetrics[-1]

        previousRevision = ""

        for block, top, bottom in self.paintBlocks(event, painter, lineColor):
            lineNumber = 1 + block.blockNumber()
            decoration = self.codeView.decorationAt(lineNumber)
            isActive = decoration is not None and decoration.kind == DecorationKind.ActiveLine

            if isActive:
                painter.fillRect(QRect(0, top, rightEdge, bottom - top), activeColor)

            painter.setFont(self.boldFont if isActive else self.font())
            painter.setPen(boldTextPen if isActive else textPen)

            # Draw line number
            painter.drawText(lineNumL, top, lineNumW, lh, alignRight, str(lineNumber))

            if decoration is None:
                previousRevision = ""
                continue

            # Only caption the first line of each run of lines from the same revision
            revision = decoration.metadata.revision
            if revision != previousRevision or isActive:
                caption = DecorationRenderer.caption(decoration.metadata)
                elided = painter.fontMetrics().elidedText(caption, Qt.TextElideMode.ElideRight, captionW)
                painter.drawText(captionL, top, captionW, lh, alignLeft, elided)
            previousRevision = revision

        painter.end()

    def doToolTip(self, event: QHelpEvent):
        assert isinstance(event, QHelpEvent)

        pos = event.globalPos()
        editLocalPos = self.codeView.mapFromGlobal(pos)
        textCursor = self.codeView.cursorForPosition(editLocalPos)
        lineNumber = 1 + textCursor.blockNumber()

        decoration = self.codeView.decorationAt(lineNumber)
        if decoration is None:
            return False

        QToolTip.showText(event.globalPos(), DecorationRenderer.toolTip(decoration.metadata), self)
        event.accept()
        return True
