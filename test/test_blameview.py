# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from datetime import datetime, timezone

from blameoverlay import settings
from blameoverlay.appconsts import APP_DISPLAY_NAME
from blameoverlay.blame import *
from blameoverlay.blameview.decorations import DecorationRenderer
from blameoverlay.blameview.statusindicator import StatusIndicator
from blameoverlay.toolbox import AuthorDisplayStyle
from .util import *

METADATA = RevisionMetadata(
    "0123456789abcdef0123456789abcdef01234567",
    author="Jean-Luc Picard",
    date=datetime(2024, 3, 9, 17, 45, tzinfo=timezone.utc),
    message="Engage warp drive\n\nMake it so.",
    line=4)


def testCaption():
    assert DecorationRenderer.caption(METADATA) == "Jean-Luc Picard, 2024-03-09"

    settings.prefs.authorDisplayStyle = AuthorDisplayStyle.Initials
    settings.prefs.shortDateFormat = settings.SHORT_DATE_PRESETS["European"]
    assert DecorationRenderer.caption(METADATA) == "JLP, 09/03/24"


def testCaptionWithoutLog():
    metadata = RevisionMetadata(METADATA.revision, line=1)
    assert DecorationRenderer.caption(metadata) == "0123456"

    settings.prefs.shortHashChars = 10
    assert DecorationRenderer.caption(metadata) == "0123456789"


def testActiveLineText():
    text = DecorationRenderer.activeLineText(METADATA)
    assert text == "0123456 Jean-Luc Picard, 2024-03-09 • Engage warp drive […]"

    metadata = RevisionMetadata(METADATA.revision, line=1)
    assert DecorationRenderer.activeLineText(metadata) == "0123456"


def testToolTip(qtbot):
    toolTip = DecorationRenderer.toolTip(METADATA)
    assert "0123456" in toolTip
    assert "Jean-Luc Picard" in toolTip
    assert "Make it so." in toolTip

    toolTip = DecorationRenderer.toolTip(RevisionMetadata("<b>", line=2))
    assert "&lt;b&gt;" in toolTip
    assert "author" not in toolTip


def testDecorationLifecycle(qtbot):
    editor = makeEditor(qtbot, "f.py")
    renderer = DecorationRenderer()

    decoration = renderer.create(editor, METADATA, DecorationKind.Blame)
    assert editor.decorationAt(4) is decoration
    assert editor.liveDecorations() == [decoration]
    assert not decoration.disposed

    decoration.dispose()
    assert decoration.disposed
    assert editor.decorationAt(4) is None

    # Second dispose is a no-op
    decoration.dispose()
    assert not editor.liveDecorations()


def testDecorationOnClosedEditor(qtbot):
    editor = makeEditor(qtbot, "f.py")
    decoration = DecorationRenderer().create(editor, METADATA, DecorationKind.ActiveLine)

    editor.markClosed()
    decoration.dispose()

    assert decoration.disposed
    assert not editor.liveDecorations()
    assert not editor.refreshDecorationsLater.isActive()


def testEditorPaintsDecorations(qtbot):
    editor = makeEditor(qtbot, "f.py", 10)
    gutterWidthBefore = editor.gutter.calcWidth()
    renderer = DecorationRenderer()

    for line in range(1, 11):
        revision = "aaaaaaa" if line < 5 else "bbbbbbb"
        kind = DecorationKind.ActiveLine if line == 6 else DecorationKind.Blame
        renderer.create(editor, fakeMetadata(revision).forLine(line), kind)

    editor.refreshDecorations()
    assert editor.gutter.calcWidth() > gutterWidthBefore
    assert len(editor.extraSelections()) == 1

    editor.show()
    qtbot.waitExposed(editor)
    editor.setCaretLine(6)
    assert editor.caretLine() == 6

    # Exercise paint events on the editor and the gutter
    assert not editor.grab().isNull()
    assert not editor.gutter.grab().isNull()


def testCaretMovedSignal(qtbot):
    editor = makeEditor(qtbot, "f.py", 10)

    with qtbot.waitSignal(editor.caretMoved) as blocker:
        editor.setCaretLine(7)

    event = blocker.args[0]
    assert event.editor is editor
    assert event.line == 7

    # Out-of-range line doesn't move the caret
    editor.setCaretLine(42)
    assert editor.caretLine() == 7


def testStatusIndicator(qtbot):
    indicator = StatusIndicator()
    qtbot.addWidget(indicator)
    assert not indicator.isStatusSet
    assert indicator.isHidden()

    indicator.showStatus("Blaming file...", "view-refresh")
    assert indicator.isStatusSet
    assert indicator.text == f"{APP_DISPLAY_NAME}: Blaming file..."
    assert not indicator.isHidden()

    indicator.hideStatus()
    assert not indicator.isStatusSet
    assert indicator.isHidden()
