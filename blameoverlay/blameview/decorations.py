# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blameoverlay import settings
from blameoverlay.blame.annotation import DecorationKind, RevisionMetadata
from blameoverlay.localization import *
from blameoverlay.toolbox import *

if TYPE_CHECKING:
    from blameoverlay.blameview.blameeditor import BlameEditor

logger = logging.getLogger(__name__)


class Decoration:
    """
    Handle to a blame annotation drawn on one line of a BlameEditor.

    The editor draws the decoration for as long as it is attached.
    dispose() detaches it; calling it again, or after the editor has been
    closed, does nothing.
    """

    editor: BlameEditor
    metadata: RevisionMetadata
    kind: DecorationKind
    disposed: bool

    def __init__(self, editor: BlameEditor, metadata: RevisionMetadata, kind: DecorationKind):
        self.editor = editor
        self.metadata = metadata
        self.kind = kind
        self.disposed = False
        editor.attachDecoration(self)

    def __repr__(self):
        state = " disposed" if self.disposed else ""
        return f"<Decoration {self.kind} line {self.line} {shortHash(self.metadata.revision)}{state}>"

    @property
    def line(self) -> int:
        return self.metadata.line

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        self.editor.detachDecoration(self)


class DecorationRenderer:
    """
    Creates decorations and formats the text they show.
    """

    def create(self, editor: BlameEditor, metadata: RevisionMetadata, kind: DecorationKind) -> Decoration:
        assert metadata.line >= 1, "metadata must be joined against a line"
        return Decoration(editor, metadata, kind)

    @staticmethod
    def authorText(metadata: RevisionMetadata) -> str:
        if not metadata.author:
            return shortHash(metadata.revision)
        return abbreviatePerson(metadata.author, settings.prefs.authorDisplayStyle)

    @staticmethod
    def dateText(metadata: RevisionMetadata) -> str:
        if metadata.date is None:
            return ""
        return metadata.date.strftime(settings.prefs.shortDateFormat)

    @classmethod
    def caption(cls, metadata: RevisionMetadata) -> str:
        """ Short text shown in the gutter for every blamed line. """
        parts = [cls.authorText(metadata), cls.dateText(metadata)]
        return ", ".join(p for p in parts if p)

    @classmethod
    def activeLineText(cls, metadata: RevisionMetadata) -> str:
        """ Text shown after the end of the line that holds the caret. """
        text = cls.caption(metadata)
        if metadata.message:
            summary, _dummy = messageSummary(metadata.message)
            text += " • " + summary
        if metadata.author:
            text = f"{shortHash(metadata.revision)} {text}"
        return text

    @classmethod
    def toolTip(cls, metadata: RevisionMetadata) -> str:
        muted = mutedToolTipColorHex()
        colon = _(":")

        def newLine(heading, caption):
            return f"<tr><td style='color:{muted}; text-align: right;'>{heading}{colon} </td><td>{escape(caption)}</td>"

        text = "<table style='white-space: pre'>"
        text += newLine(_("commit"), shortHash(metadata.revision))
        if metadata.hasLog:
            text += newLine(_("author"), metadata.author)
            text += newLine(_("date"), cls.dateText(metadata))
        text += newLine(_("line"), str(metadata.line))
        text += "</table>"
        if metadata.message:
            text += "<p>" + escape(metadata.message.rstrip()).replace("\n", "<br>") + "</p>"
        return text
