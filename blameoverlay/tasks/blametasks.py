# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging

from blameoverlay.blameview.decorations import Decoration
from blameoverlay.localization import *
from blameoverlay.tasks.blametask import AbortTask, BlameTask

logger = logging.getLogger(__name__)


class ClearBlame(BlameTask):
    def flow(self):
        yield from self.flowEnterUiThread()
        self.blamer.clearRecordsForFile(self.fileName)


class CloseDocument(ClearBlame):
    def flow(self):
        logger.debug(f"Document closed, clearing blame: {self.fileName}")
        yield from super().flow()


class ShowBlame(BlameTask):
    createdDecorations: list[Decoration]
    """ Decorations created by this task that aren't owned by a persisted record yet.
    They are disposed if the task fails. """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.createdDecorations = []
        self.showedStatus = False

    def flow(self):
        yield from self.flowShowBlame()

    def flowShowBlame(self):
        blamer = self.blamer
        fileName = self.fileName
        editor = self.editor
        assert editor is not None

        logger.info(f"Blaming file: {fileName}")
        blamer.setStatusBarText(_("Blaming file..."), "view-refresh")
        self.showedStatus = True

        # Never leave orphaned decorations behind when re-blaming
        blamer.clearRecordsForFile(fileName)

        yield from self.flowEnterWorkerThread()
        blame = blamer.client.blameFile(fileName)
        revisions = {entry.revision for entry in blame}
        logs = blamer.getLogsForFile(fileName, revisions)

        yield from self.flowEnterUiThread()

        if editor.isClosed:
            raise AbortTask()

        record = blamer.createDecorationsForBlame(editor, blame, logs, self.createdDecorations)

        blamer.hideStatus()
        blamer.setRecordsForFile(fileName, record)

        # The record owns the decorations now
        self.createdDecorations = []

    def cleanup(self):
        super().cleanup()

        if self.createdDecorations:
            logger.debug(f"Rolling back {len(self.createdDecorations)} decorations: {self.fileName}")
            for decoration in self.createdDecorations:
                decoration.dispose()
            self.createdDecorations = []

        if self.showedStatus:
            self.blamer.hideStatus()

    def failureMessage(self) -> str:
        return f"Failed to blame file: {self.fileName}"


class ToggleBlame(ShowBlame):
    def flow(self):
        # Look at the records now rather than when the task was queued:
        # an earlier task for this file may have changed them.
        if self.blamer.getRecordsForFile(self.fileName) is not None:
            self.blamer.clearRecordsForFile(self.fileName)
            return

        yield from self.flowShowBlame()


class AutoBlame(ShowBlame):
    def flow(self):
        blamer = self.blamer
        record = blamer.getRecordsForFile(self.fileName)

        if record is not None:
            blamer.reApplyDecorations(self.editor, self.fileName, record)
            return

        if not blamer.prefs.autoBlame:
            return

        yield from self.flowShowBlame()

    def failureMessage(self) -> str:
        return f"Failed to auto-blame file: {self.fileName}"
