# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Protocol

from blameoverlay import settings
from blameoverlay.blame import *
from blameoverlay.blameview.blameeditor import BlameEditor, SelectionChangeEvent
from blameoverlay.blameview.decorations import Decoration, DecorationRenderer
from blameoverlay.blameview.statusindicator import StatusIndicator
from blameoverlay.localization import *
from blameoverlay.qt import *
from blameoverlay.tasks import *
from blameoverlay.toolbox import benchmark

logger = logging.getLogger(__name__)


class EditorContext(Protocol):
    def activeEditor(self) -> BlameEditor | None: ...


class Blamer(QObject):
    """
    Keeps the blame overlay of every open file in sync with the editors.

    Operations that fetch data or touch a file's record run as BlameTasks,
    so that operations on the same file never interleave. trackLine() runs
    synchronously because it never waits on anything.
    """

    errorOccurred = Signal(str)
    "Generic, user-facing failure message"

    client: VersionControlClient
    editorContext: EditorContext | None
    store: RecordStore
    renderer: DecorationRenderer
    statusIndicator: StatusIndicator
    prefs: settings.Prefs
    activeLine: ActiveLineRegister
    runner: BlameTaskRunner

    def __init__(
            self,
            client: VersionControlClient,
            editorContext: EditorContext | None = None,
            store: RecordStore | None = None,
            renderer: DecorationRenderer | None = None,
            statusIndicator: StatusIndicator | None = None,
            prefs: settings.Prefs | None = None,
            parent: QObject | None = None,
    ):
        super().__init__(parent)
        self.setObjectName("Blamer")

        self.client = client
        self.editorContext = editorContext
        self.store = store if store is not None else RecordStore()
        self.renderer = renderer if renderer is not None else DecorationRenderer()
        self.statusIndicator = statusIndicator if statusIndicator is not None else StatusIndicator()
        self.prefs = prefs if prefs is not None else settings.prefs
        self.activeLine = ActiveLineRegister()
        self.runner = BlameTaskRunner(self)

    def prepareForDeletion(self):
        self.runner.joinAll()
        self.activeLine.release()
        for fileName in self.store.keys():
            self.clearRecordsForFile(fileName)
        self.store.clear()

    # -------------------------------------------------------------------------
    # Status & errors

    def setStatusBarText(self, message: str, icon: str = ""):
        self.statusIndicator.showStatus(message, icon)

    def hideStatus(self):
        self.statusIndicator.hideStatus()

    def reportFailure(self, message: str, exc: BaseException | None = None):
        logger.error(message, exc_info=exc)
        self.hideStatus()
        self.errorOccurred.emit(f"{APP_DISPLAY_NAME}: " + _("Something went wrong"))

    def reportError(self, message: str):
        self.hideStatus()
        self.errorOccurred.emit(f"{APP_DISPLAY_NAME}: {message}")

    # -------------------------------------------------------------------------
    # Records

    def getRecordsForFile(self, fileName: str) -> AnnotationRecord | None:
        return self.store.get(fileName)

    def setRecordsForFile(self, fileName: str, record: AnnotationRecord):
        self.store.set(fileName, record)

    def clearRecordsForFile(self, fileName: str):
        """
        Dispose all decorations for the file and forget its record.
        Nothing happens if the file has no record. An empty record (a file
        with no blamed lines) still counts as a record and gets forgotten.
        """
        self.activeLine.releaseFile(fileName)

        records = self.getRecordsForFile(fileName)
        if records is None:
            return

        logger.debug(f"Clearing existing blame: {fileName}")

        for annotation in records.values():
            annotation.decoration.dispose()

        self.store.delete(fileName)

    @benchmark
    def createDecorationsForBlame(
            self,
            editor: BlameEditor,
            blame: list[BlameEntry],
            logs: list[RevisionMetadata],
            created: list[Decoration]
    ) -> AnnotationRecord:
        """
        Create a "blame" decoration for every blamed line. Each new decoration
        is appended to `created` as soon as it exists, so the caller can
        dispose them if anything goes wrong midway.
        """
        record: AnnotationRecord = {}

        for metadata in joinMetadata(blame, logs):
            decoration = self.renderer.create(editor, metadata, DecorationKind.Blame)
            created.append(decoration)
            record[lineKey(metadata.line)] = LineAnnotation(decoration, metadata)

        return record

    def reApplyDecorations(self, editor: BlameEditor, fileName: str, record: AnnotationRecord):
        """
        Rebuild every decoration of an existing record against the given editor.
        Editors don't survive their documents being closed and reopened,
        so decorations are recreated from the cached metadata.
        """
        logger.debug(f"Reapplying {len(record)} decorations: {fileName}")

        self.activeLine.releaseFile(fileName)

        for key, annotation in record.items():
            annotation.decoration.dispose()
            decoration = self.renderer.create(editor, annotation.metadata, DecorationKind.Blame)
            record[key] = LineAnnotation(decoration, annotation.metadata)

        self.setRecordsForFile(fileName, record)

    # -------------------------------------------------------------------------
    # Logs

    def getLogsForFile(self, fileName: str, revisions: set[str]) -> list[RevisionMetadata]:
        """
        Fetch log entries for the given revisions, unless logs are disabled.
        May be called from a worker thread.
        The caller is responsible for hiding the status afterwards.
        """
        if not self.prefs.enableLogs:
            logger.debug("Logging disabled, will not fetch logs")
            return []

        if not revisions:
            return []

        logger.info(f"Fetching logs for {len(revisions)} revisions: {fileName}")

        self.setStatusBarText(_("Fetching logs..."), "view-refresh")

        return self.client.getLogsForRevisions(fileName, revisions)

    # -------------------------------------------------------------------------
    # Blame lifecycle

    def showBlameForFile(self, editor: BlameEditor, fileName: str):
        self.runner.put(ShowBlame(self, fileName, editor))

    def clearBlameForFile(self, fileName: str):
        self.runner.put(ClearBlame(self, fileName))

    def clearBlameForAllFiles(self):
        for fileName in self.store.keys():
            self.clearBlameForFile(fileName)

    def toggleBlameForFile(self, editor: BlameEditor, fileName: str):
        self.runner.put(ToggleBlame(self, fileName, editor))

    def handleClosedDocument(self, fileName: str):
        self.runner.put(CloseDocument(self, fileName))

    def autoBlame(self, editor: BlameEditor | None = None):
        if editor is None:
            return
        self.runner.put(AutoBlame(self, editor.fileName, editor))

    # -------------------------------------------------------------------------
    # Commands on the active editor

    def getActiveTextEditorAndFileName(self) -> tuple[BlameEditor | None, str]:
        editor = self.editorContext.activeEditor() if self.editorContext is not None else None
        fileName = editor.fileName if editor is not None else ""
        return editor, fileName

    def showBlameForActiveTextEditor(self):
        editor, fileName = self.getActiveTextEditorAndFileName()
        if editor is None:
            logger.debug("No active editor to blame")
            return
        self.showBlameForFile(editor, fileName)

    def clearBlameForActiveTextEditor(self):
        editor, fileName = self.getActiveTextEditorAndFileName()
        if editor is None:
            logger.debug("No active editor to clear")
            return
        self.clearBlameForFile(fileName)

    def toggleBlameForActiveTextEditor(self):
        editor, fileName = self.getActiveTextEditorAndFileName()
        if editor is None:
            logger.debug("No active editor to toggle")
            return
        self.toggleBlameForFile(editor, fileName)

    # -------------------------------------------------------------------------
    # Active line

    def trackLine(self, event: SelectionChangeEvent):
        editor = event.editor
        if editor is None:
            return

        try:
            fileName = editor.fileName
            line = lineKey(event.line)

            # Guarantees a single emphasized line even if the register lost track of it
            self.activeLine.disposeDecoration()

            self.restorePreviousDecoration()
            self.setUpdatedDecoration(editor, fileName, line)
        except Exception as exc:
            self.reportFailure(f"Failed to track line {event.line}: {editor.fileName}", exc)

    def restorePreviousDecoration(self):
        state = self.activeLine.state
        if state is None:
            return

        records = self.getRecordsForFile(state.fileName)
        existing = records.get(state.line) if records else None

        if existing is not None:
            logger.debug(f"Reverting line-end decoration: {state.fileName}:{state.line}")
            existing.decoration.dispose()
            decoration = self.renderer.create(state.editor, existing.metadata, DecorationKind.Blame)
            records[state.line] = LineAnnotation(decoration, existing.metadata)
            self.setRecordsForFile(state.fileName, records)

        self.activeLine.forget()

    def setUpdatedDecoration(self, editor: BlameEditor, fileName: str, line: str):
        records = self.getRecordsForFile(fileName)
        existing = records.get(line) if records else None

        if existing is None:
            return

        logger.debug(f"Setting new line decoration: {fileName}:{line}")

        existing.decoration.dispose()
        decoration = self.renderer.create(editor, existing.metadata, DecorationKind.ActiveLine)
        records[line] = LineAnnotation(decoration, existing.metadata)
        self.setRecordsForFile(fileName, records)

        self.activeLine.install(ActiveLine(editor, fileName, line), decoration)
