# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import os

from blameoverlay import settings
from blameoverlay.blame.annotation import VersionControlClient
from blameoverlay.blamer import Blamer
from blameoverlay.blameview.blameeditor import BlameEditor
from blameoverlay.blameview.statusindicator import StatusIndicator
from blameoverlay.localization import *
from blameoverlay.qt import *
from blameoverlay.toolbox import *

logger = logging.getLogger(__name__)


class BlameWindow(QMainWindow):
    """
    Tabbed, read-only file viewer with a blame overlay.
    """

    tabs: QTabWidget
    blamer: Blamer
    statusIndicator: StatusIndicator

    def __init__(self, client: VersionControlClient, parent=None):
        super().__init__(parent)
        self.setObjectName("BlameWindow")
        self.setWindowTitle(qAppName())
        self.resize(1024, 768)

        self.tabs = QTabWidget(self)
        self.tabs.setDocumentMode(True)
        self.tabs.setTabsClosable(True)
        self.tabs.setMovable(True)
        self.tabs.tabCloseRequested.connect(self.closeTab)
        self.tabs.currentChanged.connect(self.onCurrentTabChanged)
        self.setCentralWidget(self.tabs)

        self.statusIndicator = StatusIndicator(self)
        self.statusBar().addPermanentWidget(self.statusIndicator, 1)

        self.blamer = Blamer(client, editorContext=self, statusIndicator=self.statusIndicator, parent=self)
        self.blamer.errorOccurred.connect(self.onBlamerError)

        self.fillMenuBar()

    def fillMenuBar(self):
        blameMenu = self.menuBar().addMenu(_("&Blame"))
        blameMenu.setObjectName("BlameMenu")
        blamer = self.blamer

        def addAction(text: str, callback, shortcut: str = "", icon: str = "") -> QAction:
            action = blameMenu.addAction(text)
            action.triggered.connect(callback)
            if shortcut:
                action.setShortcut(QKeySequence(shortcut))
            if icon:
                action.setIcon(QIcon.fromTheme(icon))
            return action

        addAction(_("&Show Blame"), blamer.showBlameForActiveTextEditor, "Ctrl+Alt+B", "view-refresh")
        addAction(_("&Clear Blame"), blamer.clearBlameForActiveTextEditor, "Ctrl+Alt+C", "edit-clear")
        addAction(_("&Toggle Blame"), blamer.toggleBlameForActiveTextEditor, "Ctrl+Alt+T")
        addAction(_("Clear Blame in &All Files"), blamer.clearBlameForAllFiles, "Ctrl+Alt+Shift+C")

        blameMenu.addSeparator()

        self.enableLogsAction = addAction(_("Fetch Commit &Logs"), lambda checked: self.setPref("enableLogs", checked))
        self.enableLogsAction.setCheckable(True)
        self.enableLogsAction.setChecked(settings.prefs.enableLogs)

        self.autoBlameAction = addAction(_("Blame &Automatically"), lambda checked: self.setPref("autoBlame", checked))
        self.autoBlameAction.setCheckable(True)
        self.autoBlameAction.setChecked(settings.prefs.autoBlame)

        blameMenu.addSeparator()

        addAction(_("&Quit"), self.close, QKeySequence(QKeySequence.StandardKey.Quit).toString(), "application-exit")

    def setPref(self, key: str, value):
        logger.debug(f"Set pref {key} = {value}")
        setattr(settings.prefs, key, value)
        settings.prefs.setDirty()
        settings.prefs.write()

        # Honor the new value right away for the file on screen
        if key == "autoBlame" and value:
            self.blamer.autoBlame(self.activeEditor())

    # ---------------------------------------------
    # Editor context

    def activeEditor(self) -> BlameEditor | None:
        editor = self.tabs.currentWidget()
        if isinstance(editor, BlameEditor):
            return editor
        return None

    def editors(self) -> list[BlameEditor]:
        return [self.tabs.widget(i) for i in range(self.tabs.count())]

    def findEditor(self, fileName: str) -> BlameEditor | None:
        return next((e for e in self.editors() if e.fileName == fileName), None)

    def openFile(self, path: str) -> BlameEditor | None:
        fileName = os.path.abspath(path)

        editor = self.findEditor(fileName)
        if editor is not None:
            self.tabs.setCurrentWidget(editor)
            return editor

        editor = BlameEditor(fileName, self.tabs)
        try:
            editor.loadFile()
        except OSError as exc:
            logger.warning(f"Can't open {fileName}: {exc}")
            editor.deleteLater()
            asyncMessageBox(self, qAppName(), _("Can’t open {0}: {1}", tquo(path), exc.strerror)).show()
            return None

        editor.caretMoved.connect(self.blamer.trackLine)

        index = self.tabs.addTab(editor, os.path.basename(fileName))
        self.tabs.setTabToolTip(index, fileName)
        self.tabs.setCurrentIndex(index)
        return editor

    def closeTab(self, index: int):
        editor = self.tabs.widget(index)
        assert isinstance(editor, BlameEditor)

        editor.caretMoved.disconnect(self.blamer.trackLine)
        editor.markClosed()
        self.tabs.removeTab(index)
        self.blamer.handleClosedDocument(editor.fileName)
        editor.deleteLater()

    def closeAllTabs(self):
        for i in reversed(range(self.tabs.count())):
            self.closeTab(i)

    # ---------------------------------------------
    # Event handlers

    def onCurrentTabChanged(self, index: int):
        editor = self.activeEditor()
        self.setWindowTitle(f"{editor.fileName} - {qAppName()}" if editor else qAppName())
        self.blamer.autoBlame(editor)

    def onBlamerError(self, message: str):
        asyncMessageBox(self, qAppName(), message).show()

    def closeEvent(self, event: QCloseEvent):
        # Let editors release their decorations before they're destroyed
        self.closeAllTabs()
        self.blamer.prepareForDeletion()
        super().closeEvent(event)
