# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import tempfile
from collections import Counter
from datetime import datetime, timezone

import pygit2
from pygit2 import Signature
from pytestqt.qtbot import QtBot

from blameoverlay.blame import *
from blameoverlay.blameview.blameeditor import BlameEditor
from blameoverlay.blameview.decorations import Decoration, DecorationRenderer

TEST_SIGNATURE = Signature("Test Person", "toto@example.com", 1672600000, 0)


class FakeClient:
    """
    VersionControlClient serving canned blame data.
    Keeps track of every request it receives.
    """

    def __init__(self):
        self.blames: dict[str, list[str]] = {}
        self.blameCalls: list[str] = []
        self.logCalls: list[tuple[str, set[str]]] = []
        self.blameError: Exception | None = None
        self.logsError: Exception | None = None

    def setBlame(self, fileName: str, revisions: list[str]):
        """ revisions[i] is the revision that last touched line i+1 """
        self.blames[fileName] = revisions

    def blameFile(self, fileName: str) -> list[BlameEntry]:
        self.blameCalls.append(fileName)
        if self.blameError is not None:
            raise self.blameError
        revisions = self.blames[fileName]
        return [BlameEntry(i + 1, revision) for i, revision in enumerate(revisions)]

    def getLogsForRevisions(self, fileName: str, revisions: set[str]) -> list[RevisionMetadata]:
        self.logCalls.append((fileName, set(revisions)))
        if self.logsError is not None:
            raise self.logsError
        return [fakeMetadata(revision) for revision in sorted(revisions)]


def fakeMetadata(revision: str) -> RevisionMetadata:
    return RevisionMetadata(
        revision,
        author=f"Author {revision}",
        date=datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc),
        message=f"Commit {revision}\n\nDetails about {revision}")


class FakeEditorContext:
    def __init__(self):
        self.editor: BlameEditor | None = None

    def activeEditor(self) -> BlameEditor | None:
        return self.editor


class FailingRenderer(DecorationRenderer):
    """ Raises on the n-th decoration it's asked to create. """

    def __init__(self, failAt: int):
        self.failAt = failAt
        self.numCreated = 0

    def create(self, editor, metadata, kind) -> Decoration:
        if self.numCreated + 1 == self.failAt:
            raise RuntimeError("renderer exploded")
        self.numCreated += 1
        return super().create(editor, metadata, kind)


def makeEditor(qtbot: QtBot, fileName: str, numLines: int = 10) -> BlameEditor:
    editor = BlameEditor(fileName)
    editor.setPlainText("\n".join(f"line {i}" for i in range(1, numLines + 1)))
    qtbot.addWidget(editor)
    return editor


def makeBlamedEditor(qtbot: QtBot, blamer, fileName: str, revisions: list[str], numLines: int = 0) -> BlameEditor:
    blamer.client.setBlame(fileName, revisions)
    editor = makeEditor(qtbot, fileName, numLines or len(revisions))
    blamer.showBlameForFile(editor, fileName)
    assert blamer.getRecordsForFile(fileName)
    return editor


def activeLineDecorations(*editors: BlameEditor) -> list[Decoration]:
    return [d for e in editors for d in e.liveDecorations() if d.kind == DecorationKind.ActiveLine]


class DetachSpy:
    """ Counts how many times each decoration gets detached from an editor. """

    def __init__(self, editor: BlameEditor):
        self.counts = Counter()
        self._detach = editor.detachDecoration
        editor.detachDecoration = self

    def __call__(self, decoration: Decoration):
        self.counts[id(decoration)] += 1
        self._detach(decoration)


def makeRepo(tempDir: tempfile.TemporaryDirectory | str, name="TestRepo") -> pygit2.Repository:
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    path = os.path.realpath(os.path.join(tempDirPath, name))
    return pygit2.init_repository(path)


def commitFile(repo: pygit2.Repository, relPath: str, text: str, message: str) -> pygit2.Oid:
    with open(os.path.join(repo.workdir, relPath), "w", encoding="utf-8") as f:
        f.write(text)

    repo.index.add(relPath)
    repo.index.write()
    tree = repo.index.write_tree()
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return repo.create_commit("HEAD", TEST_SIGNATURE, TEST_SIGNATURE, message, tree, parents)
