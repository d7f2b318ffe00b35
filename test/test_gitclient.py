# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
from datetime import datetime, timezone

import pytest

from blameoverlay.blame.gitclient import NULL_REVISION, GitBlameClient
from .util import *


@pytest.fixture
def twoCommitRepo(tempDir):
    repo = makeRepo(tempDir)
    c1 = commitFile(repo, "hello.txt", "first\nsecond\n", "Initial commit")
    c2 = commitFile(repo, "hello.txt", "first\nSECOND\nthird\n", "Shout a bit\n\nAnd add a line")
    path = os.path.join(repo.workdir, "hello.txt")
    return repo, path, str(c1), str(c2)


def testBlameFile(twoCommitRepo):
    repo, path, c1, c2 = twoCommitRepo

    blame = GitBlameClient().blameFile(path)

    assert [entry.line for entry in blame] == [1, 2, 3]
    assert [entry.revision for entry in blame] == [c1, c2, c2]


def testBlameFileInSubdirectory(tempDir):
    repo = makeRepo(tempDir)
    os.makedirs(os.path.join(repo.workdir, "src", "pkg"))
    oid = commitFile(repo, "src/pkg/mod.py", "a = 1\nb = 2\n", "Add module")

    blame = GitBlameClient().blameFile(os.path.join(repo.workdir, "src", "pkg", "mod.py"))

    assert [(e.line, e.revision) for e in blame] == [(1, str(oid)), (2, str(oid))]


def testBlameFileWithUncommittedChanges(tempDir):
    repo = makeRepo(tempDir)
    oid = str(commitFile(repo, "list.txt", "a\nb\n", "Add list"))
    path = os.path.join(repo.workdir, "list.txt")

    # Insert a line at the top without committing it
    with open(path, "w", encoding="utf-8") as f:
        f.write("new\na\nb\n")

    client = GitBlameClient()
    blame = client.blameFile(path)

    assert [(e.line, e.revision) for e in blame] == [(1, NULL_REVISION), (2, oid), (3, oid)]

    logs = client.getLogsForRevisions(path, {e.revision for e in blame})
    logsByRevision = {log.revision: log for log in logs}
    assert logsByRevision[NULL_REVISION].author == "Not Committed Yet"
    assert logsByRevision[oid].message.startswith("Add list")


def testLogsForRevisions(twoCommitRepo):
    repo, path, c1, c2 = twoCommitRepo

    logs = GitBlameClient().getLogsForRevisions(path, {c1, c2})
    logsByRevision = {log.revision: log for log in logs}

    assert set(logsByRevision) == {c1, c2}
    log = logsByRevision[c2]
    assert log.author == TEST_SIGNATURE.name
    assert log.message.startswith("Shout a bit")
    assert log.date == datetime.fromtimestamp(TEST_SIGNATURE.time, timezone.utc)
    assert log.date.utcoffset().total_seconds() == 0
    assert log.hasLog
    assert log.line == 0


def testLogsForUncommittedRevision(twoCommitRepo):
    repo, path, c1, c2 = twoCommitRepo

    logs = GitBlameClient().getLogsForRevisions(path, {NULL_REVISION})

    assert len(logs) == 1
    assert logs[0].revision == NULL_REVISION
    assert logs[0].author == "Not Committed Yet"
    assert logs[0].date is None


def testFileOutsideRepo(tempDir):
    path = os.path.join(tempDir.name, "loose.txt")
    with open(path, "w") as f:
        f.write("not versioned\n")

    client = GitBlameClient()
    with pytest.raises(FileNotFoundError):
        client.blameFile(path)
    with pytest.raises(FileNotFoundError):
        client.getLogsForRevisions(path, {"abc"})


def testBlameThroughBlamer(qtbot, tempDir):
    from blameoverlay import settings
    from blameoverlay.blamer import Blamer

    repo = makeRepo(tempDir)
    oid = commitFile(repo, "notes.md", "# Notes\n\nhello\n", "Write notes")
    path = os.path.join(repo.workdir, "notes.md")

    blamer = Blamer(GitBlameClient(), prefs=settings.Prefs())
    qtbot.addWidget(blamer.statusIndicator)
    editor = makeEditor(qtbot, path)
    editor.loadFile()

    blamer.showBlameForFile(editor, path)

    record = blamer.getRecordsForFile(path)
    assert set(record.keys()) == {"1", "2", "3"}
    assert all(a.metadata.revision == str(oid) for a in record.values())
    assert record["3"].metadata.author == TEST_SIGNATURE.name
    assert record["3"].metadata.message.startswith("Write notes")

    blamer.prepareForDeletion()
    assert not editor.liveDecorations()
