# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pygit2
from pygit2 import Commit, Oid, Repository

from blameoverlay.blame.annotation import BlameEntry, RevisionMetadata
from blameoverlay.localization import *
from blameoverlay.toolbox.benchmark import Benchmark

logger = logging.getLogger(__name__)

NULL_REVISION = "0" * 40


class GitBlameClient:
    """
    Blame and log lookups backed by libgit2.

    A fresh Repository is opened for each request so that lookups for
    different files can safely run on separate worker threads.
    """

    def openRepo(self, fileName: str) -> tuple[Repository, str]:
        """
        Open the repository that contains the given file.
        Return the repository and the file's path relative to the workdir.
        """
        path = Path(fileName).resolve()

        repoPath = pygit2.discover_repository(str(path.parent))
        if not repoPath:
            raise FileNotFoundError(f"Not in a git repository: {fileName}")

        repo = Repository(repoPath)
        if repo.is_bare:
            raise FileNotFoundError(f"Bare repository has no working directory: {repoPath}")

        workdir = Path(repo.workdir).resolve()
        relPath = path.relative_to(workdir).as_posix()
        return repo, relPath

    def blameFile(self, fileName: str) -> list[BlameEntry]:
        """
        Blame the file as it currently sits in the working directory.
        Lines that aren't committed yet are attributed to NULL_REVISION.
        """
        repo, relPath = self.openRepo(fileName)

        with open(fileName, "rb") as f:
            data = f.read()

        with Benchmark("blame"):
            blame = repo.blame(relPath).for_buffer(data)

        entries = []
        for hunk in blame:
            revision = str(hunk.final_commit_id)
            start = hunk.final_start_line_number
            entries.extend(BlameEntry(line, revision) for line in range(start, start + hunk.lines_in_hunk))

        logger.debug(f"Blamed {len(entries)} lines: {relPath}")
        return entries

    def getLogsForRevisions(self, fileName: str, revisions: set[str]) -> list[RevisionMetadata]:
        repo, _dummy = self.openRepo(fileName)
        logs = []

        with Benchmark("logs"):
            for revision in revisions:
                if revision == NULL_REVISION:
                    logs.append(RevisionMetadata(revision, author=_("Not Committed Yet"), message=""))
                    continue

                commit = repo[Oid(hex=revision)].peel(Commit)
                logs.append(self.metadataFromCommit(commit))

        return logs

    @staticmethod
    def metadataFromCommit(commit: Commit) -> RevisionMetadata:
        author = commit.author
        tz = timezone(timedelta(minutes=author.offset))
        date = datetime.fromtimestamp(author.time, tz)
        return RevisionMetadata(str(commit.id), author=author.name, date=date, message=commit.message)
