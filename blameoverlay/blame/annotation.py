# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import enum
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from blameoverlay.blameview.decorations import Decoration


class DecorationKind(enum.StrEnum):
    Blame = "blame"
    "Plain inline annotation shown on every blamed line"

    ActiveLine = "active_line"
    "Emphasized annotation on the line that holds the caret"


@dataclasses.dataclass(frozen=True)
class BlameEntry:
    line: int
    "1-based line number"

    revision: str


@dataclasses.dataclass(frozen=True)
class RevisionMetadata:
    revision: str
    author: str | None = None
    date: datetime | None = None
    message: str | None = None

    line: int = 0
    "1-based line number this metadata was joined against (0 for raw log entries)"

    @property
    def hasLog(self) -> bool:
        return self.author is not None

    def forLine(self, line: int) -> RevisionMetadata:
        return dataclasses.replace(self, line=line)


@dataclasses.dataclass
class LineAnnotation:
    decoration: Decoration
    metadata: RevisionMetadata


AnnotationRecord = dict[str, LineAnnotation]
"""
Full blame overlay for one file, keyed by the stringified 1-based line number.
This mapping is sparse: lines without blame coverage have no key.
"""


def lineKey(line: int) -> str:
    return str(line)


def joinMetadata(blame: list[BlameEntry], logs: list[RevisionMetadata]) -> list[RevisionMetadata]:
    """
    Join each blamed line against the log entries for its revision.
    Revisions missing from the logs (e.g. logs disabled) only carry their id.
    """
    logsByRevision = {log.revision: log for log in logs}
    joined = []
    for entry in blame:
        try:
            log = logsByRevision[entry.revision]
        except KeyError:
            log = RevisionMetadata(entry.revision)
        joined.append(log.forLine(entry.line))
    return joined


class VersionControlClient(Protocol):
    def blameFile(self, fileName: str) -> list[BlameEntry]: ...

    def getLogsForRevisions(self, fileName: str, revisions: set[str]) -> list[RevisionMetadata]: ...
