# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Per-line blame data and the state that ties it to decorations:
annotation records, the record store, the active-line register,
and the git client that produces blame and log data.
"""

from blameoverlay.blame.activeline import ActiveLine, ActiveLineRegister
from blameoverlay.blame.annotation import (
    AnnotationRecord,
    BlameEntry,
    DecorationKind,
    LineAnnotation,
    RevisionMetadata,
    VersionControlClient,
    joinMetadata,
    lineKey,
)
from blameoverlay.blame.gitclient import GitBlameClient
from blameoverlay.blame.recordstore import RecordStore
