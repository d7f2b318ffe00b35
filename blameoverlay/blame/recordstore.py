# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging

from blameoverlay.blame.annotation import AnnotationRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Annotation records for every file that currently shows blame,
    keyed by file name. A file without a record shows no blame.

    Records hold live decoration handles, so they only make sense
    for the lifetime of the session and are kept in memory.
    """

    def __init__(self):
        self._records: dict[str, AnnotationRecord] = {}

    def __contains__(self, fileName: str):
        return fileName in self._records

    def __len__(self):
        return len(self._records)

    def keys(self) -> list[str]:
        return list(self._records.keys())

    def get(self, fileName: str) -> AnnotationRecord | None:
        return self._records.get(fileName, None)

    def set(self, fileName: str, record: AnnotationRecord):
        self._records[fileName] = record

    def delete(self, fileName: str):
        self._records.pop(fileName, None)

    def clear(self):
        logger.debug(f"Dropping records for {len(self._records)} files")
        self._records.clear()
