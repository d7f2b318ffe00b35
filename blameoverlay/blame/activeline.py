# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blameoverlay.blameview.blameeditor import BlameEditor
    from blameoverlay.blameview.decorations import Decoration

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ActiveLine:
    editor: BlameEditor
    fileName: str
    line: str


class ActiveLineRegister:
    """
    Single slot holding the one line, across all open files, that carries
    the emphasized "active_line" decoration.

    Installing a new line always releases the previous decoration first,
    so at most one active-line handle is alive at any time.
    """

    state: ActiveLine | None
    decoration: Decoration | None

    def __init__(self):
        self.state = None
        self.decoration = None

    def __bool__(self):
        return self.state is not None

    def isOnFile(self, fileName: str) -> bool:
        return self.state is not None and self.state.fileName == fileName

    def disposeDecoration(self):
        if self.decoration is not None:
            self.decoration.dispose()

    def install(self, state: ActiveLine, decoration: Decoration):
        if self.decoration is not decoration:
            self.disposeDecoration()
        self.state = state
        self.decoration = decoration

    def forget(self):
        """ Empty the slot without touching the decoration. """
        self.state = None
        self.decoration = None

    def release(self):
        """ Dispose the active-line decoration and empty the slot. """
        self.disposeDecoration()
        self.forget()

    def releaseFile(self, fileName: str):
        if self.isOnFile(fileName):
            logger.debug(f"Releasing active line {self.state.line}: {fileName}")
            self.release()
