# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging

from blameoverlay.prefsfile import PrefsFile
from blameoverlay.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL
from blameoverlay.toolbox.gitutils import AuthorDisplayStyle

logger = logging.getLogger(__name__)


SHORT_DATE_PRESETS = {
    "ISO": "%Y-%m-%d",
    "European": "%d/%m/%y",
    "American": "%m/%d/%y",
}


class LoggingLevel(enum.IntEnum):
    Benchmark = BENCHMARK_LOGGING_LEVEL
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    _filename = "prefs.json"

    _category_blame             : int                   = 0
    enableLogs                  : bool                  = True
    autoBlame                   : bool                  = False

    _category_display           : int                   = 0
    authorDisplayStyle          : AuthorDisplayStyle    = AuthorDisplayStyle.FullName
    shortDateFormat             : str                   = SHORT_DATE_PRESETS["ISO"]
    shortHashChars              : int                   = 7

    _category_advanced          : int                   = 0
    verbosity                   : LoggingLevel          = LoggingLevel.Warning

    def applyLoggingLevel(self):
        logging.root.setLevel(self.verbosity)


# Initialize default prefs.
# The app should load the user's prefs with prefs.load().
prefs = Prefs()
