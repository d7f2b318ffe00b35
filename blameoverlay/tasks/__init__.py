# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from blameoverlay.tasks.blametask import (
    AbortTask,
    BlameTask,
    BlameTaskRunner,
    FlowControlToken,
)
from blameoverlay.tasks.blametasks import (
    AutoBlame,
    ClearBlame,
    CloseDocument,
    ShowBlame,
    ToggleBlame,
)
