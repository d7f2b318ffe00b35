# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .benchmark import Benchmark, BENCHMARK_LOGGING_LEVEL, benchmark
from .gitutils import AuthorDisplayStyle, abbreviatePerson, shortHash
from .qtutils import *
from .textutils import *
