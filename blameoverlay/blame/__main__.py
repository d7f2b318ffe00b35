# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations as _annotations

import logging as _logging

from blameoverlay.blame import *
from blameoverlay.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL, Benchmark


def blameCommandLineTool():  # pragma: no cover
    from argparse import ArgumentParser
    from timeit import timeit

    parser = ArgumentParser(description="BlameOverlay blame tool")
    parser.add_argument("path", help="File path")
    parser.add_argument("-n", "--no-logs", action="store_true", help="Don't look up commit logs")
    parser.add_argument("-q", "--quiet", action="store_true", help="Don't print annotations")
    parser.add_argument("-b", "--benchmark", action="store_true", help="Benchmark mode")
    args = parser.parse_args()

    _logging.basicConfig(level=BENCHMARK_LOGGING_LEVEL)
    _logging.captureWarnings(True)

    client = GitBlameClient()

    with Benchmark("Blame"):
        blame = client.blameFile(args.path)

    logs = []
    if not args.no_logs:
        with Benchmark("Logs"):
            logs = client.getLogsForRevisions(args.path, {entry.revision for entry in blame})

    if not args.quiet:
        with open(args.path, encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()

        for metadata in joinMetadata(blame, logs):
            author = (metadata.author or "")[:20]
            date = metadata.date.strftime("%Y-%m-%d") if metadata.date else ""
            text = lines[metadata.line - 1] if metadata.line <= len(lines) else ""
            print(f"{metadata.revision[:8]} {author:20} {date:10} {metadata.line:>5} {text}")

    if args.benchmark:
        N = 10
        print("Benchmarking...")
        elapsed = timeit(lambda: client.blameFile(args.path), number=N)
        print(f"Blame: {elapsed*1000/N:.0f} ms avg")


if __name__ == '__main__':
    blameCommandLineTool()
