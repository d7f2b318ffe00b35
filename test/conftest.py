# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from collections.abc import Generator
from typing import TYPE_CHECKING

import pygit2
import pytest
from pytestqt.qtbot import QtBot

# Headless by default when pytest is invoked directly instead of through test.py
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

if TYPE_CHECKING:
    from blameoverlay.blamer import Blamer
    from .util import FakeClient, FakeEditorContext


def setUpGitConfigSearchPaths(prefix=""):
    """
    Prevent unit tests from accessing the host system's git config files.
    """
    ConfigLevel = pygit2.enums.ConfigLevel

    levels = [
        ConfigLevel.GLOBAL,
        ConfigLevel.XDG,
        ConfigLevel.SYSTEM,
        ConfigLevel.PROGRAMDATA,
    ]

    for level in levels:
        if prefix:
            path = f"{prefix}_{level.name}"
        else:
            path = ""
        pygit2.settings.search_path[level] = path


@pytest.fixture(scope='session', autouse=True)
def maskHostGitConfig():
    setUpGitConfigSearchPaths("")


@pytest.fixture(scope='session', autouse=True)
def setUpLogging():
    rootLogger = logging.root
    rootLogger.setLevel(logging.DEBUG)

    yield

    # Chatty destructors may cause spam after pytest has wound down.
    # Work around https://github.com/pytest-dev/pytest/issues/5502
    for handler in rootLogger.handlers:
        rootLogger.removeHandler(handler)


@pytest.fixture(autouse=True)
def resetPrefs():
    """ Undo any changes that a test makes to the global prefs. """
    from blameoverlay import settings
    yield
    defaults = settings.Prefs()
    for field in dataclasses.fields(defaults):
        setattr(settings.prefs, field.name, getattr(defaults, field.name))


@pytest.fixture
def tempDir() -> Generator[tempfile.TemporaryDirectory, None, None]:
    td = tempfile.TemporaryDirectory(prefix="blameoverlaytest-")
    yield td
    td.cleanup()


@pytest.fixture
def fakeClient() -> FakeClient:
    from .util import FakeClient
    return FakeClient()


@pytest.fixture
def editorContext() -> FakeEditorContext:
    from .util import FakeEditorContext
    return FakeEditorContext()


@pytest.fixture
def blamer(qtbot: QtBot, fakeClient, editorContext) -> Generator[Blamer, None, None]:
    from blameoverlay import settings
    from blameoverlay.appconsts import APP_TESTMODE
    from blameoverlay.blamer import Blamer

    # Test mode prevents loading/saving prefs
    assert APP_TESTMODE

    blamer = Blamer(fakeClient, editorContext=editorContext, prefs=settings.Prefs())
    qtbot.addWidget(blamer.statusIndicator)

    yield blamer

    blamer.prepareForDeletion()
    assert not blamer.runner.isBusy(), "Unit test has leaked running blame tasks"
    assert not blamer.activeLine
    blamer.deleteLater()


@pytest.fixture
def taskThread():
    """ In this unit test, run BlameTasks in a separate thread """
    from blameoverlay import tasks
    assert tasks.BlameTaskRunner.ForceSerial
    tasks.BlameTaskRunner.ForceSerial = False
    yield
    tasks.BlameTaskRunner.ForceSerial = True
