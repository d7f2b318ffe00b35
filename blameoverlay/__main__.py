# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import os
import signal
import sys
from argparse import ArgumentParser

from blameoverlay.localization import installGettextTranslator
from blameoverlay.qt import *


def main():
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.WARNING,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.captureWarnings(True)

    parser = ArgumentParser(description=f"{APP_DISPLAY_NAME} - view files with git blame annotations")
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to open")
    parser.add_argument("--auto-blame", action="store_true", help="Blame each file as soon as it's shown")
    args, qtArgs = parser.parse_known_args()

    app = QApplication([sys.argv[0]] + qtArgs)
    app.setApplicationName(APP_SYSTEM_NAME)  # used by QStandardPaths
    app.setApplicationDisplayName(APP_DISPLAY_NAME)  # user-friendly name
    app.setApplicationVersion(APP_VERSION)
    app.setDesktopFileName(APP_IDENTIFIER)

    # Falls back to American English if there are no translations for this locale
    moPath = os.path.join(os.path.dirname(__file__), "assets", "lang", QLocale().name() + ".mo")
    installGettextTranslator(moPath)

    # Load prefs once the app name is known, so the prefs land in the right directory
    from blameoverlay import settings
    settings.prefs.load()
    settings.prefs.applyLoggingLevel()
    if args.auto_blame:
        settings.prefs.autoBlame = True

    from blameoverlay.blame.gitclient import GitBlameClient
    from blameoverlay.blameview.blamewindow import BlameWindow
    window = BlameWindow(GitBlameClient())
    for path in args.files:
        window.openFile(path)
    window.show()

    # Quit app cleanly on Ctrl+C (all decorations and worker threads will be released)
    def onSigint(*_dummy):
        # Deferring the quit to the next event loop gives the window
        # some time to wrap up.
        QTimer.singleShot(0, window.close)
    signal.signal(signal.SIGINT, onSigint)

    # Force Python interpreter to run every now and then so it can run the Ctrl+C signal handler
    # (Otherwise the app won't actually die until the window regains focus, see https://stackoverflow.com/q/4938723)
    if __debug__:
        timer = QTimer()
        timer.start(300)
        timer.timeout.connect(lambda: None)

    # Keep the app running
    returnCode = app.exec()
    sys.exit(returnCode)


if __name__ == "__main__":
    main()
