# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Generator
from typing import TYPE_CHECKING, Any

from blameoverlay.localization import *
from blameoverlay.qt import *
from blameoverlay.toolbox import *

if TYPE_CHECKING:
    from blameoverlay.blamer import Blamer
    from blameoverlay.blameview.blameeditor import BlameEditor

logger = logging.getLogger(__name__)


class FlowControlToken:
    """
    Object that can be yielded from `BlameTask.flow()` to control the flow of the coroutine.
    """

    class Kind(enum.IntEnum):
        ContinueOnUiThread = enum.auto()
        ContinueOnWorkThread = enum.auto()
        InterruptedByException = enum.auto()

    flowControl: Kind
    exception: BaseException | None

    def __init__(self, flowControl: Kind = Kind.ContinueOnUiThread, exception=None):
        self.flowControl = flowControl
        self.exception = exception

    def __str__(self):
        return F"FlowControlToken({self.flowControl.name})"


FlowControlToken.BootstrapFlow = FlowControlToken()


class FlowWorkerThread(QThread):
    tokenReady = Signal(object, FlowControlToken)

    task: BlameTask
    flow: BlameTask.FlowGeneratorType | None

    def __init__(self, task: BlameTask, parent: QObject):
        super().__init__(parent)
        self.task = task
        self.flow = None

    def run(self):
        assert self.flow is not None, "flow not set"
        token = BlameTaskRunner._getNextToken(self.flow)
        self.flow = None
        self.tokenReady.emit(self.task, token)


class AbortTask(Exception):
    """ To bail from a coroutine early, we must raise an exception to ensure that
    any active context managers exit deterministically."""
    def __init__(self, text: str = ""):
        super().__init__(text)


class BlameTask(QObject):
    """
    Operation on the blame state of a single file.

    Tasks for the same file never run concurrently: BlameTaskRunner queues
    them and starts each one after the previous one has completed.
    """

    FlowGeneratorType = Generator[FlowControlToken, None, Any]

    blamer: Blamer
    fileName: str
    editor: BlameEditor | None

    _currentFlow: FlowGeneratorType | None
    _workerThread: FlowWorkerThread | None

    def __init__(self, blamer: Blamer, fileName: str, editor: BlameEditor | None = None):
        super().__init__(blamer)
        self.blamer = blamer
        self.fileName = fileName
        self.editor = editor
        self._currentFlow = None
        self._workerThread = None
        self._runningOnUiThread = True  # for debugging
        self.setObjectName(self.__class__.__name__)

    def __str__(self):
        return f"{self.objectName()}({self.fileName})"

    @property
    def key(self) -> str:
        """ Tasks with the same key are serialized. """
        return self.fileName

    def flow(self) -> FlowGeneratorType:
        """
        Generator that performs the task. You can think of this as a coroutine.

        You can move long computations to a separate thread by yielding from
        flowEnterWorkerThread(), and come back with flowEnterUiThread()::

            yield from self.flowEnterWorkerThread()
            blame = self.blamer.client.blameFile(self.fileName)
            yield from self.flowEnterUiThread()

        The coroutine always starts on the UI thread.
        """
        # Dummy yield to make it a generator. You should override this function anyway!
        yield from self.flowEnterUiThread()

    def cleanup(self):
        """
        Clean up any resources used by the task on completion or failure.
        Meant to be overridden by your task.
        Called from UI thread.
        """
        assert onAppThread()

    def onError(self, exc: BaseException):
        """
        Report an error to the user if flow() was interrupted by an exception.
        Called from the UI thread, after cleanup().
        """
        if isinstance(exc, AbortTask):
            logger.info(f"{self} aborted: {exc}")
            message = str(exc)
            if message:
                self.blamer.reportError(message)
        else:
            self.blamer.reportFailure(self.failureMessage(), exc)

    def failureMessage(self) -> str:
        return f"{self.objectName()} failed: {self.fileName}"

    def flowEnterWorkerThread(self):
        """
        Move the task to a non-UI thread.
        (Note that the flow always starts on the UI thread.)

        This function is intended to be called by flow() with "yield from".
        """
        assert self._currentFlow is not None
        self._runningOnUiThread = False
        yield FlowControlToken(FlowControlToken.Kind.ContinueOnWorkThread)

    def flowEnterUiThread(self):
        """
        Move the task to the UI thread.
        (Note that the flow always starts on the UI thread.)

        This function is intended to be called by flow() with "yield from".
        """
        assert self._currentFlow is not None
        self._runningOnUiThread = True
        yield FlowControlToken(FlowControlToken.Kind.ContinueOnUiThread)


class BlameTaskRunner(QObject):
    ForceSerial = APP_NOTHREADS
    """
    Force tasks to run synchronously on the UI thread.
    Useful for debugging and unit tests.
    Can be forced with environment variable APP_NOTHREADS.
    """

    postTask = Signal(BlameTask)
    ready = Signal()

    _currentTasks: dict[str, BlameTask]
    "Task that is currently running for each key"

    _pendingTasks: dict[str, deque[BlameTask]]
    "Tasks waiting for the current task with the same key to complete"

    def __init__(self, parent: QObject):
        super().__init__(parent)
        self.setObjectName("BlameTaskRunner")
        self._currentTasks = {}
        self._pendingTasks = {}

    def isBusy(self, key: str = "") -> bool:
        if key:
            return key in self._currentTasks
        return bool(self._currentTasks)

    def currentTask(self, key: str) -> BlameTask | None:
        return self._currentTasks.get(key, None)

    def numPendingTasks(self, key: str) -> int:
        return len(self._pendingTasks.get(key, ()))

    def put(self, task: BlameTask):
        assert onAppThread()

        key = task.key

        if key in self._currentTasks:
            logger.debug(f"Task {task} queued behind {self._currentTasks[key]}")
            self._pendingTasks.setdefault(key, deque()).append(task)
            return

        self._startTask(task)

    def joinAll(self):
        """
        Block UI thread until all running and pending tasks are done.
        """
        assert onAppThread()
        while self._currentTasks:
            flags = QEventLoop.ProcessEventsFlag.ExcludeUserInputEvents
            flags |= QEventLoop.ProcessEventsFlag.WaitForMoreEvents
            QApplication.processEvents(flags, 30)

    def _startTask(self, task: BlameTask):
        assert task.key not in self._currentTasks

        logger.debug(f">>> {task}")
        self._currentTasks[task.key] = task

        # Get flow generator
        task._currentFlow = task.flow()
        assert isinstance(task._currentFlow, Generator), "flow() must contain at least one yield statement"

        # Start the coroutine
        self._continueFlow(task)

    def _continueFlow(self, task: BlameTask, token: FlowControlToken = FlowControlToken.BootstrapFlow):
        while token is not None:
            token = self._processToken(task, token)

        if not self.isBusy():  # might've queued up another task...
            self.ready.emit()

    def _onWorkerTokenReady(self, task: BlameTask, token: FlowControlToken):
        self._joinWorkerThread(task)
        self._continueFlow(task, token)

    def _processToken(self, task: BlameTask, token: FlowControlToken) -> FlowControlToken | None:
        assert not isinstance(token, Generator), \
            "You're trying to yield a nested generator. Did you mean 'yield from'?"
        assert isinstance(token, FlowControlToken), \
            f"In a BlameTask coroutine, you can only yield FlowControlToken. You yielded: {type(token).__name__}"
        assert onAppThread(), "_processToken must be called on UI thread"
        assert self._currentTasks.get(task.key) is task

        flow = task._currentFlow
        assert flow is not None

        tk = token.flowControl
        TK = FlowControlToken.Kind

        if tk == TK.ContinueOnUiThread:
            # Get next continuation token on this thread then loop to beginning of _continueFlow.
            return BlameTaskRunner._getNextToken(flow)

        elif tk == TK.ContinueOnWorkThread:
            if BlameTaskRunner.ForceSerial:
                # In unit tests, run the threaded workload right here
                return BlameTaskRunner._getNextToken(flow)

            # FlowWorkerThread.run() is a wrapper around `next(flow)`.
            # It will eventually re-enter _continueFlow.
            if task._workerThread is None:
                task._workerThread = FlowWorkerThread(task, self)
                task._workerThread.tokenReady.connect(self._onWorkerTokenReady)
            assert not task._workerThread.isRunning()
            task._workerThread.flow = flow
            task._workerThread.start()

        elif tk == TK.InterruptedByException:
            exception = token.exception
            assert exception is not None, "FlowControlToken(InterruptedByException) must provide an exception!"

            self._releaseTask(task)

            if isinstance(exception, StopIteration):
                # No more steps in the flow. Task completed successfully.
                task.cleanup()
            else:
                task.cleanup()
                task.onError(exception)

            # Emit postTask signal whether the task succeeded or not
            self.postTask.emit(task)
            task.deleteLater()

            # Another task is queued up for this key, start it now
            self._startNextPendingTask(task.key)

        else:
            raise NotImplementedError(f"Unsupported FlowControlToken {token.flowControl}")

        return None

    def _startNextPendingTask(self, key: str):
        try:
            queue = self._pendingTasks[key]
            nextTask = queue.popleft()
        except (KeyError, IndexError):
            return

        if not queue:
            del self._pendingTasks[key]

        self._startTask(nextTask)

    @staticmethod
    def _getNextToken(flow: BlameTask.FlowGeneratorType) -> FlowControlToken:
        try:
            token = next(flow)
        except BaseException as exception:
            token = FlowControlToken(FlowControlToken.Kind.InterruptedByException, exception)
        return token

    def _joinWorkerThread(self, task: BlameTask):
        worker = task._workerThread
        if worker is not None and worker.isRunning():
            worker.wait()

    def _releaseTask(self, task: BlameTask):
        logger.debug(f"<<< {task}")

        assert onAppThread()
        assert self._currentTasks.get(task.key) is task

        self._joinWorkerThread(task)
        if task._workerThread is not None:
            task._workerThread.deleteLater()
            task._workerThread = None

        task._currentFlow = None
        del self._currentTasks[task.key]
