"""Detached background jobs.

Network calls never run on the GUI thread.  A job is handed to a task
runner together with success / error callbacks; the caller carries on
immediately.  Callbacks are always invoked on the thread that owns the
runner (the GUI thread), so they may touch widgets and engine state
without locking.

Two runners share the same ``submit`` interface:

``TaskRunner``
    Runs jobs on a ``QThreadPool`` and posts results back through a
    queued Qt signal.
``InlineTaskRunner``
    Runs jobs synchronously.  Used by tests and scripts.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal, pyqtSlot

logger = logging.getLogger(__name__)

Job = Callable[[], Any]
Callback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


def _log_failure(description: str) -> ErrorCallback:
    def on_error(exc: Exception) -> None:
        logger.warning("Background task '%s' failed: %s", description, exc)
    return on_error


class _Job(QRunnable):
    def __init__(
        self,
        runner: TaskRunner,
        job: Job,
        on_success: Callback | None,
        on_error: ErrorCallback,
    ) -> None:
        super().__init__()
        self._runner = runner
        self._job = job
        self._on_success = on_success
        self._on_error = on_error

    def run(self) -> None:
        try:
            result = self._job()
        except Exception as exc:  # delivered to on_error on the GUI thread
            self._runner.finished.emit(self._on_error, exc)
            return
        if self._on_success is not None:
            self._runner.finished.emit(self._on_success, result)


class TaskRunner(QObject):
    """Thread-pool backed runner with results marshalled to the owner thread."""

    # (callback, value), emitted from worker threads and delivered queued
    finished = pyqtSignal(object, object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        pool: QThreadPool | None = None,
    ) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self.finished.connect(self._dispatch)

    @property
    def pool(self) -> QThreadPool:
        return self._pool

    def submit(
        self,
        job: Job,
        on_success: Callback | None = None,
        on_error: ErrorCallback | None = None,
        *,
        description: str = "task",
    ) -> None:
        self._pool.start(
            _Job(self, job, on_success, on_error or _log_failure(description)),
        )

    def wait(self, msecs: int = -1) -> bool:
        """Block until all pending jobs are done.  Callbacks are still queued."""
        return self._pool.waitForDone(msecs)

    @pyqtSlot(object, object)
    def _dispatch(self, callback: Callable[[Any], None], value: Any) -> None:
        callback(value)


class InlineTaskRunner:
    """Runs each job right away on the calling thread."""

    def submit(
        self,
        job: Job,
        on_success: Callback | None = None,
        on_error: ErrorCallback | None = None,
        *,
        description: str = "task",
    ) -> None:
        try:
            result = job()
        except Exception as exc:
            (on_error or _log_failure(description))(exc)
            return
        if on_success is not None:
            on_success(result)
