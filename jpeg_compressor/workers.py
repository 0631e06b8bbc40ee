# workers.py
"""
Background task execution utilities for the JPEG compressor.
Defines a unified Worker for QRunnable tasks and the runners the
processing controller dispatches jobs through.
"""
import logging
from functools import partial
from typing import Any, Callable, Optional, Protocol, Set

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

LOGGER = logging.getLogger(__name__)

ResultCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]
FinishedCallback = Callable[[], None]


class WorkerSignals(QObject):
    started = Signal()
    finished = Signal()
    error = Signal(object)
    result = Signal(object)


class Worker(QRunnable):
    """Wraps any function to run in a QThreadPool."""
    def __init__(self, fn: Callable, *args, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            self.signals.started.emit()
            result = self.fn(*self.args, **self.kwargs)
            self.signals.result.emit(result)
        except Exception as e:
            LOGGER.error("Worker error: %s", e, exc_info=True)
            self.signals.error.emit(e)
        finally:
            self.signals.finished.emit()


class TaskRunner(Protocol):
    """Dispatches a callable and reports back through callbacks.

    ``on_finished`` is called exactly once per task, after ``on_result`` or
    ``on_error``.
    """

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_finished: Optional[FinishedCallback] = None,
    ) -> None: ...


class ThreadPoolRunner:
    """Runs tasks as :class:`Worker` instances on a ``QThreadPool``.

    Callbacks are delivered through queued signals, so they execute on the
    thread that owns the worker signals (the GUI thread).  Submitted workers
    are held until their ``finished`` signal has been delivered; otherwise
    the signals object could be collected while the task is still queued.
    """

    def __init__(self, pool: Optional[QThreadPool] = None):
        self.thread_pool = pool or QThreadPool.globalInstance()
        self._active: Set[Worker] = set()

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_finished: Optional[FinishedCallback] = None,
    ) -> Worker:
        worker = Worker(fn, *args)
        worker.signals.result.connect(on_result)
        worker.signals.error.connect(on_error)
        if on_finished is not None:
            worker.signals.finished.connect(on_finished)
        # Connected last so the caller's callbacks run before the release.
        worker.signals.finished.connect(partial(self._active.discard, worker))
        self._active.add(worker)
        self.thread_pool.start(worker)
        return worker


class InlineRunner:
    """Runs tasks synchronously on the calling thread."""

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_finished: Optional[FinishedCallback] = None,
    ) -> None:
        try:
            try:
                result = fn(*args)
            except Exception as e:
                LOGGER.error("Inline task error: %s", e, exc_info=True)
                on_error(e)
            else:
                on_result(result)
        finally:
            if on_finished is not None:
                on_finished()


__all__ = [
    "InlineRunner",
    "TaskRunner",
    "ThreadPoolRunner",
    "Worker",
    "WorkerSignals",
]
