# tasks.py
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Protocol, Tuple

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot


logger = logging.getLogger(__name__)

DoneCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]


class TaskRunner(Protocol):
    def submit(self, fn: Callable[[], Any], on_done: DoneCallback, on_error: ErrorCallback) -> None: ...


class _TaskSignals(QObject):
    finished = Signal(int, object)
    failed = Signal(int, object)


class _Task(QRunnable):
    def __init__(self, task_id: int, fn: Callable[[], Any], signals: _TaskSignals) -> None:
        super().__init__()
        self._task_id = task_id
        self._fn = fn
        self._signals = signals

    def run(self) -> None:
        try:
            result = self._fn()
        except Exception as e:
            self._signals.failed.emit(self._task_id, e)
            return
        self._signals.finished.emit(self._task_id, result)


class QtTaskRunner(QObject):
    """
    Runs blocking calls on a QThreadPool. Callbacks are delivered on the thread that
    owns the runner, through queued signals, so they can safely touch controller state.
    """

    def __init__(self, pool: QThreadPool | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._pool = pool if pool is not None else QThreadPool.globalInstance()
        self._ids = itertools.count(1)
        self._pending: Dict[int, Tuple[DoneCallback, ErrorCallback]] = {}

        self._signals = _TaskSignals()
        self._signals.finished.connect(self._on_finished)
        self._signals.failed.connect(self._on_failed)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(self, fn: Callable[[], Any], on_done: DoneCallback, on_error: ErrorCallback) -> None:
        task_id = next(self._ids)
        self._pending[task_id] = (on_done, on_error)
        self._pool.start(_Task(task_id, fn, self._signals))

    def wait(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    @Slot(int, object)
    def _on_finished(self, task_id: int, result: Any) -> None:
        cbs = self._pending.pop(task_id, None)
        if cbs is None:
            logger.debug("Result for unknown task %s dropped", task_id)
            return
        cbs[0](result)

    @Slot(int, object)
    def _on_failed(self, task_id: int, error: BaseException) -> None:
        cbs = self._pending.pop(task_id, None)
        if cbs is None:
            logger.debug("Error for unknown task %s dropped", task_id)
            return
        cbs[1](error)
