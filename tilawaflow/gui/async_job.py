"""Helpers for running content fetches in a background thread.

This module defines a ``Job`` class and associated ``JobSignals`` to
run network calls without blocking the Qt event loop, and a
``JobDispatcher`` that plugs them into
:class:`~tilawaflow.core.session.RecitationSession` as its *dispatch*
callable.

The dispatcher is a QObject living in the GUI thread.  Job signals are
emitted from a pool thread and connected to the dispatcher's slots, so
Qt queues them and the session's callbacks always run on the GUI
thread.

Example usage::

    from PyQt6.QtCore import QThreadPool
    from .async_job import JobDispatcher

    dispatcher = JobDispatcher(QThreadPool.globalInstance())
    session = RecitationSession(connector, resource, dispatch=dispatcher)
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal, pyqtSlot

logger = logging.getLogger(__name__)


class JobSignals(QObject):
    """Defines the signals available from a running job.

    ``result``
        Emitted with the job id and the return value of the function.

    ``error``
        Emitted with the job id and the exception if the function raises.

    ``finished``
        Emitted with the job id when the job is finished, regardless of
        success or failure.
    """

    result = pyqtSignal(int, object)
    error = pyqtSignal(int, object)
    finished = pyqtSignal(int)


class Job(QRunnable):
    """Wraps a callable for execution in a separate thread.

    :param job_id: Identifier echoed back in every signal.
    :param fn: Callable to execute.
    """

    def __init__(self, job_id: int, fn: Callable[[], Any]) -> None:
        super().__init__()
        self.job_id = job_id
        self.fn = fn
        self.signals = JobSignals()

    @pyqtSlot()
    def run(self) -> None:
        """Execute the function and emit signals as appropriate."""
        try:
            result = self.fn()
        except Exception as exc:
            self.signals.error.emit(self.job_id, exc)
        else:
            self.signals.result.emit(self.job_id, result)
        finally:
            self.signals.finished.emit(self.job_id)


class JobDispatcher(QObject):
    """Session dispatch callable backed by a ``QThreadPool``.

    :param pool: Thread pool to run jobs on; the global pool by default.
    :param parent: Optional QObject parent.
    """

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.pool = pool or QThreadPool.globalInstance()
        self._ids = itertools.count(1)
        self._pending: Dict[int, Tuple[Callable[[Any], None], Callable[[BaseException], None]]] = {}
        self._jobs: Dict[int, Job] = {}

    def __call__(self, fn: Callable[[], Any], on_result: Callable[[Any], None],
                 on_error: Callable[[BaseException], None]) -> None:
        job = Job(next(self._ids), fn)
        self._pending[job.job_id] = (on_result, on_error)
        self._jobs[job.job_id] = job
        job.signals.result.connect(self._deliver_result)
        job.signals.error.connect(self._deliver_error)
        job.signals.finished.connect(self._forget)
        self.pool.start(job)

    @property
    def outstanding(self) -> int:
        return len(self._pending)

    @pyqtSlot(int, object)
    def _deliver_result(self, job_id: int, result: Any) -> None:
        callbacks = self._pending.pop(job_id, None)
        if callbacks is not None:
            callbacks[0](result)

    @pyqtSlot(int, object)
    def _deliver_error(self, job_id: int, exc: Any) -> None:
        callbacks = self._pending.pop(job_id, None)
        if callbacks is not None:
            callbacks[1](exc)

    @pyqtSlot(int)
    def _forget(self, job_id: int) -> None:
        self._jobs.pop(job_id, None)
