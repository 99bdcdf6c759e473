"""
Module-level access to a shared background worker.
"""

import atexit
from typing import Optional

from task_runner.domain.queue import Action
from task_runner.infrastructure.worker import Worker

_worker: Optional[Worker] = None


def enqueue(action: Action) -> None:
    """
    Queue an action on the shared background worker.

    The worker is created and started on first use. Actions run one at a
    time in the order they were enqueued.

    Args:
        action: Zero-argument callable returning an awaitable
    """
    global _worker

    if _worker is None:
        _worker = Worker()
        atexit.register(_worker.shutdown)

    _worker.enqueue(action)


def shutdown(timeout: Optional[float] = None) -> None:
    """
    Wait for the shared worker to run every queued action, then stop it.

    Args:
        timeout: Maximum time to wait for the queue to drain, in seconds

    Raises:
        TimeoutError: If the queue is still busy after timeout seconds
        Exception: Any exception raised by an action
    """
    global _worker

    if _worker is None:
        return

    worker = _worker
    try:
        worker.stop(timeout)
    finally:
        # A timed-out worker is still draining and stays shared.
        if not worker.is_running():
            atexit.unregister(worker.shutdown)
            _worker = None
