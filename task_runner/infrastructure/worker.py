"""
Worker component that runs a task queue continuously in a separate thread.
"""

import concurrent.futures
import logging
import threading
from typing import Optional

from task_runner.domain.queue import Action
from task_runner.domain.worker import WorkerInterface
from task_runner.exceptions import WorkerNotRunningError
from task_runner.infrastructure.event_loop import EventLoop
from task_runner.task_queue import TaskQueue

logger = logging.getLogger(__name__)

DEFAULT_START_TIMEOUT = 1.0


class Worker(WorkerInterface):
    """
    Hosts a TaskQueue on a dedicated event loop thread.

    Synchronous code enqueues actions from any thread; every queue operation
    is marshalled onto the loop thread, where the queue runs in continuous
    mode until stop() or shutdown() is called.
    """

    def __init__(
        self,
        queue: Optional[TaskQueue] = None,
        event_loop: Optional[EventLoop] = None,
        start_timeout: float = DEFAULT_START_TIMEOUT,
    ) -> None:
        """Initialize the Worker component."""
        self._queue = queue if queue is not None else TaskQueue()
        self._event_loop = event_loop if event_loop is not None else EventLoop()
        self._start_timeout = start_timeout
        self._run_future: Optional[concurrent.futures.Future[None]] = None
        self._consuming = threading.Event()
        self._serving = False
        logger.debug("Worker initialized")

    @property
    def queue(self) -> TaskQueue:
        """The hosted queue."""
        return self._queue

    @property
    def count(self) -> int:
        """Number of actions waiting in the hosted queue."""
        return self._queue.count

    def start(self) -> None:
        """
        Start the loop thread and put the queue in continuous mode.

        Returns once the queue is consuming, so a stop requested right after
        start() is never lost.

        Raises:
            WorkerNotRunningError: If the event loop could not be started
        """
        if self.is_running():
            return

        previous = self._run_future
        if previous is not None and previous.done() and not previous.cancelled():
            error = previous.exception()
            if error is not None:
                logger.error(f"Restarting after the previous run failed: {error}")

        if not self._event_loop.is_running():
            self._event_loop.start()
        if not self._event_loop.is_running():
            raise WorkerNotRunningError("Event loop could not be started")

        self._consuming.clear()
        self._launch()
        if self._run_future is None:
            raise WorkerNotRunningError("Event loop could not be started")

        if not self._consuming.wait(timeout=self._start_timeout):
            logger.warning(f"Queue did not start consuming within {self._start_timeout} seconds")
        logger.info("Worker started")

    def _launch(self) -> None:
        self._serving = True
        self._run_future = self._event_loop.run_coroutine(self._serve())

    async def _serve(self) -> None:
        self._consuming.set()
        try:
            await self._queue.run_continuously()
        finally:
            self._serving = False

    def _enqueue_on_loop(self, action: Action) -> None:
        self._queue.enqueue(action)
        # The run may have ended after enqueue() checked is_running().
        if not self._serving:
            logger.info("Continuous run had ended, starting a new one")
            self._launch()

    def enqueue(self, action: Action) -> None:
        """
        Hand an action to the queue, starting the worker if needed.

        Args:
            action: Zero-argument callable returning an awaitable
        """
        if not self.is_running():
            self.start()
        self._event_loop.call_soon(self._enqueue_on_loop, action)

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Let the queue drain, then stop the loop thread.

        Args:
            timeout: Maximum time to wait for the queue to drain, in seconds

        Raises:
            TimeoutError: If the queue is still busy after timeout seconds;
                the worker keeps running
            Exception: Any exception raised by an action, which also ended
                the continuous run
        """
        if self._run_future is None:
            return

        logger.info("Stopping worker once the queue is empty")
        while True:
            future = self._run_future
            if not future.done():
                self._event_loop.call_soon(self._queue.stop_when_queue_is_empty)

            done, _ = concurrent.futures.wait([future], timeout=timeout)
            if not done:
                logger.error(f"Queue did not drain within {timeout} seconds")
                raise TimeoutError(f"Queue did not drain within {timeout} seconds")

            # A late action can restart the run from the loop thread.
            if self._run_future is future:
                break

        self._run_future = None
        self._event_loop.shutdown()
        logger.info("Worker stopped")
        future.result()

    def shutdown(self) -> None:
        """Stop the loop thread immediately, abandoning queued actions."""
        if self._run_future is None and not self._event_loop.is_running():
            return

        self._run_future = None
        self._event_loop.shutdown()
        logger.info("Worker shutdown completed")

    def is_running(self) -> bool:
        """Check if the queue is being consumed."""
        return (
            self._run_future is not None
            and not self._run_future.done()
            and self._event_loop.is_running()
        )
