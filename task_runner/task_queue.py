"""
In-process FIFO task queue that runs asynchronous actions one at a time.
"""

import asyncio
import logging
from collections import deque
from typing import Optional

from task_runner.domain.queue import Action, QueueState, TaskQueueInterface
from task_runner.exceptions import QueueBusyError

logger = logging.getLogger(__name__)


class TaskQueue(TaskQueueInterface):
    """
    Holds an ordered backlog of actions and executes them sequentially.

    Every method must be called from the event loop that runs the queue.
    Actions are awaited one after the other in enqueue order; a failing
    action stops the current drain and its exception reaches the caller.
    """

    def __init__(self) -> None:
        """Initialize an empty queue."""
        self._backlog: deque[Action] = deque()
        self._running_continuously = False
        self._state = QueueState.IDLE
        self._work_available: Optional[asyncio.Event] = None

    def __len__(self) -> int:
        return len(self._backlog)

    @property
    def count(self) -> int:
        """Number of pending, not yet started, actions."""
        return len(self._backlog)

    @property
    def state(self) -> QueueState:
        """Current execution state."""
        return self._state

    @property
    def is_running_continuously(self) -> bool:
        """Whether continuous mode has been requested and not stopped."""
        return self._running_continuously

    def enqueue(self, action: Action) -> None:
        """
        Append an action to the tail of the backlog.

        Args:
            action: Zero-argument callable returning an awaitable.
        """
        self._backlog.append(action)
        self._wake()

    async def run_once(self) -> None:
        """
        Execute queued actions in FIFO order until the backlog is empty.

        Actions enqueued while the drain is in progress are executed in the
        same pass.

        Raises:
            QueueBusyError: If the queue is already executing actions.
            Exception: Any exception raised by an action. Actions queued
                after the failing one stay in the backlog.
        """
        self._ensure_idle("run_once")
        try:
            await self._drain()
        finally:
            self._state = QueueState.IDLE

        await asyncio.sleep(0)

    async def run_continuously(self) -> None:
        """
        Drain the backlog repeatedly until a stop is requested.

        Between drains the loop waits for new actions instead of returning.
        After stop_when_queue_is_empty() is called the loop returns once the
        backlog has been drained again.

        Raises:
            QueueBusyError: If the queue is already executing actions.
            Exception: Any exception raised by an action. The loop exits and
                must be restarted explicitly.
        """
        self._ensure_idle("run_continuously")
        self._running_continuously = True
        self._work_available = asyncio.Event()
        self._state = QueueState.RUNNING
        logger.debug("Continuous mode started")

        try:
            while True:
                await self._drain()
                self._state = QueueState.RUNNING

                # A stop only counts once the backlog has been drained again.
                if not self._running_continuously:
                    break
                if not self._backlog:
                    self._work_available.clear()
                    await self._work_available.wait()
        finally:
            self._state = QueueState.IDLE
            self._work_available = None

        logger.debug("Continuous mode stopped")
        await asyncio.sleep(0)

    def stop_when_queue_is_empty(self) -> None:
        """
        Request continuous mode to return after the backlog is drained.

        The action in progress and every action already queued still run.
        """
        self._running_continuously = False
        self._wake()

    async def _drain(self) -> None:
        """Pop and await actions until the backlog is observed empty."""
        self._state = QueueState.DRAINING
        executed = 0
        while self._backlog:
            action = self._backlog.popleft()
            await action()
            executed += 1

        logger.debug(f"Drained {executed} action(s)")

    def _wake(self) -> None:
        if self._work_available is not None:
            self._work_available.set()

    def _ensure_idle(self, operation: str) -> None:
        if self._state is not QueueState.IDLE:
            raise QueueBusyError(
                f"Cannot {operation}: queue is already {self._state.value}"
            )
