"""
Task queue domain abstractions and value objects.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

Action = Callable[[], Awaitable[Any]]


class QueueState(Enum):
    """Execution state of a task queue."""

    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"


@runtime_checkable
class TaskQueueInterface(Protocol):
    """Protocol defining the task queue interface."""

    @property
    def count(self) -> int:
        """Number of pending actions."""
        ...

    def enqueue(self, action: Action) -> None:
        """Append an action to the tail of the backlog."""
        ...

    async def run_once(self) -> None:
        """Execute pending actions one at a time until the backlog is empty."""
        ...

    async def run_continuously(self) -> None:
        """Keep draining the backlog until a stop is requested."""
        ...

    def stop_when_queue_is_empty(self) -> None:
        """Ask a continuous run to return after its next drain."""
        ...
