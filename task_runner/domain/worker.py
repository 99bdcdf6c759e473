"""
Domain interface for the Worker component.
"""

from typing import Optional, Protocol, runtime_checkable

from task_runner.domain.queue import Action


@runtime_checkable
class WorkerInterface(Protocol):
    """
    Interface for the Worker component.
    Defines the contract that all Worker implementations must follow.
    """

    @property
    def count(self) -> int:
        """
        Number of actions waiting in the hosted queue.
        """
        ...

    def start(self) -> None:
        """
        Start the worker.
        """
        ...

    def enqueue(self, action: Action) -> None:
        """
        Hand an action to the worker's queue.

        Args:
            action: Zero-argument callable returning an awaitable
        """
        ...

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the worker once every queued action has run.

        Args:
            timeout: Maximum time to wait for the queue to drain, in seconds
        """
        ...

    def shutdown(self) -> None:
        """
        Shutdown the worker without waiting for queued actions.
        """
        ...

    def is_running(self) -> bool:
        """
        Check if the worker is running.
        """
        ...
