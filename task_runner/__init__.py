"""
In-process FIFO queue that runs asynchronous actions one at a time.
"""

from task_runner.core import enqueue, shutdown
from task_runner.domain.queue import Action, QueueState
from task_runner.exceptions import QueueBusyError, TaskRunnerError, WorkerNotRunningError
from task_runner.infrastructure.worker import Worker
from task_runner.task_queue import TaskQueue

__all__ = [
    "Action",
    "QueueBusyError",
    "QueueState",
    "TaskQueue",
    "TaskRunnerError",
    "Worker",
    "WorkerNotRunningError",
    "enqueue",
    "shutdown",
]
