"""
Domain contracts for the task runner.
"""

from task_runner.domain.queue import Action, QueueState, TaskQueueInterface
from task_runner.domain.worker import WorkerInterface

__all__ = ["Action", "QueueState", "TaskQueueInterface", "WorkerInterface"]
