"""
Exception module for task_runner.

This module defines specific exceptions that may be raised by the component.
Failures raised by enqueued actions are never wrapped; they reach the caller
unchanged.
"""


class TaskRunnerError(Exception):
    """Base exception for errors in the task runner."""


class QueueBusyError(TaskRunnerError):
    """Raised when a drain is started on a queue that is already executing."""


class WorkerNotRunningError(TaskRunnerError):
    """Raised when the worker's event loop is not available."""
