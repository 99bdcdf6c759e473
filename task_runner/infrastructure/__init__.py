"""
Thread-hosted runtime for the task queue.
"""

from task_runner.infrastructure.event_loop import EventLoop
from task_runner.infrastructure.worker import Worker

__all__ = ["EventLoop", "Worker"]
