"""
Example demonstrating the task queue in both execution modes.
"""

import asyncio
import logging

import task_runner
from task_runner import TaskQueue

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def make_task(name: str, duration: float):
    """
    Build an action that simulates an I/O operation.

    Args:
        name: Label used in the log output.
        duration: How long to sleep in seconds.
    """

    async def task() -> None:
        logger.info(f"{name}: starting, will sleep for {duration} seconds")
        await asyncio.sleep(duration)
        logger.info(f"{name}: done")

    return task


async def run_in_event_loop() -> None:
    queue = TaskQueue()

    # Example 1: drain everything queued so far
    queue.enqueue(make_task("slow", 0.5))
    queue.enqueue(make_task("fast", 0.1))
    logger.info(f"Pending actions: {queue.count}")
    await queue.run_once()

    # Example 2: keep consuming while other code keeps producing
    consumer = asyncio.create_task(queue.run_continuously())
    for i in range(3):
        queue.enqueue(make_task(f"produced-{i}", 0.2))
        await asyncio.sleep(0.1)

    queue.stop_when_queue_is_empty()
    await consumer


def main():
    asyncio.run(run_in_event_loop())

    # Example 3: feed the shared background worker from synchronous code
    try:
        task_runner.enqueue(make_task("background-1", 0.3))
        task_runner.enqueue(make_task("background-2", 0.1))
    finally:
        # Waits for both actions before returning
        task_runner.shutdown(timeout=5.0)


if __name__ == "__main__":
    main()
