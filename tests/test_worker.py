"""
Tests for the Worker component.

The Worker component should:
1. Host a TaskQueue in continuous mode on a dedicated thread
2. Accept actions from synchronous code and run them in FIFO order
3. Stop only after the queue has drained, propagating action failures
4. Ensure proper resource cleanup
"""

import asyncio
import threading
import time

import pytest

from task_runner.domain.worker import WorkerInterface
from task_runner.exceptions import QueueBusyError
from task_runner.infrastructure import Worker
from task_runner.task_queue import TaskQueue


@pytest.fixture
def worker_fixture():
    """
    Fixture that provides a clean Worker instance and ensures proper cleanup.
    """
    worker = Worker()
    yield worker
    worker.shutdown()


def test_worker_should_implement_interface(worker_fixture):
    """Test that Worker implements the WorkerInterface."""
    assert isinstance(worker_fixture, WorkerInterface)


def test_worker_should_start_in_not_running_state(worker_fixture):
    """Test that Worker initializes in a clean state."""
    assert not worker_fixture.is_running()
    assert worker_fixture.count == 0


def test_worker_should_start_consuming(worker_fixture):
    """Test that start() puts the queue in continuous mode."""
    worker_fixture.start()

    assert worker_fixture.is_running()
    assert worker_fixture.queue.is_running_continuously


def test_start_should_be_idempotent(worker_fixture):
    """Test that calling start() twice keeps a single run."""
    worker_fixture.start()
    worker_fixture.start()

    assert worker_fixture.is_running()


def test_worker_should_execute_actions_in_separate_thread(worker_fixture):
    """Test that actions run on the worker thread, not the caller's."""
    threads = []

    async def record_thread():
        threads.append(threading.current_thread())

    worker_fixture.enqueue(record_thread)
    worker_fixture.stop(timeout=1.0)

    assert len(threads) == 1
    assert threads[0] is not threading.current_thread()
    assert threads[0].name == "TaskRunnerThread"


def test_worker_should_auto_start_on_first_action(worker_fixture):
    """Test that enqueue() starts the worker when needed."""
    results = []

    async def action():
        results.append("done")

    assert not worker_fixture.is_running()
    worker_fixture.enqueue(action)
    assert worker_fixture.is_running()

    worker_fixture.stop(timeout=1.0)
    assert results == ["done"]


def test_worker_should_keep_fifo_order(worker_fixture):
    """Test that slow actions do not let later actions overtake them."""
    results = []

    def append_with_delay(delay: float, value: str):
        async def action():
            await asyncio.sleep(delay)
            results.append(value)

        return action

    worker_fixture.enqueue(append_with_delay(0.2, "first"))
    worker_fixture.enqueue(append_with_delay(0.1, "second"))
    worker_fixture.enqueue(append_with_delay(0.0, "third"))
    worker_fixture.stop(timeout=2.0)

    assert results == ["first", "second", "third"]


def test_worker_count_should_report_pending_actions(worker_fixture):
    """Test that count excludes the action currently running."""
    started = threading.Event()

    async def long_action():
        started.set()
        await asyncio.sleep(0.3)

    async def short_action():
        pass

    worker_fixture.enqueue(long_action)
    worker_fixture.enqueue(short_action)
    worker_fixture.enqueue(short_action)

    assert started.wait(timeout=1.0)
    time.sleep(0.05)
    assert worker_fixture.count == 2

    worker_fixture.stop(timeout=2.0)
    assert worker_fixture.count == 0


def test_stop_should_wait_for_queued_actions(worker_fixture):
    """Test that stop() returns only after every queued action ran."""
    results = []

    async def slow_action():
        await asyncio.sleep(0.2)
        results.append("slow")

    worker_fixture.enqueue(slow_action)
    worker_fixture.stop(timeout=1.0)

    assert results == ["slow"]
    assert not worker_fixture.is_running()


def test_stop_right_after_enqueue_should_run_the_action():
    """Test that an action enqueued just before stop() on a started worker runs."""
    for round_number in range(20):
        results = []

        async def action():
            results.append(round_number)

        worker = Worker()
        try:
            worker.start()
            worker.enqueue(action)
            worker.stop(timeout=1.0)
        finally:
            worker.shutdown()

        assert results == [round_number]
        assert worker.count == 0


def test_action_arriving_after_run_ended_should_restart_the_run(worker_fixture):
    """Test that an action landing on the loop after the run ended still runs."""
    results = []

    async def action():
        results.append("late")

    worker_fixture.start()
    worker_fixture._event_loop.call_soon(worker_fixture.queue.stop_when_queue_is_empty)
    deadline = time.monotonic() + 1.0
    while worker_fixture.is_running() and time.monotonic() < deadline:
        time.sleep(0.01)
    assert not worker_fixture.is_running()

    # Same path enqueue() takes once its is_running() check has passed.
    worker_fixture._event_loop.call_soon(worker_fixture._enqueue_on_loop, action)
    deadline = time.monotonic() + 1.0
    while not results and time.monotonic() < deadline:
        time.sleep(0.01)

    assert results == ["late"]
    worker_fixture.stop(timeout=1.0)
    assert not worker_fixture.is_running()
    assert worker_fixture.count == 0


def test_stop_should_propagate_action_failure(worker_fixture):
    """Test that a failure from an action surfaces from stop()."""
    results = []

    async def failing_action():
        await asyncio.sleep(0.05)
        raise ValueError("Action failed")

    async def later_action():
        results.append("later")

    worker_fixture.enqueue(failing_action)
    worker_fixture.enqueue(later_action)

    with pytest.raises(ValueError, match="Action failed"):
        worker_fixture.stop(timeout=1.0)

    assert results == []
    assert not worker_fixture.is_running()


def test_stop_should_raise_timeout_and_keep_running(worker_fixture):
    """Test that stop() times out without abandoning the queue."""
    results = []

    async def long_action():
        await asyncio.sleep(0.5)
        results.append("long")

    worker_fixture.enqueue(long_action)

    with pytest.raises(TimeoutError):
        worker_fixture.stop(timeout=0.1)
    assert worker_fixture.is_running()

    worker_fixture.stop(timeout=2.0)
    assert results == ["long"]


def test_worker_should_restart_after_failure(worker_fixture):
    """Test that enqueueing after a failed run starts a new run."""
    results = []

    async def failing_action():
        raise RuntimeError("boom")

    async def action():
        results.append("recovered")

    worker_fixture.enqueue(failing_action)
    time.sleep(0.1)
    assert not worker_fixture.is_running()

    worker_fixture.enqueue(action)
    worker_fixture.stop(timeout=1.0)

    assert results == ["recovered"]


def test_worker_should_refuse_queue_already_in_use():
    """Test that hosting a queue that is already draining fails the run."""

    async def scenario():
        queue = TaskQueue()
        queue.enqueue(lambda: asyncio.sleep(0.3))
        execution = asyncio.create_task(queue.run_once())
        await asyncio.sleep(0.05)

        worker = Worker(queue=queue)
        worker.start()
        with pytest.raises(QueueBusyError):
            worker.stop(timeout=1.0)
        await execution

    asyncio.run(scenario())


def test_shutdown_should_be_safe_to_call_multiple_times(worker_fixture):
    """Test that shutdown properly cleans up resources."""
    worker_fixture.start()
    assert worker_fixture.is_running()

    worker_fixture.shutdown()
    assert not worker_fixture.is_running()

    worker_fixture.shutdown()
    assert not worker_fixture.is_running()


def test_stop_on_worker_never_started_should_do_nothing(worker_fixture):
    """Test that stop() is a no-op before start()."""
    worker_fixture.stop(timeout=0.1)
    assert not worker_fixture.is_running()
