"""
EventLoop component that runs a uvloop event loop in a dedicated thread.
"""

import asyncio
import concurrent.futures
import logging
import threading
import warnings
from typing import Any, Callable, Coroutine, Optional, TypeVar

import uvloop

logger = logging.getLogger(__name__)
T = TypeVar("T")

DEFAULT_THREAD_NAME = "TaskRunnerThread"
DEFAULT_JOIN_TIMEOUT = 2.0


class EventLoop:
    """
    Owns an event loop running forever in a daemon thread.
    Code outside the thread talks to the loop only through thread-safe calls.
    """

    def __init__(
        self,
        thread_name: str = DEFAULT_THREAD_NAME,
        join_timeout: float = DEFAULT_JOIN_TIMEOUT,
    ) -> None:
        """Initialize the EventLoop."""
        self._thread_name = thread_name
        self._join_timeout = join_timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._is_running = False
        logger.debug("EventLoop initialized")

    def start(self) -> None:
        """Start the event loop thread if not already running."""
        if self._is_running:
            logger.warning("EventLoop is already running")
            return

        try:
            self._loop = uvloop.new_event_loop()
            self._thread = threading.Thread(
                target=self._run_forever, name=self._thread_name, daemon=True
            )
            self._thread.start()
            self._is_running = True
            logger.info(f"Started event loop in thread {self._thread_name}")

        except Exception as e:
            error_msg = f"Failed to start event loop: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
            self._is_running = False

    def _run_forever(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run_coroutine(
        self, coro: Coroutine[Any, Any, T]
    ) -> Optional[concurrent.futures.Future[T]]:
        """
        Schedule a coroutine on the loop thread.

        Args:
            coro: The coroutine to run

        Returns:
            A future for the coroutine's result, or None if no loop is available
        """
        if not self._is_running:
            self.start()

        if not self._is_running or self._loop is None:
            warnings.warn("No event loop available", RuntimeWarning)
            coro.close()
            return None

        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule a plain callback on the loop thread."""
        if not self._is_running or self._loop is None:
            raise RuntimeError("Event loop is not running")
        self._loop.call_soon_threadsafe(callback, *args)

    def get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        """Get the event loop, starting it if necessary."""
        if not self._is_running:
            self.start()
        return self._loop

    def shutdown(self) -> None:
        """Stop the loop, wait for its thread and close it."""
        if not self._is_running:
            return

        try:
            logger.info("Shutting down event loop")
            self._loop.call_soon_threadsafe(self._loop.stop)

            if self._thread and self._thread.is_alive():
                self._thread.join(timeout=self._join_timeout)
                if self._thread.is_alive():
                    logger.warning("Event loop thread did not terminate gracefully")

            if not self._loop.is_closed() and not self._loop.is_running():
                self._loop.close()

        except Exception as e:
            error_msg = f"Error during shutdown: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
        finally:
            self._loop = None
            self._thread = None
            self._is_running = False

    def is_running(self) -> bool:
        """Check if the event loop is running."""
        return self._is_running and self._loop is not None and not self._loop.is_closed()
