"""
Run pipeline coroutines from synchronous code

The Gemini async client is cached per process and bound to the event loop
that first used it, so every call has to go through the same loop.
"""
import asyncio
import threading
from typing import Any, Coroutine, Optional

from utils.logger import get_logger

logger = get_logger(__name__)


class BackgroundLoop:
    """One event loop running forever in a daemon thread"""

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="pipeline-loop", daemon=True)
        self._thread.start()
        logger.debug("Background event loop started")

    def _run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
        """
        Run a coroutine on the background loop and wait for its result

        Raises:
            Whatever the coroutine raises
        """
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return future.result(timeout)

    def stop(self):
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self.loop.close()
