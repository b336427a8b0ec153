"""
Background periodic work with idempotent start/stop
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs a callback every ``interval`` seconds on a daemon thread

    Starting a running task and stopping a stopped task are both no-ops, so
    at most one worker thread exists per task.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "logroute-periodic"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the worker; returns False if it was already running"""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), daemon=True, name=self.name
            )
            self._thread.start()
            return True

    def stop(self, timeout: float = 5.0) -> bool:
        """Stop the worker; returns False if it was not running"""
        with self._lock:
            thread, event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
        if thread is None or event is None:
            return False
        event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
        return True

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.warning("Periodic task %s failed", self.name, exc_info=True)
