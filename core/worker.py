"""Start/stop lifecycle shared by every provider and consumer.

A Worker owns one dedicated background thread per activation. start()
spawns it and returns immediately; stop() only flips the activation's
stop token, and the thread notices at its next wait -- at worst one
polling interval later. A stopped worker can be started again; the new
activation gets a fresh token so a lingering thread from the previous
one still exits on its own.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

WAIT_SLICE = 0.1  # seconds


class Worker(ABC):
    """Base class for all background workers."""

    kind = "worker"

    def __init__(self, worker_id: str, config: Dict):
        self.worker_id = worker_id
        self.config = config
        self.interval = float(config.get("interval", 1.0))  # seconds
        self._lifecycle_lock = threading.Lock()
        self._stop = threading.Event()
        self._stop.set()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return not self._stop.is_set()

    def start(self):
        """Spawn the worker thread. No-op if already running."""
        with self._lifecycle_lock:
            if self.is_running:
                logger.debug("%s %s already running", self.kind, self.worker_id)
                return
            args = self._prepare()
            stop = threading.Event()
            self._stop = stop
            self._thread = threading.Thread(
                target=self._run, args=(stop,) + args,
                daemon=True, name=f"{self.kind}-{self.worker_id}",
            )
            self._thread.start()
        logger.info("%s %s started (%.2fs interval)",
                    self.kind.capitalize(), self.worker_id, self.interval)

    def stop(self):
        """Ask the worker thread to exit. Does not wait for it."""
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current thread to exit. True if it has."""
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _prepare(self) -> Tuple[Any, ...]:
        """Per-activation setup on the caller's thread; extra args for _work()."""
        return ()

    def _run(self, stop: threading.Event, *args):
        try:
            self._work(stop, *args)
        except Exception:
            logger.exception("%s %s crashed", self.kind.capitalize(), self.worker_id)
        finally:
            stop.set()
            logger.info("%s %s stopped", self.kind.capitalize(), self.worker_id)

    @abstractmethod
    def _work(self, stop: threading.Event, *args):
        """Body of the worker thread. Must return once stop is set."""
        ...

    @staticmethod
    def wait(stop: threading.Event, seconds: float) -> bool:
        """Sleep in small chunks so stop() is responsive.

        Returns False if stop was requested before the time ran out.
        """
        deadline = time.monotonic() + seconds
        while not stop.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return True
            time.sleep(min(WAIT_SLICE, remaining))
        return False
