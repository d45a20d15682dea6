"""Repaint coalescing between background producers and the render host.

Producers call ``RepaintFlag.set()`` after publishing new data. The
``RepaintTicker`` thread test-and-clears the flag every poll interval and asks
the host for exactly one repaint per observed set, so a burst of updates
costs one wake-up per interval instead of one per update.
"""

import logging
import threading
from typing import Optional

from .render_host import RenderHost

logger = logging.getLogger(__name__)


class RepaintFlag:
    """Shared "new data available" flag.

    The only state mutated from several threads; test_and_clear is atomic.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending = False

    def set(self) -> None:
        with self._lock:
            self._pending = True

    def is_set(self) -> bool:
        with self._lock:
            return self._pending

    def test_and_clear(self) -> bool:
        """Clear the flag and report whether it was set."""
        with self._lock:
            was_set = self._pending
            self._pending = False
            return was_set


class RepaintTicker:
    """Drains the repaint flag into host repaint requests."""

    def __init__(
        self,
        flag: RepaintFlag,
        host: RenderHost,
        poll_interval: float = 0.1,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """Initialize ticker.

        Args:
            flag: Flag raised by producers
            host: Render host to wake
            poll_interval: Seconds between flag checks (worst-case latency)
            stop_event: Optional signal that ends the loop
        """
        self.flag = flag
        self.host = host
        self.poll_interval = poll_interval
        self.stop_event = stop_event or threading.Event()
        self.thread: Optional[threading.Thread] = None

    def tick(self) -> bool:
        """Run one ticker cycle.

        Returns:
            True if a repaint was requested
        """
        if self.flag.test_and_clear():
            self.host.request_repaint()
            return True
        return False

    def run(self) -> None:
        logger.info(f"Repaint ticker started (interval {self.poll_interval * 1000:.0f}ms)")
        while not self.stop_event.is_set():
            self.tick()
            self.stop_event.wait(self.poll_interval)
        logger.info("Repaint ticker stopped")

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, daemon=True, name="repaint-ticker")
        self.thread.start()
        return self.thread
