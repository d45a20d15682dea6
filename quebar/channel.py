"""Single-producer/single-consumer channel between a background thread and the render loop."""

import logging
import queue
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """Unbounded FIFO with a fire-and-forget publish side.

    Publishing never blocks and never raises, even after the consumer has
    closed the channel. Receiving never blocks either.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._queue: "queue.SimpleQueue[T]" = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, value: T) -> bool:
        """Send a value to the consumer.

        Returns:
            False if the consumer is gone and the value was dropped
        """
        if self._closed:
            logger.debug(f"Channel {self.name} closed, dropping value")
            return False
        self._queue.put(value)
        return True

    def drain_latest(self) -> Optional[T]:
        """Take everything queued and return only the newest value.

        Returns:
            Newest value, or None if nothing was published since the last drain
        """
        latest = None
        while True:
            try:
                latest = self._queue.get_nowait()
            except queue.Empty:
                return latest

    def close(self) -> None:
        """Consumer teardown: further publishes are dropped."""
        self._closed = True
        self.drain_latest()
