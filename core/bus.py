"""Broadcast packet bus shared by providers, consumers and the device link.

Every subscriber gets its own bounded queue and sees every packet
published after it subscribed, in publish order. Publishers never block:
when a subscriber falls behind, its oldest queued packet is dropped to
make room for the new one.

Two instances live for the whole process -- host->device (outbound)
and device->host (inbound).
"""

import logging
import threading
from queue import Queue, Empty, Full
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 64


class Subscription:
    """Reader side of a PacketBus. Created by PacketBus.subscribe()."""

    def __init__(self, bus: "PacketBus", maxsize: int):
        self._bus = bus
        self._queue: Queue = Queue(maxsize=maxsize)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        return self._queue.qsize()

    def receive(self, timeout: Optional[float] = None) -> Optional[bytes]:
        """Block for the next packet. Returns None on timeout or when closed."""
        if self._closed:
            return None
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def close(self):
        """Detach from the bus. Queued packets are discarded."""
        if self._closed:
            return
        self._closed = True
        self._bus.unsubscribe(self)

    def _offer(self, packet: bytes) -> bool:
        """Queue a packet, evicting the oldest one if full. Bus lock held."""
        dropped = False
        while True:
            try:
                self._queue.put_nowait(packet)
                return dropped
            except Full:
                pass
            try:
                self._queue.get_nowait()
            except Empty:
                # reader got there first
                continue
            self.dropped += 1
            dropped = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class PacketBus:
    """Thread-safe multi-publisher, multi-subscriber broadcast of packets."""

    def __init__(self, name: str = "bus", queue_size: int = DEFAULT_QUEUE_SIZE):
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self.name = name
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._subscribers: List[Subscription] = []
        self.published_total = 0
        self.dropped_total = 0

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, packet: bytes) -> int:
        """Push a packet to every current subscriber. Thread-safe.

        Returns the number of subscribers that received it. With no
        subscribers the packet is simply dropped.
        """
        packet = bytes(packet)
        with self._lock:
            self.published_total += 1
            for sub in self._subscribers:
                if sub._offer(packet):
                    self.dropped_total += 1
                    logger.debug("%s: subscriber full, dropped oldest packet", self.name)
            delivered = len(self._subscribers)
        logger.debug("%s: published %s to %d subscriber(s)", self.name, packet.hex(), delivered)
        return delivered

    def subscribe(self) -> Subscription:
        """Open a reader that sees every packet published from now on."""
        sub = Subscription(self, self.queue_size)
        with self._lock:
            self._subscribers.append(sub)
        logger.debug("%s: subscriber added (%d total)", self.name, self.subscriber_count)
        return sub

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            try:
                self._subscribers.remove(subscription)
            except ValueError:
                return
        subscription._closed = True
        logger.debug("%s: subscriber removed", self.name)

    def receive(self, subscription: Subscription,
                timeout: Optional[float] = None) -> Optional[bytes]:
        """Blocking read on a subscription, with optional timeout."""
        return subscription.receive(timeout)
