"""Consumer abstraction.

A Consumer subscribes to the inbound (device -> host) bus when started
and reacts to packets carrying one of its tags in its worker thread.
Packets with any other tag are ignored.
"""

import logging
import threading
from abc import abstractmethod
from typing import Dict, FrozenSet, Tuple

from core.bus import PacketBus, Subscription
from core.errors import CollaboratorError, PacketError
from core.packet import tag_of
from core.worker import Worker

logger = logging.getLogger(__name__)


class Consumer(Worker):
    """Base class for device event consumers.

    The subscription is opened in start(), before the thread exists, so
    nothing published right after start() returns is missed. interval is
    the receive timeout, i.e. how often the stop token is checked while
    the bus is quiet.
    """

    kind = "consumer"
    tags: FrozenSet[int] = frozenset()

    def __init__(self, consumer_id: str, bus: PacketBus, config: Dict):
        super().__init__(consumer_id, config)
        self.bus = bus

    def _prepare(self) -> Tuple[Subscription]:
        return (self.bus.subscribe(),)

    def _work(self, stop: threading.Event, subscription: Subscription):
        try:
            while not stop.is_set():
                packet = subscription.receive(timeout=self.interval)
                if packet is None or stop.is_set():
                    continue
                self.dispatch(packet)
        finally:
            subscription.close()

    def dispatch(self, packet: bytes) -> bool:
        """Filter by tag and run handle(). True if the packet was handled."""
        if tag_of(packet) not in self.tags:
            return False
        logger.debug("Consumer %s got %s", self.worker_id, packet.hex())
        try:
            self.handle(packet)
        except PacketError as exc:
            logger.warning("Consumer %s: bad packet: %s", self.worker_id, exc)
            return False
        except CollaboratorError as exc:
            logger.warning("Consumer %s: %s", self.worker_id, exc)
            return False
        except Exception:
            logger.exception("Consumer %s handler error", self.worker_id)
            return False
        return True

    @abstractmethod
    def handle(self, packet: bytes):
        """React to one packet whose tag is in self.tags."""
        ...
