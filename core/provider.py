"""Provider abstraction.

A Provider samples some piece of host state in its worker thread and
publishes packets to the outbound (host -> device) bus. The device
doesn't care where the data comes from -- it just reads tags.
"""

import logging
import threading
from abc import abstractmethod
from typing import Dict, Iterable, Optional

from config import PACKET_DELAY
from core.bus import PacketBus
from core.errors import CollaboratorError
from core.worker import Worker

logger = logging.getLogger(__name__)


class Provider(Worker):
    """Base class for host-side data providers.

    Subclasses implement poll(), which runs once per interval in the
    background thread. A failed poll is logged and the next one runs on
    schedule; cached values survive the failure.
    """

    kind = "provider"

    def __init__(self, provider_id: str, bus: PacketBus, config: Dict):
        super().__init__(provider_id, config)
        self.bus = bus
        self.packet_delay = float(config.get("packet_delay", PACKET_DELAY))

    def _work(self, stop: threading.Event):
        self.reset()
        while not stop.is_set():
            try:
                self.poll(stop)
            except CollaboratorError as exc:
                logger.warning("Provider %s sample failed: %s", self.worker_id, exc)
            except Exception:
                logger.exception("Provider %s poll error", self.worker_id)
            self.wait(stop, self.interval)

    def reset(self):
        """Forget cached samples. Runs at the start of every activation."""

    @abstractmethod
    def poll(self, stop: threading.Event):
        """Sample once and publish whatever should reach the device."""
        ...

    def publish(self, packet: bytes, stop: Optional[threading.Event] = None) -> bool:
        """Publish unless the activation was stopped. True if published."""
        if stop is not None and stop.is_set():
            return False
        self.bus.publish(packet)
        return True

    def publish_all(self, packets: Iterable[bytes], stop: threading.Event) -> int:
        """Publish packets one by one with packet_delay between them.

        Stops early if the activation is stopped. Returns how many went out.
        """
        sent = 0
        for packet in packets:
            if sent and not self.wait(stop, self.packet_delay):
                break
            if not self.publish(packet, stop):
                break
            sent += 1
        return sent
