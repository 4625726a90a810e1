from __future__ import annotations

import threading
import time
from collections.abc import Callable

import pytest

from core.bus import PacketBus, Subscription


@pytest.fixture
def bus() -> PacketBus:
    return PacketBus("test", queue_size=64)


@pytest.fixture
def stop() -> threading.Event:
    """An unset stop token, for calling poll() directly."""
    return threading.Event()


@pytest.fixture
def drain() -> Callable[[Subscription], list[bytes]]:
    """Return everything currently queued on a subscription."""

    def _drain(sub: Subscription) -> list[bytes]:
        packets = []
        while True:
            packet = sub.receive(timeout=0)
            if packet is None:
                return packets
            packets.append(packet)

    return _drain


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout runs out."""

    def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait_for
