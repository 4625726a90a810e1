from __future__ import annotations

import logging
import threading
import time

import pytest

from core.bus import PacketBus
from core.errors import CollaboratorError
from core.provider import Provider
from core.worker import Worker


class CountingProvider(Provider):
    """Publishes [0xB0, n] every poll, n counting up per activation."""

    def __init__(self, bus: PacketBus, interval: float = 0.02) -> None:
        super().__init__("counter", bus, {"interval": interval, "packet_delay": 0})
        self.polls = 0
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1
        self.count = 0

    def poll(self, stop: threading.Event) -> None:
        self.polls += 1
        self.publish(bytes([0xB0, self.count % 256]), stop)
        self.count += 1


class BrokenResetProvider(Provider):
    """Raises before its first poll on the first activation only."""

    def __init__(self, bus: PacketBus) -> None:
        super().__init__("broken", bus, {"interval": 0.01})
        self.activations = 0
        self.polls = 0

    def reset(self) -> None:
        self.activations += 1
        if self.activations == 1:
            raise RuntimeError("cache unavailable")

    def poll(self, stop: threading.Event) -> None:
        self.polls += 1


class FlakyProvider(Provider):
    """Fails every other poll."""

    def __init__(self, bus: PacketBus, error: Exception) -> None:
        super().__init__("flaky", bus, {"interval": 0.01})
        self.error = error
        self.polls = 0

    def poll(self, stop: threading.Event) -> None:
        self.polls += 1
        if self.polls % 2:
            raise self.error
        self.publish(b"\xb1\x01", stop)


def test_worker_starts_stopped(bus: PacketBus) -> None:
    provider = CountingProvider(bus)
    assert not provider.is_running
    assert provider.join(0) is True


def test_start_publishes_and_stop_halts_within_one_interval(bus: PacketBus, drain, wait_for) -> None:
    provider = CountingProvider(bus)
    sub = bus.subscribe()

    provider.start()
    assert provider.is_running
    assert wait_for(lambda: sub.pending() >= 3)

    provider.stop()
    assert not provider.is_running
    assert provider.join(1.0)

    drain(sub)
    time.sleep(provider.interval * 3)
    assert drain(sub) == []


def test_start_is_idempotent(bus: PacketBus, wait_for) -> None:
    provider = CountingProvider(bus)
    provider.start()
    first_thread = provider._thread
    provider.start()

    assert provider._thread is first_thread
    assert sum(t.name == "provider-counter" for t in threading.enumerate()) == 1

    provider.stop()
    assert provider.join(1.0)


def test_restart_after_stop_resumes(bus: PacketBus, drain, wait_for) -> None:
    provider = CountingProvider(bus)
    sub = bus.subscribe()

    provider.start()
    assert wait_for(lambda: sub.pending() >= 1)
    provider.stop()
    assert provider.join(1.0)
    drain(sub)

    provider.start()
    assert wait_for(lambda: sub.pending() >= 2)
    provider.stop()
    assert provider.join(1.0)

    packets = drain(sub)
    # Cached state is reset per activation, so counting restarts at zero
    assert packets[0] == bytes([0xB0, 0])
    assert provider.resets == 2


def test_quick_restart_does_not_leave_two_workers(bus: PacketBus, wait_for) -> None:
    provider = CountingProvider(bus, interval=0.5)
    provider.start()
    old_thread = provider._thread
    provider.stop()
    provider.start()

    assert provider._thread is not old_thread
    old_thread.join(2.0)
    assert not old_thread.is_alive()
    assert provider.is_running

    provider.stop()
    assert provider.join(2.0)


@pytest.mark.parametrize("error", [CollaboratorError("media-control missing"), RuntimeError("boom")])
def test_poll_failure_is_logged_and_loop_continues(
    bus: PacketBus, wait_for, caplog: pytest.LogCaptureFixture, error: Exception
) -> None:
    provider = FlakyProvider(bus, error)
    sub = bus.subscribe()

    with caplog.at_level(logging.WARNING):
        provider.start()
        assert wait_for(lambda: provider.polls >= 4)
        provider.stop()
        assert provider.join(1.0)

    assert sub.pending() >= 1
    assert any(str(error) in r.getMessage() or r.exc_info for r in caplog.records)


def test_wait_returns_early_on_stop() -> None:
    stop = threading.Event()
    threading.Timer(0.05, stop.set).start()

    started = time.monotonic()
    assert Worker.wait(stop, 5.0) is False
    assert time.monotonic() - started < 1.0


def test_wait_runs_full_duration_when_not_stopped() -> None:
    stop = threading.Event()
    started = time.monotonic()
    assert Worker.wait(stop, 0.05) is True
    assert time.monotonic() - started >= 0.05


def test_publish_all_spaces_packets_and_respects_stop(bus: PacketBus, drain) -> None:
    provider = CountingProvider(bus)
    provider.packet_delay = 0.02
    sub = bus.subscribe()
    stop = threading.Event()

    started = time.monotonic()
    assert provider.publish_all([b"\xb0\x01", b"\xb1\x02", b"\xb2\x03"], stop) == 3
    assert time.monotonic() - started >= 0.04
    assert drain(sub) == [b"\xb0\x01", b"\xb1\x02", b"\xb2\x03"]

    stop.set()
    assert provider.publish_all([b"\xb0\x01"], stop) == 0
    assert drain(sub) == []


def test_crashed_worker_reports_stopped_and_can_restart(
    bus: PacketBus, wait_for, caplog: pytest.LogCaptureFixture
) -> None:
    provider = BrokenResetProvider(bus)

    with caplog.at_level(logging.ERROR):
        provider.start()
        assert provider.join(1.0)

    assert not provider.is_running
    assert provider.polls == 0
    assert any("crashed" in r.getMessage() for r in caplog.records)

    provider.start()
    assert wait_for(lambda: provider.polls >= 1)
    provider.stop()
    assert provider.join(1.0)
