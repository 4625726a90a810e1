import threading

import pytest

from core.bus import PacketBus


def test_publish_without_subscribers_is_dropped(bus: PacketBus) -> None:
    assert bus.publish(b"\xb0\x01") == 0
    assert bus.published_total == 1


def test_every_subscriber_gets_every_packet_in_order(bus: PacketBus, drain) -> None:
    first = bus.subscribe()
    second = bus.subscribe()

    for value in range(5):
        assert bus.publish(bytes([0xB0, value])) == 2

    expected = [bytes([0xB0, v]) for v in range(5)]
    assert drain(first) == expected
    assert drain(second) == expected


def test_subscriber_only_sees_packets_after_subscribing(bus: PacketBus, drain) -> None:
    bus.publish(b"\xb0\x01")
    late = bus.subscribe()
    bus.publish(b"\xb0\x02")

    assert drain(late) == [b"\xb0\x02"]


def test_full_subscriber_drops_oldest_without_blocking(drain) -> None:
    bus = PacketBus("small", queue_size=3)
    slow = bus.subscribe()
    fast = bus.subscribe()

    for value in range(5):
        bus.publish(bytes([0xB0, value]))
        assert fast.receive(timeout=0) == bytes([0xB0, value])

    assert drain(slow) == [bytes([0xB0, v]) for v in (2, 3, 4)]
    assert slow.dropped == 2
    assert fast.dropped == 0
    assert bus.dropped_total == 2


def test_receive_times_out(bus: PacketBus) -> None:
    sub = bus.subscribe()
    assert bus.receive(sub, timeout=0.05) is None


def test_receive_wakes_on_publish(bus: PacketBus) -> None:
    sub = bus.subscribe()
    timer = threading.Timer(0.05, bus.publish, args=(b"\xaf\x01\x02",))
    timer.start()
    try:
        assert sub.receive(timeout=2.0) == b"\xaf\x01\x02"
    finally:
        timer.cancel()


def test_closed_subscription_stops_receiving(bus: PacketBus) -> None:
    sub = bus.subscribe()
    assert bus.subscriber_count == 1

    sub.close()

    assert sub.closed
    assert bus.subscriber_count == 0
    assert bus.publish(b"\xb0\x01") == 0
    assert sub.receive(timeout=0) is None


def test_subscription_context_manager(bus: PacketBus) -> None:
    with bus.subscribe() as sub:
        bus.publish(b"\xb1\x07")
        assert sub.receive(timeout=0) == b"\xb1\x07"
    assert bus.subscriber_count == 0


def test_concurrent_publishers_keep_per_publisher_order(drain) -> None:
    bus = PacketBus("shared", queue_size=1000)
    sub = bus.subscribe()

    def publisher(tag: int) -> None:
        for value in range(100):
            bus.publish(bytes([tag, value]))

    threads = [threading.Thread(target=publisher, args=(tag,)) for tag in (0xB0, 0xB1, 0xB2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    packets = drain(sub)
    assert len(packets) == 300
    for tag in (0xB0, 0xB1, 0xB2):
        assert [p[1] for p in packets if p[0] == tag] == list(range(100))


def test_queue_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PacketBus("bad", queue_size=0)
