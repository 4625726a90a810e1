"""Core framework for the macropad companion.

Provides the building blocks for exchanging tagged packets with the
keyboard firmware and for adding any provider (host state) or consumer
(device events).

Architecture:
    packet    -- Tag space and byte encoding shared with the firmware
    PacketBus -- thread-safe broadcast bus, one queue per subscriber
    Worker    -- start/stop lifecycle around one background thread
    Provider  -- samples host state and publishes to the outbound bus
    Consumer  -- subscribes to the inbound bus and reacts to its tags
    Registry  -- registers provider and consumer types by name

core.companion wires all of this together from companion.yaml.
"""

from core.bus import PacketBus, Subscription
from core.consumer import Consumer
from core.errors import CollaboratorError, CompanionError, ConfigError, PacketError
from core.packet import Tag
from core.provider import Provider
from core.registry import (
    CONSUMER_REGISTRY, PROVIDER_REGISTRY, register_consumer, register_provider, worker_types,
)
from core.worker import Worker

__all__ = [
    "PacketBus",
    "Subscription",
    "Consumer",
    "CollaboratorError",
    "CompanionError",
    "ConfigError",
    "PacketError",
    "Tag",
    "Provider",
    "Worker",
    "CONSUMER_REGISTRY",
    "PROVIDER_REGISTRY",
    "register_consumer",
    "register_provider",
    "worker_types",
]
