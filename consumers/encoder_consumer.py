"""Encoder consumer -- mirrors encoder mode changes in the status bar.

The device sends [EncoderMode, index, mode] whenever an encoder switches
mode; each one fires the status bar trigger with INDEX and MODE.

Config example:
    consumers:
      - id: "encoder"
        type: "encoder"
        interval: 0.1
        command: ["sketchybar", "--trigger"]
        event: "encoder_mode"
"""

import logging
from typing import Callable, Dict, Optional

from config import COMMAND_TIMEOUT, ENCODER_EVENT, ENCODER_INTERVAL, STATUS_BAR_COMMAND
from core.consumer import Consumer
from core.packet import Tag, decode_encoder_event
from core.registry import register_consumer
from integrations.sketchybar import StatusBar

logger = logging.getLogger(__name__)


@register_consumer("encoder")
class EncoderConsumer(Consumer):
    tags = frozenset({Tag.ENCODER_MODE})

    def __init__(self, consumer_id: str, bus, config: Dict,
                 trigger: Optional[Callable[[int, int], object]] = None):
        config.setdefault("interval", ENCODER_INTERVAL)
        super().__init__(consumer_id, bus, config)
        if trigger is None:
            trigger = StatusBar(
                command=config.get("command", STATUS_BAR_COMMAND),
                event=config.get("event", ENCODER_EVENT),
                timeout=config.get("timeout", COMMAND_TIMEOUT),
            ).trigger
        self._trigger = trigger

    def handle(self, packet: bytes):
        event = decode_encoder_event(packet)
        logger.info("Encoder %d -> mode %d", event.index, event.mode)
        self._trigger(event.index, event.mode)
