"""Date provider -- keeps the device calendar in sync.

Samples the local day/month every 100ms but only publishes when the
pair changes, so the link isn't flooded with identical dates.

Config example:
    providers:
      - id: "date"
        type: "date"
        interval: 0.1
"""

import logging
import threading
from datetime import date
from typing import Callable, Dict, Optional, Tuple

from config import DATE_INTERVAL
from core.packet import encode_date
from core.provider import Provider
from core.registry import register_provider

logger = logging.getLogger(__name__)


@register_provider("date")
class DateProvider(Provider):
    """Publishes [Date, day, month] whenever the local date rolls over."""

    def __init__(self, provider_id: str, bus, config: Dict,
                 today: Optional[Callable[[], date]] = None):
        config.setdefault("interval", DATE_INTERVAL)
        super().__init__(provider_id, bus, config)
        self._today = today or date.today
        self._synced: Optional[Tuple[int, int]] = None

    def reset(self):
        self._synced = None

    def poll(self, stop: threading.Event):
        current = self._today()
        pair = (current.day, current.month)
        if pair == self._synced:
            return
        if self.publish(encode_date(current), stop):
            logger.debug("Date provider: %02d/%02d", current.day, current.month)
            self._synced = pair
