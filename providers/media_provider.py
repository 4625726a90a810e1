"""Now-playing media provider.

Asks the media collaborator what is playing once a second and sends
artist and title as two separate string packets. Each is only sent
when it differs from what the device last received. When nothing is
playing the device shows "No Artist" / "No Title".

A failed query (tool missing, timeout, bad JSON) is logged and the
device keeps showing the previous values.

Config example:
    providers:
      - id: "media"
        type: "media"
        interval: 1.0
        command: ["media-control", "get"]
        timeout: 5
"""

import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from config import COMMAND_TIMEOUT, MEDIA_COMMAND, MEDIA_INTERVAL, NO_ARTIST, NO_TITLE
from core.packet import Tag, encode_string
from core.provider import Provider
from core.registry import register_provider
from integrations.media_control import MediaControl, NowPlaying

logger = logging.getLogger(__name__)


@register_provider("media")
class MediaProvider(Provider):
    """Publishes MediaArtist / MediaTitle on change."""

    def __init__(self, provider_id: str, bus, config: Dict,
                 query: Optional[Callable[[], Optional[NowPlaying]]] = None):
        config.setdefault("interval", MEDIA_INTERVAL)
        super().__init__(provider_id, bus, config)
        self._query = query or MediaControl(
            command=config.get("command", MEDIA_COMMAND),
            timeout=config.get("timeout", COMMAND_TIMEOUT),
        )
        self._artist = ""
        self._title = ""

    def reset(self):
        self._artist = ""
        self._title = ""

    def sample(self) -> Tuple[str, str]:
        """Current (artist, title), with placeholders when idle."""
        playing = self._query()
        if playing is None:
            return NO_ARTIST, NO_TITLE
        return playing.artist, playing.title

    def poll(self, stop: threading.Event):
        artist, title = self.sample()

        sent = False
        if artist != self._artist:
            if not self.publish(encode_string(Tag.MEDIA_ARTIST, artist), stop):
                return
            logger.debug("Media provider: artist %r", artist)
            self._artist = artist
            sent = True

        if title != self._title:
            if sent and not self.wait(stop, self.packet_delay):
                return
            if not self.publish(encode_string(Tag.MEDIA_TITLE, title), stop):
                return
            logger.debug("Media provider: title %r", title)
            self._title = title
