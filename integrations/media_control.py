"""Now-playing query via the ``media-control`` CLI (macOS).

``media-control get`` prints either ``null`` (nothing playing) or a
JSON object such as:

    {"artist": "Boards of Canada", "title": "Roygbiv",
     "bundleIdentifier": "com.spotify.client", "playing": true, ...}

Extra keys are ignored.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from config import COMMAND_TIMEOUT, MEDIA_COMMAND
from core.errors import MediaQueryError
from integrations.shell import run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NowPlaying:
    artist: str
    title: str
    bundle_identifier: str = ""
    playing: bool = False


def _text_field(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MediaQueryError(f"'{key}' is not a string: {value!r}")
    return value


def parse_now_playing(raw: str) -> Optional[NowPlaying]:
    """Parse media-control output. None means nothing is playing."""
    text = raw.strip()
    if not text or text == "null":
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MediaQueryError(f"invalid JSON from media query: {exc}")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise MediaQueryError(f"expected a JSON object, got {type(data).__name__}")

    return NowPlaying(
        artist=_text_field(data, "artist"),
        title=_text_field(data, "title"),
        bundle_identifier=_text_field(data, "bundleIdentifier"),
        playing=bool(data.get("playing", False)),
    )


class MediaControl:
    """Callable media query: ``MediaControl()() -> Optional[NowPlaying]``."""

    def __init__(self, command: Optional[Sequence[str]] = None,
                 timeout: float = COMMAND_TIMEOUT):
        self.command = list(command or MEDIA_COMMAND)
        self.timeout = timeout

    def __call__(self) -> Optional[NowPlaying]:
        return parse_now_playing(run_command(self.command, self.timeout))
