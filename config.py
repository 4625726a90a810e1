"""Macropad Companion - Configuration defaults

Intervals are in seconds. Everything here can be overridden per worker
in companion.yaml; these values are used when a key is missing or the
file does not exist at all.

Firmware-side limits (must match the keyboard build):
  - one Bus message == one firmware frame
  - strings are capped at 30 bytes
  - numeric readings are a single byte
"""

# ---------------------------------------------------------------------------
# Polling cadence
# ---------------------------------------------------------------------------
DATE_INTERVAL = 0.1
MEDIA_INTERVAL = 1.0
SYSTEM_INTERVAL = 1.0
ENCODER_INTERVAL = 0.1      # receive timeout between stop checks

# Gap between consecutive packets from one provider, so a burst doesn't
# saturate the link to the device.
PACKET_DELAY = 0.05

# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------
BUS_QUEUE_SIZE = 64         # per subscriber; oldest packet dropped on overflow

# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------
COMMAND_TIMEOUT = 5.0

# https://github.com/ungive/media-control
MEDIA_COMMAND = ["media-control", "get"]
NO_ARTIST = "No Artist"
NO_TITLE = "No Title"

# https://felixkratz.github.io/SketchyBar/
STATUS_BAR_COMMAND = ["sketchybar", "--trigger"]
ENCODER_EVENT = "encoder_mode"

# ---------------------------------------------------------------------------
# Built-in worker set, used when companion.yaml is missing
# ---------------------------------------------------------------------------
DEFAULT_CONFIG = {
    "bus": {"queue_size": BUS_QUEUE_SIZE},
    "providers": [
        {"id": "date", "type": "date", "interval": DATE_INTERVAL},
        {"id": "media", "type": "media", "interval": MEDIA_INTERVAL},
        {"id": "system", "type": "system", "interval": SYSTEM_INTERVAL},
    ],
    "consumers": [
        {"id": "encoder", "type": "encoder", "interval": ENCODER_INTERVAL},
    ],
}

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s  %(levelname)-7s  %(name)s  %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
