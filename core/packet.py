"""Wire packet format shared with the macropad firmware.

Every message on either bus is a packet: an immutable ``bytes`` object
whose first byte is a Tag and whose remaining bytes are the payload.

    Date        [tag, day, month]
    Numeric     [tag, value]                 value clamped to 0-255
    String      [tag, length, utf8 bytes...] at most 30 bytes
    Encoder     [tag, index, mode]           device -> host

Tag values must match the firmware. Host kinds start at 0xAA so they
never collide with VIA/VIAL command ids; relay kinds live at 0xCC.
"""

import math
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Optional

from core.errors import PacketError

MAX_STRING_BYTES = 30


class Tag(IntEnum):
    TIME = 0xAA
    VOLUME = 0xAB
    LAYOUT = 0xAC
    MEDIA_ARTIST = 0xAD
    MEDIA_TITLE = 0xAE
    DATE = 0xAF
    CPU_USAGE = 0xB0
    RAM_USAGE = 0xB1
    NETWORK_RX = 0xB2
    NETWORK_TX = 0xB3
    SPACE = 0xB4
    ENCODER_MODE = 0xB5

    RELAY_FROM_DEVICE = 0xCC
    RELAY_TO_DEVICE = 0xCD


NUMERIC_TAGS = frozenset({
    Tag.VOLUME, Tag.CPU_USAGE, Tag.RAM_USAGE,
    Tag.NETWORK_RX, Tag.NETWORK_TX, Tag.SPACE,
})
STRING_TAGS = frozenset({Tag.MEDIA_ARTIST, Tag.MEDIA_TITLE})


@dataclass(frozen=True)
class EncoderEvent:
    """Encoder mode change reported by the device."""
    index: int
    mode: int


def _byte(value: int, what: str) -> int:
    if not 0 <= value <= 0xFF:
        raise PacketError(f"{what} out of byte range: {value}")
    return value


def clamp_byte(value: float) -> int:
    """Round half-up and saturate to 0-255. NaN becomes 0."""
    if math.isnan(value):
        return 0
    value = max(0.0, min(255.0, float(value)))
    return int(math.floor(value + 0.5))


def encode_date(value: date) -> bytes:
    return bytes([Tag.DATE, value.day, value.month])


def encode_numeric(tag: Tag, value: float) -> bytes:
    """Encode a single numeric reading.

    The firmware only has room for one byte, so out-of-range readings
    saturate at 0 or 255 rather than wrapping.
    """
    return bytes([_byte(int(tag), "tag"), clamp_byte(value)])


def encode_string(tag: Tag, text: str) -> bytes:
    """Encode text as a length-prefixed UTF-8 payload of at most 30 bytes.

    Truncation is byte-wise; a multi-byte character cut at the boundary
    is left for the firmware to render as it sees fit.
    """
    raw = text.encode("utf-8")[:MAX_STRING_BYTES]
    return bytes([_byte(int(tag), "tag"), len(raw)]) + raw


def encode_encoder_event(index: int, mode: int) -> bytes:
    return bytes([
        Tag.ENCODER_MODE,
        _byte(index, "encoder index"),
        _byte(mode, "encoder mode"),
    ])


def tag_of(packet: bytes) -> Optional[int]:
    """First byte of the packet, or None for an empty packet."""
    return packet[0] if packet else None


def decode_encoder_event(packet: bytes) -> EncoderEvent:
    if tag_of(packet) != Tag.ENCODER_MODE:
        raise PacketError(f"not an encoder packet: {packet.hex()}")
    if len(packet) < 3:
        raise PacketError(f"short encoder packet: {packet.hex()}")
    return EncoderEvent(index=packet[1], mode=packet[2])


def describe(packet: bytes) -> str:
    """Readable one-line rendering of a packet for logs and tools."""
    tag = tag_of(packet)
    if tag is None:
        return "<empty>"
    try:
        name = Tag(tag).name
    except ValueError:
        return f"UNKNOWN(0x{tag:02X}) {packet[1:].hex()}"

    if tag == Tag.DATE and len(packet) >= 3:
        return f"{name} day={packet[1]} month={packet[2]}"
    if tag in NUMERIC_TAGS and len(packet) >= 2:
        return f"{name} {packet[1]}"
    if tag in STRING_TAGS and len(packet) >= 2:
        text = packet[2:2 + packet[1]].decode("utf-8", errors="replace")
        return f"{name} {text!r}"
    if tag == Tag.ENCODER_MODE and len(packet) >= 3:
        return f"{name} index={packet[1]} mode={packet[2]}"
    return f"{name} {packet[1:].hex()}"
