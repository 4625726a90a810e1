#!/usr/bin/env python3
"""Packet Monitor - Watch what the companion would send to the keyboard.

Default mode:
    python3 tools/packet_monitor.py
    Starts the configured providers and prints every outbound packet:
      cyan   = date
      green  = media strings
      yellow = system readings

Encoder mode:
    python3 tools/packet_monitor.py --encoder 1 2
    Publishes [EncoderMode, 1, 2] on the inbound bus, as if the device
    had sent it, so the encoder consumer fires once.
"""

import os
import sys
import time

# Allow imports from project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.companion import Companion, load_config
from core.packet import NUMERIC_TAGS, STRING_TAGS, Tag, describe, encode_encoder_event, tag_of

# ---------------------------------------------------------------------------
# ANSI colors
# ---------------------------------------------------------------------------
GREEN = "\033[92m"
YELLOW = "\033[93m"
GRAY = "\033[90m"
CYAN = "\033[96m"
BOLD = "\033[1m"
RESET = "\033[0m"


def _color(packet):
    tag = tag_of(packet)
    if tag == Tag.DATE:
        return CYAN
    if tag in STRING_TAGS:
        return GREEN
    if tag in NUMERIC_TAGS:
        return YELLOW
    return GRAY


def _config_path():
    if "--config" in sys.argv:
        return sys.argv[sys.argv.index("--config") + 1]
    return "companion.yaml"


def monitor_mode():
    """Run the providers and print the outbound stream."""
    companion = Companion(load_config(_config_path()))
    sub = companion.outbound.subscribe()

    print(f"\n{BOLD}Outbound packets{RESET} - {len(companion.providers)} providers")
    print("Press Ctrl+C to stop.\n")
    print(f"{'Time':>12}  {'Hex':<24}  {'Decoded'}")
    print("-" * 60)

    companion.start()
    try:
        while True:
            packet = sub.receive(timeout=0.5)
            if packet is None:
                continue
            ts = time.strftime("%H:%M:%S") + f".{int(time.time()*1000)%1000:03d}"
            hex_text = packet.hex(" ")
            if len(hex_text) > 24:
                hex_text = hex_text[:21] + "..."
            print(f"  {ts}  {hex_text:<24}  {_color(packet)}{describe(packet)}{RESET}")
    except KeyboardInterrupt:
        print(f"\n{BOLD}Stopped.{RESET}")
    finally:
        sub.close()
        companion.stop()
        companion.join()


def encoder_mode(index, mode):
    """Inject one encoder event and give the consumer time to react."""
    config = load_config(_config_path())
    config["providers"] = []
    companion = Companion(config)
    companion.start()
    try:
        packet = encode_encoder_event(index, mode)
        reached = companion.inbound.publish(packet)
        print(f"{BOLD}Sent{RESET} {describe(packet)} to {reached} consumer(s)")
        time.sleep(0.5)
    finally:
        companion.stop()
        companion.join()


if __name__ == "__main__":
    if "--encoder" in sys.argv:
        pos = sys.argv.index("--encoder")
        encoder_mode(int(sys.argv[pos + 1]), int(sys.argv[pos + 2]))
    else:
        monitor_mode()
