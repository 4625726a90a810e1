#!/usr/bin/env python3
"""Macropad Companion - Entry point.

Starts every configured provider and consumer and runs until
interrupted.

Usage:
    python3 main.py                      # Use companion.yaml
    python3 main.py --config my.yaml     # Another config file
    python3 main.py --list               # Show available worker types
    python3 main.py --log-level DEBUG    # Log every packet

The device transport (USB/serial relay) attaches to the companion's
outbound and inbound buses; see tools/packet_monitor.py for a stand-in
that prints outbound traffic.
"""

__version__ = "0.3.0"

import argparse
import logging
import signal
import sys
import threading

from config import LOG_DATE_FORMAT, LOG_FORMAT


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Macropad Companion - host-side data feed for the keyboard",
    )
    parser.add_argument(
        "--config", default="companion.yaml",
        help="Path to companion YAML config (default: companion.yaml)",
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List registered provider and consumer types and exit",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"Macropad Companion {__version__}",
    )
    return parser.parse_args(argv)


def setup_logging(level_name: str) -> None:
    """Configure root logger with a consistent format."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    logger = logging.getLogger(__name__)

    from core.companion import Companion, load_config
    from core.errors import ConfigError
    from core.registry import worker_types

    if args.list:
        for role, names in worker_types().items():
            print(f"{role.capitalize()}: " + ", ".join(names))
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    logger.info("Macropad Companion v%s starting", __version__)
    companion = Companion(config)

    shutdown = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: shutdown.set())

    companion.start()
    try:
        while not shutdown.wait(0.5):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        companion.stop()
        companion.join()
        logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
