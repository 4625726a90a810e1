"""Companion host -- owns both buses and every configured worker.

Loads provider and consumer configuration from companion.yaml,
instantiates registered types, and drives start-all / stop-all.

Config layout:
    bus:
      queue_size: 64
    providers:
      - id: "date"
        type: "date"
      - id: "media"
        type: "media"
        enabled: false
    consumers:
      - id: "encoder"
        type: "encoder"

The device transport is not part of the companion: it subscribes to
``outbound`` and publishes device frames onto ``inbound``.
"""

import copy
import logging
import time
from typing import Dict, List, Optional

import yaml

from config import BUS_QUEUE_SIZE, DEFAULT_CONFIG
from core.bus import PacketBus
from core.consumer import Consumer
from core.errors import ConfigError
from core.provider import Provider
from core.registry import CONSUMER_REGISTRY, PROVIDER_REGISTRY
from core.worker import Worker

# Import provider and consumer packages to trigger registration
import consumers  # noqa: F401
import providers  # noqa: F401

logger = logging.getLogger(__name__)


def load_config(path: str) -> Dict:
    """Load companion config from a YAML file.

    A missing file falls back to the built-in configuration.

    Raises:
        ConfigError: the file is unreadable, not YAML, or not a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Config file not found: %s -- using built-in configuration", path)
        return get_builtin_config()
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}")
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}")

    if data is None:
        logger.warning("Config file %s is empty -- using built-in configuration", path)
        return get_builtin_config()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    for section in ("providers", "consumers"):
        if not isinstance(data.get(section, []), list):
            raise ConfigError(f"{path}: '{section}' must be a list")
    return data


def get_builtin_config() -> Dict:
    """Return a fresh copy of the built-in worker set."""
    return copy.deepcopy(DEFAULT_CONFIG)


class Companion:
    """Process-level owner of the two buses and all workers."""

    def __init__(self, config: Optional[Dict] = None):
        self._config = config if config is not None else get_builtin_config()
        queue_size = int(self._config.get("bus", {}).get("queue_size", BUS_QUEUE_SIZE))

        self.outbound = PacketBus("host->device", queue_size)
        self.inbound = PacketBus("device->host", queue_size)

        self.providers: Dict[str, Provider] = {}
        self.consumers: Dict[str, Consumer] = {}
        self._build("providers", PROVIDER_REGISTRY, self.outbound, self.providers)
        self._build("consumers", CONSUMER_REGISTRY, self.inbound, self.consumers)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build(self, section: str, registry: Dict, bus: PacketBus, into: Dict):
        for entry in self._config.get(section, []) or []:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed %s entry: %r", section, entry)
                continue
            worker_type = entry.get("type", "")
            worker_id = entry.get("id") or worker_type

            if not entry.get("enabled", True):
                logger.info("Skipping disabled %s: %s", section[:-1], worker_id)
                continue

            cls = registry.get(worker_type)
            if not cls:
                logger.warning("Unknown %s type: %s", section[:-1], worker_type)
                continue

            if worker_id in into:
                logger.warning("Duplicate %s id: %s", section[:-1], worker_id)
                continue

            try:
                into[worker_id] = cls(worker_id, bus, dict(entry))
            except Exception as exc:
                logger.error("Failed to create %s %s: %s", section[:-1], worker_id, exc)

    @property
    def workers(self) -> List[Worker]:
        # Consumers first, so their subscriptions exist before providers publish
        return list(self.consumers.values()) + list(self.providers.values())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        """Start every worker. One failing to start doesn't block the rest."""
        for worker in self.workers:
            try:
                worker.start()
            except Exception as exc:
                logger.error("Failed to start %s: %s", worker.worker_id, exc)
        logger.info("Companion: %d providers, %d consumers started",
                    len(self.providers), len(self.consumers))

    def stop(self):
        """Signal every worker to stop. Returns without waiting."""
        for worker in self.workers:
            worker.stop()

    def join(self, timeout: float = 2.0) -> bool:
        """Wait up to timeout seconds in total for every worker thread to exit."""
        deadline = time.monotonic() + timeout
        all_done = True
        for worker in self.workers:
            remaining = max(0.0, deadline - time.monotonic())
            if not worker.join(remaining):
                logger.warning("%s %s did not stop in time", worker.kind, worker.worker_id)
                all_done = False
        return all_done

    @property
    def is_running(self) -> bool:
        return any(w.is_running for w in self.workers)
