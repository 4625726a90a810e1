"""System monitoring provider -- CPU, RAM, network.

Every cycle publishes four single-byte readings, unconditionally and in
this order, 50ms apart:

    CPUUsage   average of per-core utilisation, %
    RAMUsage   used / total, %
    NetworkRX  MiB received since the previous cycle, all interfaces
    NetworkTX  MiB sent since the previous cycle, all interfaces

Config example:
    providers:
      - id: "system"
        type: "system"
        interval: 1.0
"""

import logging
import threading
from typing import Dict, List, Optional

from config import SYSTEM_INTERVAL
from core.errors import CollaboratorError
from core.packet import Tag, encode_numeric
from core.provider import Provider
from core.registry import register_provider
from integrations.metrics import SystemMetrics

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@register_provider("system")
class SystemProvider(Provider):
    """Publishes CPU, RAM and network usage every interval."""

    def __init__(self, provider_id: str, bus, config: Dict,
                 metrics: Optional[SystemMetrics] = None):
        config.setdefault("interval", SYSTEM_INTERVAL)
        super().__init__(provider_id, bus, config)
        self._metrics = metrics or SystemMetrics()

    def reset(self):
        # Bytes moved while stopped belong to no cycle
        try:
            self._metrics.resync()
        except CollaboratorError as exc:
            logger.warning("System provider: resync failed: %s", exc)

    def sample(self) -> List[bytes]:
        cpus = self._metrics.cpu_percents()
        cpu = sum(cpus) / len(cpus) if cpus else 0.0

        used, total = self._metrics.memory()
        ram = (used / total) * 100 if total > 0 else 0.0

        nics = self._metrics.network()
        rx = sum(r for r, _ in nics.values())
        tx = sum(t for _, t in nics.values())

        logger.debug("System provider: cpu=%.1f%% ram=%.1f%% rx=%dB tx=%dB",
                     cpu, ram, rx, tx)
        return [
            encode_numeric(Tag.CPU_USAGE, cpu),
            encode_numeric(Tag.RAM_USAGE, ram),
            encode_numeric(Tag.NETWORK_RX, rx // MIB),
            encode_numeric(Tag.NETWORK_TX, tx // MIB),
        ]

    def poll(self, stop: threading.Event):
        self.publish_all(self.sample(), stop)
