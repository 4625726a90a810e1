"""OS metrics sampler backed by psutil.

Returns raw per-core and per-interface numbers; averaging and summing
is left to the SystemProvider. Network counters are reported as bytes
moved since the previous call, so the first call after construction
or resync() covers only the time since then.
"""

import logging
from typing import Dict, List, Tuple

import psutil

from core.errors import CollaboratorError

logger = logging.getLogger(__name__)


class SystemMetrics:
    """Stateful sampler; keep one instance per SystemProvider."""

    def __init__(self):
        self._net_last: Dict[str, Tuple[int, int]] = {}
        self.resync()

    def resync(self):
        """Take fresh reference points for CPU and network deltas.

        The next network() call then only covers the time since now. If
        the counters can't be read, the baseline is left empty and every
        interface reports zero on the next call.
        """
        self._net_last = {}
        try:
            # First cpu_percent() call has no reference point and returns 0.0
            psutil.cpu_percent(percpu=True)
        except (psutil.Error, OSError) as exc:
            raise CollaboratorError(f"cpu usage unavailable: {exc}")
        self._net_last = self._read_counters()

    def cpu_percents(self) -> List[float]:
        """Utilisation per logical core since the previous call."""
        try:
            return list(psutil.cpu_percent(percpu=True))
        except (psutil.Error, OSError) as exc:
            raise CollaboratorError(f"cpu usage unavailable: {exc}")

    def memory(self) -> Tuple[int, int]:
        """(used, total) RAM in bytes. Used = total minus available."""
        try:
            vm = psutil.virtual_memory()
        except (psutil.Error, OSError) as exc:
            raise CollaboratorError(f"memory usage unavailable: {exc}")
        return vm.total - vm.available, vm.total

    def network(self) -> Dict[str, Tuple[int, int]]:
        """(rx, tx) bytes per interface since the previous call."""
        current = self._read_counters()
        deltas = {}
        for nic, (rx, tx) in current.items():
            last_rx, last_tx = self._net_last.get(nic, (rx, tx))
            # Counters restart when an interface is re-created
            d_rx = rx - last_rx if rx >= last_rx else rx
            d_tx = tx - last_tx if tx >= last_tx else tx
            deltas[nic] = (d_rx, d_tx)
        self._net_last = current
        return deltas

    @staticmethod
    def _read_counters() -> Dict[str, Tuple[int, int]]:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except (psutil.Error, OSError) as exc:
            raise CollaboratorError(f"network counters unavailable: {exc}")
        return {nic: (c.bytes_recv, c.bytes_sent) for nic, c in counters.items()}
