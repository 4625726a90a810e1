"""Status bar trigger for encoder mode changes.

Fires ``sketchybar --trigger encoder_mode INDEX=<n> MODE=<m>`` so a bar
item can show which mode each encoder is in. Fire-and-forget: the
output is only logged.
"""

import logging
from typing import Optional, Sequence

from config import COMMAND_TIMEOUT, ENCODER_EVENT, STATUS_BAR_COMMAND
from integrations.shell import run_command

logger = logging.getLogger(__name__)


class StatusBar:
    def __init__(self, command: Optional[Sequence[str]] = None,
                 event: str = ENCODER_EVENT, timeout: float = COMMAND_TIMEOUT):
        self.command = list(command or STATUS_BAR_COMMAND)
        self.event = event
        self.timeout = timeout

    def trigger(self, index: int, mode: int) -> str:
        args = self.command + [self.event, f"INDEX={index}", f"MODE={mode}"]
        output = run_command(args, self.timeout)
        logger.debug("status bar %s: %r", self.event, output)
        return output
