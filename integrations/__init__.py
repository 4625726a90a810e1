"""External collaborators used by providers and consumers.

Everything that leaves the process -- shell commands, OS metrics --
goes through here, so workers can be tested with plain fakes.
"""

from integrations.media_control import MediaControl, NowPlaying, parse_now_playing
from integrations.metrics import SystemMetrics
from integrations.shell import run_command
from integrations.sketchybar import StatusBar

__all__ = [
    "MediaControl",
    "NowPlaying",
    "parse_now_playing",
    "SystemMetrics",
    "run_command",
    "StatusBar",
]
