"""Exception types shared across the companion.

Workers catch these at the edge of a poll iteration and log them;
nothing here is allowed to take the process down.
"""


class CompanionError(Exception):
    """Base class for all companion errors."""


class PacketError(CompanionError, ValueError):
    """A packet could not be built or decoded."""


class ConfigError(CompanionError):
    """The companion configuration is unreadable or invalid."""


class CollaboratorError(CompanionError):
    """An external command or query failed."""


class CommandError(CollaboratorError):
    """An external process was missing, timed out or exited non-zero."""

    def __init__(self, args, message: str, returncode=None):
        self.command = list(args)
        self.returncode = returncode
        super().__init__(f"{' '.join(self.command)}: {message}")


class MediaQueryError(CollaboratorError):
    """The media query returned output that is not a media object."""
