"""Subprocess helper with a hard timeout.

Every external command runs with a timeout so a hung tool can never
keep a worker thread from noticing stop().
"""

import logging
import subprocess
from typing import Sequence

from config import COMMAND_TIMEOUT
from core.errors import CommandError

logger = logging.getLogger(__name__)


def run_command(args: Sequence[str], timeout: float = COMMAND_TIMEOUT) -> str:
    """Run a command and return its stdout.

    Raises:
        CommandError: the executable is missing, timed out, or exited non-zero.
    """
    args = list(args)
    logger.debug("exec: %s", " ".join(args))
    try:
        result = subprocess.run(
            args, capture_output=True, text=True, timeout=timeout,
        )
    except FileNotFoundError:
        raise CommandError(args, "command not found")
    except subprocess.TimeoutExpired:
        raise CommandError(args, f"timed out after {timeout:.1f}s")
    except OSError as exc:
        raise CommandError(args, str(exc))

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise CommandError(
            args, f"exit status {result.returncode}: {stderr}", result.returncode,
        )
    return result.stdout
