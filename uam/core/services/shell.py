"""
Shell runner — the single place where task commands hit ``subprocess``.

Commands are literal strings from the task document, run through the
platform shell and attached to the terminal: no output capture, no
timeout (an installer waiting for input blocks until it is answered).
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable

logger = logging.getLogger(__name__)

# command → exit code
CommandRunner = Callable[[str], int]

# Exit code reported when the shell itself cannot be started
SHELL_UNAVAILABLE = 127


def run_shell(command: str) -> int:
    """Run ``command`` through the shell and return its exit code."""
    logger.info("Running: %s", command)
    try:
        result = subprocess.run(command, shell=True)
    except OSError as e:
        logger.error("Cannot start shell for %r: %s", command, e)
        return SHELL_UNAVAILABLE

    if result.returncode != 0:
        logger.warning("Command exited with %d: %s", result.returncode, command)
    return result.returncode
