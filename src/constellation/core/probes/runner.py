"""
Bounded subprocess execution shared by the probes.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


def run_command(args: list[str], timeout: float) -> str | None:
    """
    Run a command and return its stdout.

    Args:
        args: Command and arguments (no shell)
        timeout: Seconds before the process is killed

    Returns:
        Captured stdout, or None on timeout, missing binary or non-zero exit
    """
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Timed out after %.1fs running %s", timeout, args[0])
        return None
    except OSError as e:
        logger.warning("Failed to run %s: %s", args[0], e)
        return None

    if result.returncode != 0:
        logger.warning(
            "%s exited with %d: %s", args[0], result.returncode, result.stderr.strip()[:200]
        )
        return None

    return result.stdout
