import logging
import subprocess
from typing import Sequence

from boltpm.outcomes import CompilerFailure, ExitOutcome, LaunchFailure, Success

logger = logging.getLogger(__name__)


def run(executable: str, arguments: Sequence[str]) -> ExitOutcome:
    """Run a program to completion and classify its exit status.

    The program is started from an argument vector, without a shell, and
    inherits this process's standard streams. There is no timeout.

    Args:
        executable: Program name, looked up on PATH, or a path to it
        arguments: Arguments passed to the program unchanged

    Returns:
        Success for exit status 0, CompilerFailure for any other status, or
        LaunchFailure if the program could not be started
    """
    argv = [executable, *arguments]
    logger.debug(f"Running {argv}")
    try:
        completed = subprocess.run(argv, check=False)
    except FileNotFoundError:
        logger.debug(f"{executable} not found")
        return LaunchFailure(executable, "command not found")
    except OSError as e:
        logger.debug(f"Failed to start {executable}: {e}")
        return LaunchFailure(executable, e.strerror or str(e))

    logger.info(f"{executable} exited with status {completed.returncode}")
    if completed.returncode == 0:
        return Success()
    return CompilerFailure(executable, completed.returncode)
