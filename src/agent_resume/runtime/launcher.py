"""Launch a built resume command as a child process."""

from __future__ import annotations

import logging
import subprocess

from ..resume.command import ResumeCommand

logger = logging.getLogger(__name__)


def run_resume_command(command: ResumeCommand) -> int:
    """Run the tool with inherited stdio and wait for it to exit.

    The argument vector is executed directly, never through a shell.

    Args:
        command (ResumeCommand): Command returned by ``build_resume_command``.

    Returns:
        int: Exit status of the tool.

    Raises:
        ValueError: If the command has no arguments.
        FileNotFoundError: If the tool binary or working directory does not exist.
    """
    if not command.args:
        raise ValueError("no command arguments provided")
    cwd = command.working_dir or None
    logger.info("Launching %s in %s", command.args[0], cwd or ".")
    completed = subprocess.run(command.args, cwd=cwd, check=False)
    if completed.returncode != 0:
        logger.warning("%s exited with status %d", command.args[0], completed.returncode)
    return completed.returncode
