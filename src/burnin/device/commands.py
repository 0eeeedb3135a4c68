"""Subprocess helpers shared by the device tool wrappers."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Sequence

from ..logger import get_logger

logger = get_logger(__name__)


class DeviceFault(RuntimeError):
    """Raised when the device under test can no longer be reached."""


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and captured output of an external command."""

    args: tuple[str, ...]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


def run_command(args: Sequence[str], *, capture: bool = True) -> CommandResult:
    """Run ``args`` to completion and return its exit status.

    With ``capture`` the merged stdout/stderr is returned as text; otherwise
    the command writes straight to the terminal, which is what long scans with
    progress output need.
    """

    argv = tuple(str(arg) for arg in args)
    logger.debug("Running command: %s", " ".join(argv))
    try:
        if capture:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        else:
            completed = subprocess.run(argv, check=False)
    except FileNotFoundError as exc:
        logger.error("Executable not found: %s", argv[0])
        raise DeviceFault(f"Executable not found: {argv[0]}") from exc
    output = completed.stdout if capture and completed.stdout else ""
    logger.debug("Command %s exited with status %s", argv[0], completed.returncode)
    return CommandResult(args=argv, returncode=completed.returncode, output=output)


__all__ = ["CommandResult", "DeviceFault", "run_command"]
