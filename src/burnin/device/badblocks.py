"""Wrapper around the destructive ``badblocks`` surface scan."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

from ..logger import get_logger
from .commands import CommandResult, DeviceFault, run_command

logger = get_logger(__name__)

Runner = Callable[..., CommandResult]


def count_bad_blocks(path: Path) -> int:
    """Return the number of block numbers recorded in a badblocks output file."""

    if not path.exists():
        return 0
    with path.open(encoding="utf-8") as handle:
        return sum(1 for line in handle if line.strip())


class Badblocks:
    """Run ``badblocks`` in destructive write mode against one device.

    The scan overwrites every block on the device. It is only ever invoked
    through the live command executor.
    """

    def __init__(
        self,
        device: str,
        executable: str = "badblocks",
        block_size: int = 4096,
        max_errors: int = 1,
        runner: Runner = run_command,
    ) -> None:
        self.device = device
        self.executable = executable
        self.block_size = block_size
        self.max_errors = max_errors
        self._runner = runner

    def arguments(self, output_path: Path) -> list[str]:
        return [
            self.executable,
            "-b",
            str(self.block_size),
            "-wsv",
            "-e",
            str(self.max_errors),
            "-o",
            str(output_path),
            self.device,
        ]

    def command_line(self, output_path: Path) -> str:
        return " ".join(self.arguments(output_path))

    def scan(self, output_path: Path) -> CommandResult:
        """Run the scan to completion, streaming progress to the terminal."""

        if not os.path.exists(self.device):
            logger.error("Device %s disappeared before the surface scan", self.device)
            raise DeviceFault(f"Device {self.device} is not present")
        logger.warning("Starting destructive badblocks scan on %s", self.device)
        result = self._runner(self.arguments(output_path), capture=False)
        logger.info("badblocks on %s exited with status %s", self.device, result.returncode)
        return result


__all__ = ["Badblocks", "count_bad_blocks"]
