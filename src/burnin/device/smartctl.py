"""Wrapper around the smartmontools ``smartctl`` command."""

from __future__ import annotations

import re
from typing import Callable, Sequence

from ..logger import get_logger
from .commands import CommandResult, DeviceFault, run_command
from .status import PollStatus

logger = get_logger(__name__)

# smartctl exit status is a bit mask; see smartctl(8), "RETURN VALUES".
EXIT_COMMAND_LINE_ERROR = 1 << 0
EXIT_DEVICE_OPEN_FAILED = 1 << 1
EXIT_SMART_COMMAND_FAILED = 1 << 2
COMMAND_FAILURE_MASK = EXIT_COMMAND_LINE_ERROR | EXIT_DEVICE_OPEN_FAILED | EXIT_SMART_COMMAND_FAILED

SELFTEST_SUCCEEDED_PATTERN = re.compile(r"The previous self-test routine completed", re.IGNORECASE)
SELFTEST_FAILED_PATTERN = re.compile(r"of the test failed\.", re.IGNORECASE)

SELFTEST_ARGUMENTS = {
    "short": "short",
    "extended": "long",
}

Runner = Callable[[Sequence[str]], CommandResult]


def selftest_status(text: str) -> PollStatus:
    """Classify ``smartctl --all`` output into a self-test status.

    The success pattern is checked before the failure pattern, so output
    matching both is reported as succeeded.
    """

    if SELFTEST_SUCCEEDED_PATTERN.search(text):
        return PollStatus.SUCCEEDED
    if SELFTEST_FAILED_PATTERN.search(text):
        return PollStatus.FAILED
    return PollStatus.PENDING


def smart_command_ok(result: CommandResult) -> bool:
    """Return True when smartctl itself succeeded, ignoring health status bits."""

    return result.returncode & COMMAND_FAILURE_MASK == 0


class SmartCtl:
    """Issue smartctl queries and self-test commands against one device."""

    def __init__(self, device: str, executable: str = "smartctl", runner: Runner = run_command) -> None:
        self.device = device
        self.executable = executable
        self._runner = runner

    def _run(self, *args: str) -> CommandResult:
        result = self._runner([self.executable, *args, self.device])
        if result.returncode & EXIT_DEVICE_OPEN_FAILED:
            logger.error("smartctl could not open %s (exit status %s)", self.device, result.returncode)
            raise DeviceFault(f"smartctl could not open {self.device}")
        return result

    def info(self) -> str:
        return self._run("--info").output

    def capabilities(self) -> str:
        return self._run("--capabilities").output

    def status(self) -> str:
        return self._run("--all").output

    def selftest_status(self) -> PollStatus:
        """Read the device once and classify its self-test execution status."""

        status = selftest_status(self.status())
        logger.debug("Self-test status for %s: %s", self.device, status.value)
        return status

    def start_selftest(self, kind: str) -> CommandResult:
        try:
            test_argument = SELFTEST_ARGUMENTS[kind]
        except KeyError as exc:
            raise ValueError(f"Unknown self-test kind {kind!r}") from exc
        logger.info("Starting SMART %s self-test on %s", kind, self.device)
        return self._run("-t", test_argument)

    def selftest_log(self) -> CommandResult:
        return self._run("-l", "selftest")

    def full_report(self) -> CommandResult:
        return self._run("-x", "-v", "7,hex48")


__all__ = [
    "SmartCtl",
    "selftest_status",
    "smart_command_ok",
]
