"""Single choke point for every state-changing or long-running action.

A run picks one executor up front. :class:`SimulatedExecutor` announces each
action in the run log and never calls it; :class:`LiveExecutor` calls it and
logs what it produced. Stages never check the run mode themselves.

Only :class:`DeviceFault` escapes the live executor. Other ``OSError``
failures are reported as an unsuccessful result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..config import RunMode
from ..device.commands import DeviceFault
from ..logger import get_logger
from .logsink import LogSink

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """What an action reports back: success, log text and a raw payload."""

    ok: bool
    output: str = ""
    detail: Any = None


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    description: str
    ok: bool
    output: str = ""
    simulated: bool = False
    detail: Any = None


Action = Callable[[], ActionOutcome]


class CommandExecutor:
    """Base class for run-mode strategies."""

    mode: RunMode

    def __init__(self, sink: LogSink) -> None:
        self._sink = sink

    def execute(self, description: str, action: Action) -> ExecutionResult:
        raise NotImplementedError


class SimulatedExecutor(CommandExecutor):
    mode = RunMode.SIMULATE

    def execute(self, description: str, action: Action) -> ExecutionResult:
        self._sink.write(f"Dry run: would {description}")
        logger.debug("Simulated action: %s", description)
        return ExecutionResult(description=description, ok=True, simulated=True)


class LiveExecutor(CommandExecutor):
    mode = RunMode.EXECUTE

    def execute(self, description: str, action: Action) -> ExecutionResult:
        logger.info("Executing: %s", description)
        try:
            outcome = action()
        except DeviceFault:
            raise
        except OSError as exc:
            logger.error("Action failed with an OS error: %s", exc)
            message = f"Could not {description}: {exc}"
            self._sink.write(message)
            return ExecutionResult(description=description, ok=False, output=message)
        if outcome.output:
            self._sink.write_block(outcome.output)
        if not outcome.ok:
            logger.warning("Action reported failure: %s", description)
        return ExecutionResult(
            description=description,
            ok=outcome.ok,
            output=outcome.output,
            detail=outcome.detail,
        )


def create_executor(mode: RunMode, sink: LogSink) -> CommandExecutor:
    """Select the executor strategy for a run."""

    mode = RunMode(mode)
    if mode is RunMode.SIMULATE:
        return SimulatedExecutor(sink)
    if mode is RunMode.EXECUTE:
        return LiveExecutor(sink)
    raise ValueError(f"Unsupported run mode: {mode!r}")


__all__ = [
    "ActionOutcome",
    "CommandExecutor",
    "ExecutionResult",
    "LiveExecutor",
    "SimulatedExecutor",
    "create_executor",
]
