"""Drive a burn-in plan stage by stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..config import RunMode
from ..device.commands import DeviceFault
from ..device.profile import DeviceProfile
from ..logger import get_logger
from .executor import ActionOutcome, CommandExecutor, create_executor
from .logsink import LogSink
from .poller import CompletionPoller, PollResult
from .stages import Stage

logger = get_logger(__name__)


class StageStatus(str, Enum):
    """Per-stage result categories reported in a RunOutcome."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


_POLL_STATUS = {
    PollResult.SUCCEEDED: StageStatus.COMPLETED,
    PollResult.FAILED: StageStatus.FAILED,
    PollResult.TIMED_OUT: StageStatus.TIMED_OUT,
}

_POLL_MESSAGES = {
    PollResult.SUCCEEDED: "{name} succeeded",
    PollResult.FAILED: "{name} failed",
    PollResult.TIMED_OUT: "{name} timeout threshold exceeded",
}


@dataclass(frozen=True, slots=True)
class StageOutcome:
    kind: str
    name: str
    status: StageStatus
    simulated: bool = False
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "status": self.status.value,
            "simulated": self.simulated,
            "detail": self.detail,
        }


@dataclass
class RunOutcome:
    """Per-stage summary of one pass through a plan, in plan order."""

    mode: RunMode
    stages: List[StageOutcome] = field(default_factory=list)
    aborted: bool = False

    @property
    def statuses(self) -> List[StageStatus]:
        return [stage.status for stage in self.stages]

    @property
    def ok(self) -> bool:
        return not self.aborted and all(
            status in (StageStatus.COMPLETED, StageStatus.SKIPPED) for status in self.statuses
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "aborted": self.aborted,
            "stages": [stage.to_dict() for stage in self.stages],
        }


class RunAborted(DeviceFault):
    """Raised when a device fault stops the plan; carries the partial outcome."""

    def __init__(self, message: str, outcome: RunOutcome) -> None:
        super().__init__(message)
        self.outcome = outcome


class Orchestrator:
    """Run every stage of a plan in order against one device."""

    def __init__(self, sink: LogSink, poller: Optional[CompletionPoller] = None) -> None:
        self._sink = sink
        self._poller = poller or CompletionPoller()

    def run(self, profile: DeviceProfile, plan: Sequence[Stage], mode: RunMode) -> RunOutcome:
        """Run ``plan`` and return the per-stage outcome.

        Stage failures and timeouts are recorded and the plan continues. A
        :class:`DeviceFault` stops the plan and is re-raised as
        :class:`RunAborted`.
        """

        if not plan:
            raise ValueError("Cannot run an empty burn-in plan")
        executor = create_executor(mode, self._sink)
        outcome = RunOutcome(mode=executor.mode)
        logger.info("Running %d stages on %s (%s)", len(plan), profile.device, executor.mode.value)

        for stage in plan:
            if not stage.is_applicable(profile):
                self._sink.write(f"Skipping {stage.name} on drive {profile.device}: {stage.skip_reason}")
                outcome.stages.append(StageOutcome(stage.kind.value, stage.name, StageStatus.SKIPPED))
                logger.info("Skipped %s: %s", stage.name, stage.skip_reason)
                continue

            self._sink.header(f"Run {stage.name} on drive {profile.device}")
            try:
                status, simulated = self._run_stage(stage, executor)
            except DeviceFault as exc:
                self._sink.write(f"Aborted {stage.name} on drive {profile.device}: {self._sink.timestamp()} ({exc})")
                outcome.stages.append(StageOutcome(stage.kind.value, stage.name, StageStatus.FAILED, detail=str(exc)))
                outcome.aborted = True
                logger.error("Device fault during %s: %s", stage.name, exc)
                raise RunAborted(f"{stage.name} aborted: {exc}", outcome) from exc

            self._sink.write(f"Finished {stage.name} on drive {profile.device}: {self._sink.timestamp()}")
            outcome.stages.append(StageOutcome(stage.kind.value, stage.name, status, simulated=simulated))
            logger.info("%s finished with status %s", stage.name, status.value)

            if stage.abort_on_failure and status in (StageStatus.FAILED, StageStatus.TIMED_OUT):
                self._sink.write(f"Stopping burn-in: {stage.name} {status.value}")
                logger.warning("Plan stopped after %s (%s)", stage.name, status.value)
                break

        return outcome

    def _run_stage(self, stage: Stage, executor: CommandExecutor) -> tuple[StageStatus, bool]:
        started = executor.execute(stage.start_description, stage.start)
        status = StageStatus.COMPLETED if started.ok else StageStatus.FAILED

        if started.ok and stage.asynchronous:
            waited = executor.execute(
                f"sleep {stage.wait_seconds} seconds until the {stage.name} finishes, then poll for completion",
                lambda: self._await_completion(stage),
            )
            if waited.detail is not None:
                status = _POLL_STATUS[waited.detail.result]
            elif not waited.ok:
                status = StageStatus.FAILED

        if stage.harvest is not None:
            harvested = executor.execute(stage.harvest_description, stage.harvest)
            if not harvested.ok and status is StageStatus.COMPLETED:
                status = StageStatus.FAILED

        return status, started.simulated

    def _await_completion(self, stage: Stage) -> ActionOutcome:
        if stage.wait_seconds > 0:
            self._sink.write(f"Sleeping {stage.wait_seconds} seconds until the {stage.name} finishes")
            self._poller.sleep(stage.wait_seconds)
        polled = self._poller.wait_for_status(stage.status_query)
        return ActionOutcome(
            ok=polled.result is PollResult.SUCCEEDED,
            output=_POLL_MESSAGES[polled.result].format(name=stage.name),
            detail=polled,
        )


__all__ = [
    "Orchestrator",
    "RunAborted",
    "RunOutcome",
    "StageOutcome",
    "StageStatus",
]
