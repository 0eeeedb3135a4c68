"""Stage definitions and burn-in plan construction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config import DEFAULT_PLAN, StageKind
from ..device.badblocks import Badblocks, count_bad_blocks
from ..device.profile import DeviceClass, DeviceProfile
from ..device.smartctl import SmartCtl, smart_command_ok
from ..device.status import PollStatus
from ..logger import get_logger
from .executor import Action, ActionOutcome

logger = get_logger(__name__)

SOLID_STATE_SKIP_REASON = "surface scans are not run on solid-state devices"


def _always(_profile: DeviceProfile) -> bool:
    return True


def _is_mechanical(profile: DeviceProfile) -> bool:
    return profile.device_class is DeviceClass.MECHANICAL


@dataclass(frozen=True)
class Stage:
    """One step of a burn-in plan.

    A stage with a ``status_query`` is asynchronous: its start action returns
    immediately and completion is detected by polling after ``wait_seconds``.
    """

    kind: StageKind
    name: str
    start: Action
    start_description: str
    wait_seconds: int = 0
    status_query: Optional[Callable[[], PollStatus]] = None
    harvest: Optional[Action] = None
    harvest_description: str = ""
    destructive: bool = False
    applies_to: Callable[[DeviceProfile], bool] = _always
    skip_reason: str = ""
    abort_on_failure: bool = False

    @property
    def asynchronous(self) -> bool:
        return self.status_query is not None

    def is_applicable(self, profile: DeviceProfile) -> bool:
        return bool(self.applies_to(profile))


def selftest_stage(kind: StageKind, profile: DeviceProfile, smartctl: SmartCtl) -> Stage:
    """Build a SMART short or extended self-test stage."""

    if kind is StageKind.SHORT:
        label, wait_seconds = "short", profile.short_test_seconds
    elif kind is StageKind.EXTENDED:
        label, wait_seconds = "extended", profile.extended_test_seconds
    else:
        raise ValueError(f"{kind.value} is not a self-test stage")
    name = f"SMART {label} test"

    def start() -> ActionOutcome:
        result = smartctl.start_selftest(label)
        if smart_command_ok(result):
            return ActionOutcome(ok=True, output=f"{name} started", detail=result)
        return ActionOutcome(ok=False, output=result.output, detail=result)

    def harvest() -> ActionOutcome:
        result = smartctl.selftest_log()
        return ActionOutcome(ok=smart_command_ok(result), output=result.output, detail=result)

    return Stage(
        kind=kind,
        name=name,
        start=start,
        start_description=f"start the {name}",
        wait_seconds=wait_seconds,
        status_query=smartctl.selftest_status,
        harvest=harvest,
        harvest_description="record the SMART self-test log",
    )


def badblocks_stage(badblocks: Badblocks, bad_blocks_path: Path) -> Stage:
    """Build the destructive surface scan stage.

    The scan itself writes the list of bad blocks to ``bad_blocks_path``;
    the harvest step only summarises that file.
    """

    def start() -> ActionOutcome:
        result = badblocks.scan(bad_blocks_path)
        return ActionOutcome(
            ok=result.ok,
            output=f"badblocks exited with status {result.returncode}",
            detail=result,
        )

    def harvest() -> ActionOutcome:
        count = count_bad_blocks(bad_blocks_path)
        if count:
            return ActionOutcome(ok=False, output=f"{count} bad blocks recorded in {bad_blocks_path}", detail=count)
        return ActionOutcome(ok=True, output="No bad blocks found", detail=count)

    return Stage(
        kind=StageKind.BADBLOCKS,
        name="badblocks test",
        start=start,
        start_description=f"run {badblocks.command_line(bad_blocks_path)}",
        harvest=harvest,
        harvest_description=f"summarise bad blocks recorded in {bad_blocks_path}",
        destructive=True,
        applies_to=_is_mechanical,
        skip_reason=SOLID_STATE_SKIP_REASON,
    )


def build_plan(
    profile: DeviceProfile,
    smartctl: SmartCtl,
    badblocks: Badblocks,
    bad_blocks_path: Path,
    kinds: Iterable[StageKind] = DEFAULT_PLAN,
) -> tuple[Stage, ...]:
    """Return the ordered stages for ``kinds``; a kind may appear more than once."""

    plan: list[Stage] = []
    for kind in kinds:
        kind = StageKind(kind)
        if kind is StageKind.BADBLOCKS:
            plan.append(badblocks_stage(badblocks, bad_blocks_path))
        else:
            plan.append(selftest_stage(kind, profile, smartctl))
    if not plan:
        raise ValueError("A burn-in plan needs at least one stage")
    logger.info("Built burn-in plan: %s", ", ".join(stage.kind.value for stage in plan))
    return tuple(plan)


__all__ = ["Stage", "badblocks_stage", "build_plan", "selftest_stage"]
