from pathlib import Path

import pytest

from burnin.config import StageKind
from burnin.device.badblocks import Badblocks, count_bad_blocks
from burnin.device.profile import DeviceClass, DeviceProfile
from burnin.device.smartctl import SmartCtl
from burnin.runtime.stages import build_plan, selftest_stage
from fakes import FakeBadblocksRunner, FakeSmartRunner


def make_profile(device_class: DeviceClass = DeviceClass.MECHANICAL, short: int = 2, extended: int = 90) -> DeviceProfile:
    return DeviceProfile(
        device="/dev/sdz",
        model="WDC_WD40EFRX-68N32N0",
        serial="WD-WCC7K4KLN2XY",
        device_class=device_class,
        short_test_minutes=short,
        extended_test_minutes=extended,
    )


def make_plan(profile: DeviceProfile, tmp_path: Path, kinds=None):
    smartctl = SmartCtl(profile.device, runner=FakeSmartRunner())
    badblocks = Badblocks(profile.device, runner=FakeBadblocksRunner())
    if kinds is None:
        return build_plan(profile, smartctl, badblocks, tmp_path / "scan.bb")
    return build_plan(profile, smartctl, badblocks, tmp_path / "scan.bb", kinds=kinds)


def test_default_plan_order(tmp_path: Path) -> None:
    plan = make_plan(make_profile(), tmp_path)
    assert [stage.kind for stage in plan] == [StageKind.SHORT, StageKind.BADBLOCKS, StageKind.EXTENDED]
    assert [stage.destructive for stage in plan] == [False, True, False]
    assert [stage.asynchronous for stage in plan] == [True, False, True]


def test_wait_durations_come_from_the_profile(tmp_path: Path) -> None:
    short, _, extended = make_plan(make_profile(short=2, extended=90), tmp_path)
    assert short.wait_seconds == 120
    assert extended.wait_seconds == 5400


def test_unreported_durations_wait_zero_seconds(tmp_path: Path) -> None:
    short, _, extended = make_plan(make_profile(short=0, extended=0), tmp_path)
    assert short.wait_seconds == 0
    assert extended.wait_seconds == 0


@pytest.mark.parametrize(
    ("device_class", "applicable"),
    [(DeviceClass.MECHANICAL, [True, True, True]), (DeviceClass.SOLID_STATE, [True, False, True])],
)
def test_surface_scan_only_applies_to_mechanical_devices(
    tmp_path: Path, device_class: DeviceClass, applicable: list[bool]
) -> None:
    profile = make_profile(device_class)
    plan = make_plan(profile, tmp_path)
    assert [stage.is_applicable(profile) for stage in plan] == applicable


def test_plan_may_repeat_stages(tmp_path: Path) -> None:
    kinds = [StageKind.SHORT, StageKind.EXTENDED, StageKind.BADBLOCKS, StageKind.SHORT, StageKind.EXTENDED]
    plan = make_plan(make_profile(), tmp_path, kinds=kinds)
    assert [stage.kind for stage in plan] == kinds
    assert plan[0] is not plan[3]


def test_empty_plan_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        make_plan(make_profile(), tmp_path, kinds=[])


def test_badblocks_description_names_the_full_command(tmp_path: Path) -> None:
    _, scan, _ = make_plan(make_profile(), tmp_path)
    bb_path = tmp_path / "scan.bb"
    assert scan.start_description == f"run badblocks -b 4096 -wsv -e 1 -o {bb_path} /dev/sdz"


def test_badblocks_is_not_a_selftest() -> None:
    with pytest.raises(ValueError):
        selftest_stage(StageKind.BADBLOCKS, make_profile(), SmartCtl("/dev/sdz", runner=FakeSmartRunner()))


def test_scan_harvest_reports_bad_blocks(tmp_path: Path) -> None:
    _, scan, _ = make_plan(make_profile(), tmp_path)
    (tmp_path / "scan.bb").write_text("1024\n2048\n")
    outcome = scan.harvest()
    assert not outcome.ok
    assert outcome.detail == 2
    assert count_bad_blocks(tmp_path / "missing.bb") == 0
