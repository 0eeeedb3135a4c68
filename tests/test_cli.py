from pathlib import Path

import pytest

pytest.importorskip("typer")

from typer.testing import CliRunner

from burnin import cli
from burnin.config import RunMode, get_settings
from burnin.device.smartctl import SmartCtl
from burnin.preflight import PreflightError
from burnin.runtime import BurnInSession, RunAborted, RunOutcome, StageOutcome, StageStatus
from fakes import SSD_INFO, FakeSmartRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("BURNIN_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("BURNIN_BAD_BLOCKS_DIR", str(tmp_path / "bb"))
    monkeypatch.delenv("BURNIN_DRY_RUN", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeSession:
    """Stand-in for BurnInSession.run() returning or raising a canned result."""

    instances: list["FakeSession"] = []
    result: object = None

    def __init__(self, settings, device, mode=None, **_: object) -> None:
        self.settings = settings
        self.device = device
        self.mode = mode
        FakeSession.instances.append(self)

    def run(self) -> RunOutcome:
        if isinstance(FakeSession.result, Exception):
            raise FakeSession.result
        return FakeSession.result


def outcome(mode: RunMode, *statuses: StageStatus, aborted: bool = False) -> RunOutcome:
    names = ["SMART short test", "badblocks test", "SMART extended test"]
    stages = [
        StageOutcome(name.split()[-2].lower(), name, status, simulated=mode is RunMode.SIMULATE)
        for name, status in zip(names, statuses)
    ]
    return RunOutcome(mode=mode, stages=stages, aborted=aborted)


@pytest.fixture()
def fake_session(monkeypatch: pytest.MonkeyPatch):
    FakeSession.instances = []
    FakeSession.result = None
    monkeypatch.setattr(cli, "BurnInSession", FakeSession)
    monkeypatch.setattr(cli, "run_preflight", lambda settings, device, mode: "/dev/sdz")
    return FakeSession


def test_dry_run_success(fake_session) -> None:
    fake_session.result = outcome(RunMode.SIMULATE, *[StageStatus.COMPLETED] * 3)

    result = runner.invoke(cli.app, ["run", "sdz", "--dry-run"])

    assert result.exit_code == cli.EXIT_OK
    assert "SMART short test: completed (simulated)" in result.output
    session = fake_session.instances[0]
    assert session.mode is RunMode.SIMULATE
    assert session.settings.dry_run is True
    assert session.device == "/dev/sdz"


def test_execute_is_the_default_mode(fake_session) -> None:
    fake_session.result = outcome(RunMode.EXECUTE, StageStatus.COMPLETED, StageStatus.SKIPPED, StageStatus.COMPLETED)

    result = runner.invoke(cli.app, ["run", "sdz"])

    assert result.exit_code == cli.EXIT_OK
    assert fake_session.instances[0].mode is RunMode.EXECUTE


def test_dry_run_from_environment(fake_session, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BURNIN_DRY_RUN", "true")
    get_settings.cache_clear()
    fake_session.result = outcome(RunMode.SIMULATE, StageStatus.COMPLETED)

    result = runner.invoke(cli.app, ["run", "sdz"])

    assert result.exit_code == cli.EXIT_OK
    assert fake_session.instances[0].mode is RunMode.SIMULATE


def test_failed_stage_exit_code(fake_session) -> None:
    fake_session.result = outcome(RunMode.EXECUTE, StageStatus.COMPLETED, StageStatus.FAILED, StageStatus.TIMED_OUT)

    result = runner.invoke(cli.app, ["run", "sdz"])

    assert result.exit_code == cli.EXIT_STAGE_FAILED
    assert "badblocks test: failed" in result.output
    assert "SMART extended test: timed-out" in result.output


def test_preflight_failure_exit_code(fake_session, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(settings, device, mode):
        raise PreflightError("A burn-in must be run as root.")

    monkeypatch.setattr(cli, "run_preflight", refuse)

    result = runner.invoke(cli.app, ["run", "sdz"])

    assert result.exit_code == cli.EXIT_PREFLIGHT
    assert "run as root" in result.output
    assert fake_session.instances == []


def test_invalid_plan_exit_code(fake_session) -> None:
    result = runner.invoke(cli.app, ["run", "sdz", "--plan", "short,conveyance"])

    assert result.exit_code == cli.EXIT_PREFLIGHT
    assert fake_session.instances == []


def test_plan_option_reaches_settings(fake_session) -> None:
    fake_session.result = outcome(RunMode.EXECUTE, StageStatus.COMPLETED)

    runner.invoke(cli.app, ["run", "sdz", "--plan", "short"])

    assert [kind.value for kind in fake_session.instances[0].settings.plan] == ["short"]


def test_device_fault_exit_code(fake_session) -> None:
    partial = outcome(RunMode.EXECUTE, StageStatus.FAILED, aborted=True)
    fake_session.result = RunAborted("SMART short test aborted: smartctl could not open /dev/sdz", partial)

    result = runner.invoke(cli.app, ["run", "sdz"])

    assert result.exit_code == cli.EXIT_DEVICE_FAULT
    assert "SMART short test: failed" in result.output
    assert "burn-in aborted" in result.output


def test_profile_command(monkeypatch: pytest.MonkeyPatch, device_node: str) -> None:
    def build(settings, device, mode=None):
        return BurnInSession(settings, device, mode, smartctl=SmartCtl(device, runner=FakeSmartRunner(info=SSD_INFO)))

    monkeypatch.setattr(cli, "BurnInSession", build)
    monkeypatch.setattr(cli, "check_dependencies", lambda executables: None)

    result = runner.invoke(cli.app, ["profile", device_node])

    assert result.exit_code == 0
    assert "Class: solid-state" in result.output
    assert "Short test: 2 minutes (120 seconds)" in result.output
    assert "badblocks test (skipped: surface scans are not run on solid-state devices)" in result.output
    assert "SMART extended test" in result.output


def test_profile_marks_destructive_stage(monkeypatch: pytest.MonkeyPatch, device_node: str) -> None:
    def build(settings, device, mode=None):
        return BurnInSession(settings, device, mode, smartctl=SmartCtl(device, runner=FakeSmartRunner()))

    monkeypatch.setattr(cli, "BurnInSession", build)
    monkeypatch.setattr(cli, "check_dependencies", lambda executables: None)

    result = runner.invoke(cli.app, ["profile", device_node])

    assert result.exit_code == 0
    assert "badblocks test [destructive]" in result.output


def test_profile_device_fault(monkeypatch: pytest.MonkeyPatch, device_node: str) -> None:
    def build(settings, device, mode=None):
        smart_runner = FakeSmartRunner(fault_on="--info")
        return BurnInSession(settings, device, mode, smartctl=SmartCtl(device, runner=smart_runner))

    monkeypatch.setattr(cli, "BurnInSession", build)
    monkeypatch.setattr(cli, "check_dependencies", lambda executables: None)

    result = runner.invoke(cli.app, ["profile", device_node])

    assert result.exit_code == cli.EXIT_PREFLIGHT
