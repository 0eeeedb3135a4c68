import pytest

pytest.importorskip("pydantic")

from pydantic import ValidationError

from burnin.config import AppSettings, RunMode, StageKind, get_settings, settings_with_overrides


def test_default_settings() -> None:
    settings = AppSettings()
    assert settings.plan == [StageKind.SHORT, StageKind.BADBLOCKS, StageKind.EXTENDED]
    assert settings.poll_interval_seconds == pytest.approx(15.0)
    assert settings.poll_timeout_seconds == pytest.approx(4 * 60 * 60)
    assert settings.badblocks_block_size == 4096
    assert settings.run_mode is RunMode.EXECUTE


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("short,extended", [StageKind.SHORT, StageKind.EXTENDED]),
        ("short badblocks short", [StageKind.SHORT, StageKind.BADBLOCKS, StageKind.SHORT]),
        ('["Extended"]', [StageKind.EXTENDED]),
    ],
)
def test_plan_parsing_from_environment(monkeypatch: pytest.MonkeyPatch, value: str, expected: list[StageKind]) -> None:
    monkeypatch.setenv("BURNIN_PLAN", value)
    settings = AppSettings()
    assert settings.plan == expected


def test_unknown_stage_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(plan="short,conveyance")


def test_empty_plan_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(plan="")


def test_dry_run_selects_simulate_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BURNIN_DRY_RUN", "1")
    assert AppSettings().run_mode is RunMode.SIMULATE


def test_poll_interval_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        AppSettings(poll_interval_seconds=0)


def test_settings_are_immutable() -> None:
    settings = AppSettings()
    with pytest.raises(ValidationError):
        settings.dry_run = True


def test_overrides_ignore_unset_values() -> None:
    get_settings.cache_clear()
    assert settings_with_overrides(dry_run=None, plan=None) is get_settings()
    overridden = settings_with_overrides(dry_run=True, plan="extended")
    assert overridden.run_mode is RunMode.SIMULATE
    assert overridden.plan == [StageKind.EXTENDED]
