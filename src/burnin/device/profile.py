"""Identity and capability data for the device under test."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DeviceClass(str, Enum):
    """Storage medium class; decides whether the surface scan applies."""

    MECHANICAL = "mechanical"
    SOLID_STATE = "solid-state"


def minutes_to_seconds(minutes: Optional[int]) -> int:
    """Convert a reported test duration to seconds; unknown or zero becomes 0."""

    if not minutes or minutes <= 0:
        return 0
    return int(minutes) * 60


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """Resolved once at startup and never changed during a run."""

    device: str
    model: str
    serial: str
    device_class: DeviceClass = DeviceClass.MECHANICAL
    short_test_minutes: int = 0
    extended_test_minutes: int = 0

    def __post_init__(self) -> None:
        for name in ("short_test_minutes", "extended_test_minutes"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    @property
    def short_test_seconds(self) -> int:
        return minutes_to_seconds(self.short_test_minutes)

    @property
    def extended_test_seconds(self) -> int:
        return minutes_to_seconds(self.extended_test_minutes)

    @property
    def is_solid_state(self) -> bool:
        return self.device_class is DeviceClass.SOLID_STATE

    @property
    def file_stem(self) -> str:
        return f"burnin-{self.model}_{self.serial}"


__all__ = ["DeviceClass", "DeviceProfile", "minutes_to_seconds"]
