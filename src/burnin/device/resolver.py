"""Resolve a :class:`DeviceProfile` from smartctl text output."""

from __future__ import annotations

import re
from typing import Optional

from ..logger import get_logger
from .profile import DeviceClass, DeviceProfile
from .smartctl import SmartCtl

logger = get_logger(__name__)

MODEL_LABELS = ("Device Model", "Model Family", "Model Number", "Product")
SERIAL_LABELS = ("Serial Number", "Serial number")
UNKNOWN_VALUE = "unknown"
SOLID_STATE_PATTERN = re.compile(r"^\s*Rotation Rate:\s*Solid State Device", re.IGNORECASE | re.MULTILINE)


def _labelled_value(text: str, label: str) -> Optional[str]:
    match = re.search(rf"^\s*{re.escape(label)}:\s*(.+?)\s*$", text, re.MULTILINE)
    if not match:
        return None
    value = "_".join(match.group(1).split())
    return value or None


def _first_value(text: str, labels: tuple[str, ...]) -> str:
    for label in labels:
        value = _labelled_value(text, label)
        if value:
            return value
    return UNKNOWN_VALUE


def parse_identity(info_text: str) -> tuple[str, str]:
    """Return ``(model, serial)`` with whitespace replaced by underscores."""

    return _first_value(info_text, MODEL_LABELS), _first_value(info_text, SERIAL_LABELS)


def parse_device_class(info_text: str) -> DeviceClass:
    """Only an explicit solid-state rotation report yields SOLID_STATE."""

    if SOLID_STATE_PATTERN.search(info_text):
        return DeviceClass.SOLID_STATE
    return DeviceClass.MECHANICAL


def parse_test_minutes(capabilities_text: str, kind: str) -> int:
    """Return the recommended polling time for a ``Short`` or ``Extended`` self-test.

    Devices print the duration on the line after the routine name, e.g.::

        Extended self-test routine
        recommended polling time:        ( 464) minutes.

    A missing or unparsable value yields 0.
    """

    pattern = re.compile(
        rf"{re.escape(kind)} self-test routine\s*\n\s*recommended polling time:\s*\(\s*(\d+)\s*\)",
        re.IGNORECASE,
    )
    match = pattern.search(capabilities_text)
    if not match:
        logger.warning("No %s self-test duration reported; treating it as 0 minutes", kind.lower())
        return 0
    return int(match.group(1))


def resolve_profile(smartctl: SmartCtl) -> DeviceProfile:
    """Query the device once and build its profile."""

    info_text = smartctl.info()
    capabilities_text = smartctl.capabilities()
    model, serial = parse_identity(info_text)
    profile = DeviceProfile(
        device=smartctl.device,
        model=model,
        serial=serial,
        device_class=parse_device_class(info_text),
        short_test_minutes=parse_test_minutes(capabilities_text, "Short"),
        extended_test_minutes=parse_test_minutes(capabilities_text, "Extended"),
    )
    logger.info(
        "Resolved %s: model=%s serial=%s class=%s",
        profile.device,
        profile.model,
        profile.serial,
        profile.device_class.value,
    )
    return profile


__all__ = [
    "parse_device_class",
    "parse_identity",
    "parse_test_minutes",
    "resolve_profile",
]
