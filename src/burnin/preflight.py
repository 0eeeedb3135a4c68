"""Checks that must pass before a burn-in starts."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from .config import AppSettings, RunMode
from .logger import get_logger

logger = get_logger(__name__)

DEVICE_DIRECTORY = Path("/dev")


class PreflightError(RuntimeError):
    """Raised when the environment cannot support a burn-in."""


def normalise_device(name: str) -> str:
    """Accept ``sda`` as shorthand for ``/dev/sda``."""

    name = name.strip()
    if not name:
        raise PreflightError("A device must be specified.")
    if os.path.isabs(name):
        return name
    return str(DEVICE_DIRECTORY / name)


def check_dependencies(executables: Iterable[str]) -> None:
    missing: List[str] = [name for name in executables if shutil.which(name) is None]
    if missing:
        logger.error("Missing required commands: %s", ", ".join(missing))
        raise PreflightError(f"Command(s) not found: {', '.join(missing)}")


def check_privileges() -> None:
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() != 0:
        raise PreflightError("A burn-in must be run as root.")


def check_device(device: str) -> None:
    if not os.path.exists(device):
        raise PreflightError(f"Device {device} does not exist.")


def run_preflight(settings: AppSettings, device: str, mode: RunMode) -> str:
    """Run every check for ``mode`` and return the normalised device path."""

    path = normalise_device(device)
    required = [settings.smartctl_path]
    if RunMode(mode) is RunMode.EXECUTE:
        required.append(settings.badblocks_path)
    check_dependencies(required)
    if RunMode(mode) is RunMode.EXECUTE:
        check_privileges()
    check_device(path)
    logger.debug("Preflight checks passed for %s (%s)", path, RunMode(mode).value)
    return path


__all__ = [
    "PreflightError",
    "check_dependencies",
    "check_device",
    "check_privileges",
    "normalise_device",
    "run_preflight",
]
