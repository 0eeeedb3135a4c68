"""Device-facing helpers: smartctl, badblocks and profile resolution."""

from ..logger import get_logger
from .badblocks import Badblocks, count_bad_blocks
from .commands import CommandResult, DeviceFault, run_command
from .logfilter import DEFAULT_NOISE_PATTERNS, clean_log
from .profile import DeviceClass, DeviceProfile, minutes_to_seconds
from .resolver import resolve_profile
from .smartctl import SmartCtl, selftest_status
from .status import PollStatus

get_logger(__name__).debug("Device tooling package loaded")

__all__ = [
    "Badblocks",
    "CommandResult",
    "DEFAULT_NOISE_PATTERNS",
    "DeviceClass",
    "DeviceFault",
    "DeviceProfile",
    "PollStatus",
    "SmartCtl",
    "clean_log",
    "count_bad_blocks",
    "minutes_to_seconds",
    "resolve_profile",
    "run_command",
    "selftest_status",
]
