"""End-to-end burn-in of one device: prologue, plan, full report, cleanup."""

from __future__ import annotations

import socket
import time
from pathlib import Path
from typing import Callable, Optional, TextIO

from ..config import AppSettings, RunMode
from ..device.badblocks import Badblocks
from ..device.logfilter import clean_log
from ..device.profile import DeviceProfile
from ..device.resolver import resolve_profile
from ..device.smartctl import SmartCtl
from ..logger import get_logger
from .logsink import LogSink
from .orchestrator import Orchestrator, RunOutcome
from .poller import CompletionPoller
from .stages import Stage, build_plan

logger = get_logger(__name__)


class BurnInSession:
    """Own the log file and collaborators for a single burn-in run."""

    def __init__(
        self,
        settings: AppSettings,
        device: str,
        mode: Optional[RunMode] = None,
        smartctl: Optional[SmartCtl] = None,
        badblocks: Optional[Badblocks] = None,
        console: Optional[TextIO] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.device = device
        self.mode = RunMode(mode) if mode is not None else settings.run_mode
        self.smartctl = smartctl or SmartCtl(device, executable=settings.smartctl_path)
        self.badblocks = badblocks or Badblocks(
            device,
            executable=settings.badblocks_path,
            block_size=settings.badblocks_block_size,
            max_errors=settings.badblocks_max_errors,
        )
        self._console = console
        self._poller = CompletionPoller(
            interval=settings.poll_interval_seconds,
            timeout=settings.poll_timeout_seconds,
            sleep=sleep,
        )
        self.profile: Optional[DeviceProfile] = None
        self.log_path: Optional[Path] = None
        self.bad_blocks_path: Optional[Path] = None

    def resolve(self) -> DeviceProfile:
        """Resolve the device profile and derive the output file paths."""

        if self.profile is None:
            self.profile = resolve_profile(self.smartctl)
            self.log_path, self.bad_blocks_path = self.output_paths(self.profile)
        return self.profile

    def output_paths(self, profile: DeviceProfile) -> tuple[Path, Path]:
        return (
            self.settings.log_dir / f"{profile.file_stem}.log",
            self.settings.bad_blocks_dir / f"{profile.file_stem}.bb",
        )

    def plan_stages(self) -> tuple[Stage, ...]:
        profile = self.resolve()
        _, bad_blocks_path = self.output_paths(profile)
        return build_plan(
            profile,
            self.smartctl,
            self.badblocks,
            bad_blocks_path,
            kinds=self.settings.plan,
        )

    def run(self) -> RunOutcome:
        profile = self.resolve()
        log_path, bad_blocks_path = self.output_paths(profile)
        plan = self.plan_stages()
        if self.mode is RunMode.EXECUTE:
            bad_blocks_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing burn-in log for %s to %s", profile.device, log_path)
        completed = False
        try:
            with LogSink(log_path, console=self._console) as sink:
                self._write_prologue(sink, profile)
                outcome = Orchestrator(sink, self._poller).run(profile, plan, self.mode)
                if self.settings.full_report_enabled:
                    sink.header(f"SMART information for drive {profile.device}")
                    sink.write_block(self.smartctl.full_report().output)
                sink.header(f"Finished burn-in of {profile.device}")
                completed = True
        finally:
            if self.settings.clean_log_enabled and log_path.exists():
                clean_log(log_path)
            if not completed:
                logger.error("Burn-in of %s did not complete; partial log kept at %s", profile.device, log_path)
        return outcome

    def _write_prologue(self, sink: LogSink, profile: DeviceProfile) -> None:
        sink.header(f"Started burn-in of {profile.device}")
        sink.write(f"Host: {socket.gethostname()}")
        sink.write(f"Run mode: {self.mode.value}")
        sink.write(f"Drive Model: {profile.model}")
        sink.write(f"Serial Number: {profile.serial}")
        sink.write(f"Device class: {profile.device_class.value}")
        sink.write(f"Short test duration: {profile.short_test_minutes} minutes")
        sink.write(f"Short test sleep duration: {profile.short_test_seconds} seconds")
        sink.write(f"Extended test duration: {profile.extended_test_minutes} minutes")
        sink.write(f"Extended test sleep duration: {profile.extended_test_seconds} seconds")
        sink.write(f"Log file: {self.log_path}")
        sink.write(f"Bad blocks file: {self.bad_blocks_path}")


__all__ = ["BurnInSession"]
