#!/usr/bin/env python3
"""Read a device's SMART self-test status once, or keep polling until it finishes."""

from __future__ import annotations

import argparse
import sys
from _paths import add_project_src_to_path

add_project_src_to_path()

from burnin.config import get_settings
from burnin.device.commands import DeviceFault
from burnin.device.smartctl import SmartCtl
from burnin.device.status import PollStatus
from burnin.preflight import normalise_device
from burnin.runtime.poller import CompletionPoller, PollResult


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("device", help="Device to query, e.g. sda or /dev/sda.")
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Poll until the running self-test reports success or failure.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polls (defaults to BURNIN_POLL_INTERVAL_SECONDS).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds (defaults to BURNIN_POLL_TIMEOUT_HOURS).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    smartctl = SmartCtl(normalise_device(args.device), executable=settings.smartctl_path)

    try:
        if not args.wait:
            status = smartctl.selftest_status()
            print(f"{smartctl.device}: {status.value}")
            return 0 if status is not PollStatus.FAILED else 1

        poller = CompletionPoller(
            interval=args.interval or settings.poll_interval_seconds,
            timeout=args.timeout or settings.poll_timeout_seconds,
        )
        outcome = poller.wait_for_status(smartctl.selftest_status)
    except DeviceFault as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"{smartctl.device}: {outcome.result.value} after {outcome.polls} polls ({outcome.elapsed:.0f}s)")
    return 0 if outcome.result is PollResult.SUCCEEDED else 1


if __name__ == "__main__":
    sys.exit(main())
