#!/usr/bin/env python3
"""Parse saved smartctl output and print the device profile it describes."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from _paths import add_project_src_to_path

add_project_src_to_path()

from burnin.device.profile import DeviceProfile, minutes_to_seconds
from burnin.device.resolver import parse_device_class, parse_identity, parse_test_minutes


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve a device profile from files holding 'smartctl --info' and 'smartctl --capabilities' output."
    )
    parser.add_argument("info", type=Path, help="File with 'smartctl --info' output.")
    parser.add_argument("capabilities", type=Path, help="File with 'smartctl --capabilities' output.")
    parser.add_argument("--device", default="/dev/unknown", help="Device name to show in the profile.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    info_text = args.info.read_text(encoding="utf-8", errors="replace")
    capabilities_text = args.capabilities.read_text(encoding="utf-8", errors="replace")
    model, serial = parse_identity(info_text)
    profile = DeviceProfile(
        device=args.device,
        model=model,
        serial=serial,
        device_class=parse_device_class(info_text),
        short_test_minutes=parse_test_minutes(capabilities_text, "Short"),
        extended_test_minutes=parse_test_minutes(capabilities_text, "Extended"),
    )
    print(f"Model:          {profile.model}")
    print(f"Serial:         {profile.serial}")
    print(f"Class:          {profile.device_class.value}")
    print(f"Short test:     {profile.short_test_minutes} min -> {minutes_to_seconds(profile.short_test_minutes)} s")
    print(f"Extended test:  {profile.extended_test_minutes} min -> {minutes_to_seconds(profile.extended_test_minutes)} s")
    print(f"Log file stem:  {profile.file_stem}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
