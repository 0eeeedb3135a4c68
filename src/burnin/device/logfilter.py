"""Post-run cleanup of the burn-in log."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_NOISE_PATTERNS: tuple[str, ...] = (
    "Copyright",
    "=== START OF READ",
    "SMART Attributes Data",
    "Vendor Specific SMART",
    "SMART Error Log Version",
)


def filter_lines(lines: Iterable[str], patterns: Sequence[str] = DEFAULT_NOISE_PATTERNS) -> list[str]:
    return [line for line in lines if not any(pattern in line for pattern in patterns)]


def clean_log(path: Path, patterns: Sequence[str] = DEFAULT_NOISE_PATTERNS) -> int:
    """Rewrite ``path`` without lines containing any of ``patterns``.

    Returns the number of lines removed.
    """

    if not path.exists():
        logger.warning("Log file %s does not exist; nothing to clean", path)
        return 0
    original = path.read_text(encoding="utf-8").splitlines(keepends=True)
    kept = filter_lines(original, patterns)
    path.write_text("".join(kept), encoding="utf-8")
    removed = len(original) - len(kept)
    logger.debug("Removed %d noise lines from %s", removed, path)
    return removed


__all__ = ["DEFAULT_NOISE_PATTERNS", "clean_log", "filter_lines"]
