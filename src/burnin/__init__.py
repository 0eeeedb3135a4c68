"""disk-burnin – SMART self-test and badblocks burn-in for a single disk."""

from importlib.metadata import PackageNotFoundError, version

from .logger import get_logger

_logger = get_logger(__name__)

try:
    __version__ = version("disk-burnin")
    _logger.debug("Detected installed disk-burnin version: %s", __version__)
except PackageNotFoundError:  # pragma: no cover - during local dev
    __version__ = "0.0.0"
    _logger.warning("Package metadata not found; defaulting version to %s", __version__)


__all__ = ["__version__"]
