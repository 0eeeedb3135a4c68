"""Append-only run log written to a file and the console at the same time."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Callable, Optional, TextIO

from ..logger import get_logger

logger = get_logger(__name__)

HEADER_BORDER = "+" + "-" * 77
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Y"


class LogSink:
    """Ordered record of run log lines.

    Every line goes to the log file and the console stream. The file is
    truncated when the sink opens, flushed after each line, and closed when
    the context exits, whatever the exit path.
    """

    def __init__(
        self,
        path: Path,
        console: Optional[TextIO] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.path = path
        self._console = console if console is not None else sys.stdout
        self._clock = clock
        self._handle: Optional[TextIO] = None

    def open(self) -> "LogSink":
        if self._handle is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self.path.open("w", encoding="utf-8")
            logger.debug("Opened run log %s", self.path)
        return self

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.flush()
        finally:
            self._handle.close()
            self._handle = None
            logger.debug("Closed run log %s", self.path)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "LogSink":
        return self.open()

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def timestamp(self) -> str:
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def write(self, line: str) -> None:
        if self._handle is None:
            raise RuntimeError(f"Run log {self.path} is not open")
        self._handle.write(f"{line}\n")
        self._handle.flush()
        self._console.write(f"{line}\n")
        self._console.flush()

    def write_block(self, text: str) -> None:
        """Write multi-line tool output, one log line per output line."""

        for line in text.splitlines():
            self.write(line)

    def header(self, message: str) -> None:
        """Write a bordered header stamped with the current time."""

        self.write(HEADER_BORDER)
        self.write(f"+ {message}: {self.timestamp()}")
        self.write(HEADER_BORDER)


__all__ = ["HEADER_BORDER", "LogSink", "TIMESTAMP_FORMAT"]
