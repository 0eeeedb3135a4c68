"""Bounded polling for operations that only expose their progress by query."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, TypeVar

from ..config import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_POLL_TIMEOUT_HOURS
from ..device.status import PollStatus
from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PollResult(str, Enum):
    """Terminal outcome of a polling loop."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


@dataclass(frozen=True, slots=True)
class PollOutcome:
    result: PollResult
    elapsed: float
    polls: int


class CompletionPoller:
    """Repeatedly query a status source until it reports a terminal state.

    Elapsed time is accumulated from the sleeps the poller itself performs,
    so the loop always stops once ``timeout`` seconds of sleeping have been
    spent. The final sleep is shortened so the total never exceeds the
    timeout.
    """

    def __init__(
        self,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timeout: float = DEFAULT_POLL_TIMEOUT_HOURS * 60 * 60,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError("Polling interval must be positive")
        if timeout < 0:
            raise ValueError("Polling timeout must not be negative")
        self.interval = interval
        self.timeout = timeout
        self.sleep = sleep

    def wait_for(
        self,
        status_query: Callable[[], T],
        succeeded: Callable[[T], bool],
        failed: Callable[[T], bool],
    ) -> PollOutcome:
        """Poll ``status_query`` until a predicate matches or the timeout passes.

        ``succeeded`` is evaluated before ``failed`` on every read, so a
        status satisfying both counts as a success. A failure is terminal and
        is never retried.
        """

        elapsed = 0.0
        polls = 0
        while elapsed < self.timeout:
            status = status_query()
            polls += 1
            if succeeded(status):
                logger.debug("Operation succeeded after %d polls (%.0fs)", polls, elapsed)
                return PollOutcome(PollResult.SUCCEEDED, elapsed, polls)
            if failed(status):
                logger.debug("Operation failed after %d polls (%.0fs)", polls, elapsed)
                return PollOutcome(PollResult.FAILED, elapsed, polls)
            delay = min(self.interval, self.timeout - elapsed)
            self.sleep(delay)
            elapsed += delay
        logger.warning("Polling timed out after %.0f seconds (%d polls)", elapsed, polls)
        return PollOutcome(PollResult.TIMED_OUT, elapsed, polls)

    def wait_for_status(self, status_query: Callable[[], PollStatus]) -> PollOutcome:
        """Poll a tri-state status source."""

        return self.wait_for(
            status_query,
            succeeded=lambda status: status is PollStatus.SUCCEEDED,
            failed=lambda status: status is PollStatus.FAILED,
        )


__all__ = ["CompletionPoller", "PollOutcome", "PollResult"]
