"""Observable state of an asynchronous device operation."""

from __future__ import annotations

from enum import Enum


class PollStatus(str, Enum):
    """Tri-state answer to "has the operation finished?"."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


__all__ = ["PollStatus"]
