"""Burn-in run orchestration."""

from .executor import ActionOutcome, CommandExecutor, ExecutionResult, LiveExecutor, SimulatedExecutor, create_executor
from .logsink import LogSink
from .orchestrator import Orchestrator, RunAborted, RunOutcome, StageOutcome, StageStatus
from .poller import CompletionPoller, PollOutcome, PollResult
from .session import BurnInSession
from .stages import Stage, build_plan

__all__ = [
    "ActionOutcome",
    "BurnInSession",
    "CommandExecutor",
    "CompletionPoller",
    "ExecutionResult",
    "LiveExecutor",
    "LogSink",
    "Orchestrator",
    "PollOutcome",
    "PollResult",
    "RunAborted",
    "RunOutcome",
    "SimulatedExecutor",
    "Stage",
    "StageOutcome",
    "StageStatus",
    "build_plan",
    "create_executor",
]
