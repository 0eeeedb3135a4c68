from datetime import datetime
from io import StringIO
from pathlib import Path

import pytest

from burnin.runtime.logsink import LogSink
from fakes import RecordingSleep

FIXED_NOW = datetime(2026, 10, 18, 9, 30, 0)


@pytest.fixture()
def device_node(tmp_path: Path) -> str:
    node = tmp_path / "sdz"
    node.touch()
    return str(node)


@pytest.fixture()
def console() -> StringIO:
    return StringIO()


@pytest.fixture()
def sink(tmp_path: Path, console: StringIO) -> LogSink:
    log_sink = LogSink(tmp_path / "burnin.log", console=console, clock=lambda: FIXED_NOW)
    with log_sink:
        yield log_sink


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()
