import io
from datetime import datetime, timedelta, timezone

import pytest
from rich.console import Console

START = datetime(2026, 10, 18, 7, 31, tzinfo=timezone.utc)


class FakeClock:
    """Returns START, then moves forward ``step_ms`` on every call."""

    def __init__(self, step_ms: int = 0):
        self.now = START
        self.step = timedelta(milliseconds=step_ms)

    def __call__(self) -> datetime:
        now = self.now
        self.now = now + self.step
        return now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)
