"""
Typed payloads for the test engine's event feed.

The engine reports seven events: ``start``, ``end``, ``suite``, ``test end``,
``pass``, ``fail`` and ``pending``. Suites and tests arrive as loosely shaped
objects; these models spell out which fields are required and which may be
missing.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Iterator, Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import EventFeedError


class FailureInfo(BaseModel):
    """Assertion error attached to a failed test."""
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = ""
    actual: Any = None
    expected: Any = None
    stack: Optional[str] = None


class SuiteInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    full_title: str = ""
    file: Optional[str] = None
    root: bool = False

    @model_validator(mode="after")
    def _default_full_title(self) -> "SuiteInfo":
        if not self.full_title and self.title:
            self.full_title = self.title
        return self


class TestInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")
    __test__ = False  # keep pytest from collecting this

    title: str
    full_title: Optional[str] = None
    duration: Optional[float] = None
    state: Optional[Literal["passed", "failed"]] = None
    file: Optional[str] = None
    speed: Optional[str] = None
    err: Optional[FailureInfo] = None

    @field_validator("state", mode="before")
    @classmethod
    def _terminal_state(cls, value: Any) -> Any:
        # "pending" and anything unrecognised have no terminal state: reported as skipped.
        return value if value in ("passed", "failed") else None

    @field_validator("duration", mode="before")
    @classmethod
    def _numeric_duration(cls, value: Any) -> Any:
        return value if isinstance(value, (int, float)) and not isinstance(value, bool) else None


class Event(BaseModel):
    event: Literal["start", "end", "suite", "test end", "pass", "fail", "pending"]
    suite: Optional[SuiteInfo] = None
    test: Optional[TestInfo] = None
    error: Optional[FailureInfo] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "Event":
        if self.event == "suite" and self.suite is None:
            raise ValueError("'suite' event needs a suite payload")
        if self.event in ("test end", "pass", "fail", "pending") and self.test is None:
            raise ValueError(f"'{self.event}' event needs a test payload")
        return self

    def payload(self) -> tuple:
        """Positional arguments for the matching listener handler."""
        if self.event == "suite":
            return (self.suite,)
        if self.event == "fail":
            return (self.test, self.error or self.test.err)
        if self.test is not None:
            return (self.test,)
        return ()


def parse_event(line: str, lineno: int = 0) -> Event:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise EventFeedError(f"invalid JSON: {e.msg}", lineno) from e
    if not isinstance(data, dict):
        raise EventFeedError("event must be a JSON object", lineno)
    try:
        return Event.model_validate(data)
    except ValidationError as e:
        raise EventFeedError(str(e), lineno) from e


def read_events(path) -> Iterator[Event]:
    """Yield events from a JSON-lines file, one object per line; blank lines are skipped."""
    with pathlib.Path(path).open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            if line.strip():
                yield parse_event(line, lineno)
