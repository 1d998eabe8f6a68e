"""
Event listener driving the suite accumulator and the JUnit renderer.

The test engine calls one handler per lifecycle event. Only one suite is
open at a time; entering a suite (or ending the run) closes whichever suite
is still open, renders it and releases its output handle.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from rich.console import Console

from .config import ReporterConfig
from .events import Event, FailureInfo, SuiteInfo, TestInfo
from .reporters.console import ConsoleReporter, RunStats
from .reporters.destination import DestinationMode, ReportDestination
from .reporters.junit import JUnitReporter
from .runners.suite import SuiteAccumulator, SuiteRecord

log = logging.getLogger(__name__)


def _guarded(handler: Callable) -> Callable:
    """Log errors from an event handler instead of raising them into the engine."""
    @functools.wraps(handler)
    def wrapper(self, *args, **kwargs):
        try:
            return handler(self, *args, **kwargs)
        except Exception:
            log.exception("jenkins reporter: %s failed", handler.__name__)
            return None
    return wrapper


class JenkinsListener:
    """Streams JUnit XML for a test run, one suite at a time."""

    def __init__(self, config: Optional[ReporterConfig] = None,
                 console: Optional[Console] = None, clock: Optional[Callable[[], datetime]] = None):
        self.config = config or ReporterConfig.from_env()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.suites = SuiteAccumulator(self.config, clock=self.clock)
        self.renderer = JUnitReporter(self.config)
        self.echo = ConsoleReporter(console)
        self.destination = ReportDestination(DestinationMode.DISABLED)
        self.stats = RunStats()
        self._handlers = {
            "start": self.on_start,
            "end": self.on_end,
            "suite": self.on_suite,
            "test end": self.on_test_end,
            "pass": self.on_pass,
            "fail": self.on_fail,
            "pending": self.on_pending,
        }

    def dispatch(self, name: str, *payload) -> None:
        handler = self._handlers.get(name)
        if handler is None:
            log.debug("Ignoring unknown event %r", name)
            return
        handler(*payload)

    def replay(self, event: Event) -> None:
        self.dispatch(event.event, *event.payload())

    @_guarded
    def on_start(self) -> None:
        self.stats = RunStats(start=self.clock())
        self.destination = ReportDestination.resolve(self.config)
        self.destination.open()
        if self.destination.mode is DestinationMode.DISABLED:
            log.info("No report path configured; JUnit output disabled")

    @_guarded
    def close(self) -> None:
        """Flush the open suite, if any, and release every output handle."""
        try:
            self._end_suite()
        finally:
            self.destination.close()

    @_guarded
    def on_end(self) -> None:
        self.close()
        self.stats.end = self.clock()
        self.echo.epilogue(self.stats)

    @_guarded
    def on_suite(self, suite: SuiteInfo) -> None:
        self._end_suite()
        record = self.suites.open(suite)
        out = self.destination.handle_for_suite(record.slug)
        self.renderer.start_document(out)
        self.echo.suite(record.title)

    @_guarded
    def on_test_end(self, test: TestInfo) -> None:
        self.suites.add(test)

    @_guarded
    def on_pass(self, test: TestInfo) -> None:
        self.suites.record_pass()
        self.stats.passes += 1
        self.echo.passed(test)

    @_guarded
    def on_fail(self, test: TestInfo, error: Optional[FailureInfo] = None) -> None:
        n = self.suites.record_fail()
        self.stats.failures += 1
        self.stats.failed.append((test, error or test.err))
        self.echo.failed(n or self.stats.failures, test)

    @_guarded
    def on_pending(self, test: TestInfo) -> None:
        self.stats.pending += 1
        self.echo.pending(test)

    def _end_suite(self) -> Optional[SuiteRecord]:
        snapshot = self.suites.close()
        if snapshot is None:
            return None
        out = self.destination.current(snapshot.slug)
        self.echo.suite_end(snapshot.duration_ms, len(snapshot.tests))
        try:
            try:
                self.renderer.emit(snapshot, out)
            except Exception:
                log.exception("Failed to render suite %r", snapshot.title)
            self.renderer.end_document(out)
        finally:
            self.destination.release(snapshot.slug)
        return snapshot
