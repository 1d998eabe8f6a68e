from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple
import os, re

from ..config import ReporterConfig
from ..events import SuiteInfo, TestInfo
from ..utils.diff import unified_diff

_SLUG_RE = re.compile(r"[^a-z0-9]+")

def slugify(title: str) -> str:
    """File name / key for a suite: "My Suite!" -> "my_suite_"."""
    return _SLUG_RE.sub("_", title.lower().strip())

def _now() -> datetime:
    return datetime.now(timezone.utc)

class TestStatus(Enum):
    __test__ = False
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"

@dataclass(frozen=True)
class TestOutcome:
    __test__ = False
    title: str
    classname: str
    duration_ms: float = 0
    status: TestStatus = TestStatus.PENDING
    failure_message: str = ""
    diff_text: str = ""

    @property
    def failed(self) -> bool: return self.status is TestStatus.FAILED
    @property
    def skipped(self) -> bool: return self.status is TestStatus.PENDING

def classname_for(test: TestInfo, suite_title: str, cfg: ReporterConfig) -> str:
    """Suite title, or the test file relative to the test root without extension."""
    if cfg.classname_from_file and test.file:
        rel = os.path.relpath(os.path.join(cfg.cwd, test.file), cfg.test_root)
        return os.path.splitext(rel)[0]
    return suite_title

def build_outcome(test: TestInfo, suite_title: str, cfg: ReporterConfig) -> TestOutcome:
    status = TestStatus(test.state) if test.state else TestStatus.PENDING
    message = diff = ""
    if status is TestStatus.FAILED and test.err is not None:
        message = test.err.message or ""
        diff = unified_diff(test.err, include_stack=cfg.include_stack)
    return TestOutcome(
        title=test.title,
        classname=classname_for(test, suite_title, cfg),
        duration_ms=test.duration or 0,
        status=status,
        failure_message=message,
        diff_text=diff,
    )

@dataclass(frozen=True)
class SuiteRecord:
    slug: str
    title: str
    start: datetime
    duration_ms: float = 0
    passes: int = 0
    failures: int = 0
    tests: Tuple[TestOutcome, ...] = ()

    @property
    def effective_test_count(self) -> int:
        # A suite failing in a before hook has failures but no completed tests.
        return max(len(self.tests), self.passes + self.failures)
    @property
    def skipped(self) -> int:
        return max(self.effective_test_count - self.failures - self.passes, 0)

@dataclass
class _OpenSuite:
    slug: str
    title: str
    start: datetime
    passes: int = 0
    failures: int = 0
    tests: List[TestOutcome] = field(default_factory=list)

class SuiteAccumulator:
    """Single-slot register holding the suite currently being reported.

    Nested suites are flattened: opening a suite while another is open is the
    caller's cue to close the previous one first.
    """

    def __init__(self, cfg: ReporterConfig, clock=_now):
        self.cfg = cfg
        self.clock = clock
        self._open: Optional[_OpenSuite] = None

    @property
    def current(self) -> Optional[_OpenSuite]:
        return self._open

    def open(self, suite: SuiteInfo) -> _OpenSuite:
        title = suite.full_title
        self._open = _OpenSuite(slug=slugify(title), title=title, start=self.clock())
        return self._open

    def add(self, test: TestInfo) -> Optional[TestOutcome]:
        if self._open is None:
            return None
        outcome = build_outcome(test, self._open.title, self.cfg)
        self._open.tests.append(outcome)
        return outcome

    def record_pass(self) -> int:
        if self._open is None:
            return 0
        self._open.passes += 1
        return self._open.passes

    def record_fail(self) -> int:
        if self._open is None:
            return 0
        self._open.failures += 1
        return self._open.failures

    def close(self) -> Optional[SuiteRecord]:
        if self._open is None:
            return None
        s, self._open = self._open, None
        elapsed = round((self.clock() - s.start).total_seconds() * 1000)
        return SuiteRecord(slug=s.slug, title=s.title, start=s.start, duration_ms=elapsed,
                           passes=s.passes, failures=s.failures, tests=tuple(s.tests))
