from pathlib import Path

import pytest

from jenkins_reporter.config import ReporterConfig
from jenkins_reporter.events import FailureInfo, SuiteInfo, TestInfo
from jenkins_reporter.runners.suite import (
    SuiteAccumulator,
    TestStatus,
    build_outcome,
    classname_for,
    slugify,
)

from conftest import FakeClock, START


@pytest.mark.parametrize("title, slug", [
    ("My Suite!", "my_suite_"),
    ("  Math  ", "math"),
    ("A -- B", "a_b"),
    ("", ""),
])
def test_slugify(title, slug) -> None:
    assert slugify(title) == slug


def test_accumulator_close_snapshot() -> None:
    acc = SuiteAccumulator(ReporterConfig(), clock=FakeClock(step_ms=1500))
    acc.open(SuiteInfo(title="Math"))
    acc.add(TestInfo(title="add", duration=5, state="passed"))
    acc.record_pass()
    snap = acc.close()

    assert acc.current is None
    assert snap.slug == "math"
    assert snap.start == START
    assert snap.duration_ms == 1500
    assert [t.title for t in snap.tests] == ["add"]
    assert snap.passes == 1 and snap.failures == 0


def test_accumulator_without_open_suite_is_a_no_op() -> None:
    acc = SuiteAccumulator(ReporterConfig())
    assert acc.add(TestInfo(title="stray")) is None
    assert acc.record_pass() == 0
    assert acc.record_fail() == 0
    assert acc.close() is None


def test_empty_suite_closes_to_empty_snapshot() -> None:
    acc = SuiteAccumulator(ReporterConfig())
    acc.open(SuiteInfo(title="Nothing"))
    snap = acc.close()
    assert snap.effective_test_count == 0
    assert snap.skipped == 0


def test_counts_reconcile_with_hook_failure() -> None:
    acc = SuiteAccumulator(ReporterConfig())
    acc.open(SuiteInfo(title="Broken"))
    acc.record_fail()
    snap = acc.close()
    assert snap.tests == ()
    assert snap.effective_test_count == 1
    assert snap.skipped == 0


def test_pending_tests_count_as_skipped() -> None:
    acc = SuiteAccumulator(ReporterConfig())
    acc.open(SuiteInfo(title="Mixed"))
    acc.add(TestInfo(title="a", state="passed"))
    acc.record_pass()
    acc.add(TestInfo(title="b"))
    acc.add(TestInfo(title="c", state="failed", err=FailureInfo(message="x")))
    acc.record_fail()
    snap = acc.close()
    assert snap.effective_test_count == 3
    assert snap.skipped == 1
    assert [t.status for t in snap.tests] == [TestStatus.PASSED, TestStatus.PENDING, TestStatus.FAILED]


def test_build_outcome_tolerates_missing_fields() -> None:
    outcome = build_outcome(TestInfo(title="t", state="failed"), "Suite", ReporterConfig())
    assert outcome.failed
    assert outcome.duration_ms == 0
    assert outcome.failure_message == ""
    assert outcome.diff_text == ""


def test_build_outcome_failure_diff() -> None:
    test = TestInfo(title="sub", duration=3, state="failed",
                    err=FailureInfo(message="expected 2 to equal 3", actual=2, expected=3))
    outcome = build_outcome(test, "Math", ReporterConfig())
    assert outcome.failure_message == "expected 2 to equal 3"
    assert outcome.diff_text == "-2\n+3"
    assert outcome.classname == "Math"


def test_classname_from_file(tmp_path: Path) -> None:
    cfg = ReporterConfig(classname_from_file=True, cwd=tmp_path)
    test = TestInfo(title="t", file=str(tmp_path / "test" / "unit" / "math.spec.js"))
    assert classname_for(test, "Math", cfg) == str(Path("unit") / "math.spec")


def test_classname_from_file_custom_test_dir(tmp_path: Path) -> None:
    cfg = ReporterConfig(classname_from_file=True, cwd=tmp_path, test_dir="spec")
    assert classname_for(TestInfo(title="t", file="spec/io.js"), "IO", cfg) == "io"


def test_classname_from_file_falls_back_to_suite_title(tmp_path: Path) -> None:
    cfg = ReporterConfig(classname_from_file=True, cwd=tmp_path)
    assert classname_for(TestInfo(title="t"), "Math", cfg) == "Math"
