from datetime import timezone
from email.utils import format_datetime
from typing import Optional, TextIO

from ..config import ReporterConfig
from ..runners.suite import SuiteRecord, TestOutcome
from ..utils.escaping import html_escape

HOOK_FAILURE_MESSAGE = "Failed during before hook"

def seconds(ms: float) -> str:
    """Milliseconds as seconds, "0.005" for 5 and "2" for 2000."""
    value = ms / 1000
    return str(int(value)) if value.is_integer() else repr(value)

class JUnitReporter:
    """Streams suite snapshots as JUnit XML.

    Every suite boundary is wrapped in its own ``<testsuites>`` element, so a
    combined report is a sequence of wrapped fragments.
    """

    def __init__(self, cfg: ReporterConfig):
        self.cfg = cfg

    def start_document(self, out: Optional[TextIO]) -> None:
        self._write(out, f'<testsuites name="{html_escape(self.cfg.report_name)}">\n')

    def end_document(self, out: Optional[TextIO]) -> None:
        self._write(out, "</testsuites>\n")

    def emit(self, suite: SuiteRecord, out: Optional[TextIO]) -> None:
        if out is None:
            return
        count = suite.effective_test_count
        if count == 0:
            return
        title = html_escape(suite.title)
        stamp = format_datetime(suite.start.astimezone(timezone.utc), usegmt=True)
        w = out.write
        w(f'<testsuite name="{title}" tests="{count}" failures="{suite.failures}"'
          f' skipped="{suite.skipped}" timestamp="{stamp}"'
          f' time="{seconds(suite.duration_ms)}">\n')
        if not suite.tests and suite.failures > 0:
            w(f'<testcase classname="{title}" name="{title} before">\n')
            w(f'<failure message="{HOOK_FAILURE_MESSAGE}"/>\n')
            w("</testcase>\n")
        else:
            for test in suite.tests:
                self._emit_case(test, w)
        w("</testsuite>\n")

    def _emit_case(self, test: TestOutcome, w) -> None:
        w(f'<testcase classname="{html_escape(test.classname)}" name="{html_escape(test.title)}"'
          f' time="{seconds(test.duration_ms)}"')
        if test.failed:
            w(">\n")
            w(f'<failure message="{html_escape(test.failure_message)}">\n')
            w(html_escape(test.diff_text))
            w("\n</failure>\n")
            w("</testcase>\n")
        elif test.skipped:
            w(">\n<skipped/>\n</testcase>\n")
        else:
            w("/>\n")

    @staticmethod
    def _write(out: Optional[TextIO], text: str) -> None:
        if out is not None:
            out.write(text)
