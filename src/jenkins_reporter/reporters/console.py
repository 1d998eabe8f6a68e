from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from rich.console import Console
from rich.markup import escape

from ..events import FailureInfo, TestInfo

INDENT = "    "

@dataclass
class RunStats:
    passes: int = 0
    failures: int = 0
    pending: int = 0
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    failed: List[Tuple[TestInfo, Optional[FailureInfo]]] = field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        if self.start is None:
            return 0
        end = self.end or datetime.now(timezone.utc)
        return round((end - self.start).total_seconds() * 1000)

class ConsoleReporter:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def suite(self, title: str) -> None:
        self.console.print()
        self.console.print(f"  {escape(title)}")

    def suite_end(self, duration_ms: float, tests: int) -> None:
        self.console.print()
        self.console.print(f"  Suite duration: {duration_ms / 1000} s, Tests: {tests}")

    def passed(self, test: TestInfo) -> None:
        ms = int(test.duration or 0)
        color = {"slow": "red", "medium": "yellow"}.get(test.speed or "", "dim")
        self.console.print(f"{INDENT}  [green]✓[/] [dim]{escape(test.title)}: [/][{color}]{ms}ms[/]")

    def failed(self, n: int, test: TestInfo) -> None:
        self.console.print(f"{INDENT}[red]  {n}) {escape(test.title)}[/]")

    def pending(self, test: TestInfo) -> None:
        self.console.print(f"{INDENT}[green]  -[/][cyan] {escape(test.title)}[/]")

    def epilogue(self, stats: RunStats) -> None:
        c = self.console
        c.print()
        c.print(f"  [green]{stats.passes} passing[/] [dim]({stats.duration_ms}ms)[/]")
        if stats.pending:
            c.print(f"  [cyan]{stats.pending} pending[/]")
        if stats.failures:
            c.print(f"  [red]{stats.failures} failing[/]")
            for i, (test, err) in enumerate(stats.failed, 1):
                c.print()
                c.print(f"  {i}) {escape(test.full_title or test.title)}:")
                if err is not None and err.message:
                    c.print(f"     [red]{escape(err.message)}[/]")
        c.print()
