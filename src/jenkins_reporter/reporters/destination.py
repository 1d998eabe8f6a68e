from enum import Enum
from typing import Dict, Optional, TextIO
import logging, pathlib

from ..config import ReporterConfig

log = logging.getLogger(__name__)

class DestinationMode(Enum):
    DISABLED = "disabled"
    FILE = "file"
    DIRECTORY = "directory"

class ReportDestination:
    """Owns the output handles for one run.

    FILE mode shares one handle across all suites; DIRECTORY mode opens
    ``<slug>.xml`` per suite and closes it when the suite is released.
    """

    def __init__(self, mode: DestinationMode, path: Optional[pathlib.Path] = None):
        self.mode = mode
        self.path = path
        self._shared: Optional[TextIO] = None
        self._handles: Dict[str, TextIO] = {}

    @classmethod
    def resolve(cls, cfg: ReporterConfig) -> "ReportDestination":
        if cfg.report_path is None:
            return cls(DestinationMode.DISABLED)
        path = pathlib.Path(cfg.report_path)
        if path.is_dir():
            return cls(DestinationMode.DIRECTORY, path)
        return cls(DestinationMode.FILE, path)

    def open(self) -> None:
        if self.mode is DestinationMode.FILE and self._shared is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._shared = self.path.open("w", encoding="utf-8")
            log.debug("Writing JUnit report to %s", self.path)

    def handle_for_suite(self, slug: str) -> Optional[TextIO]:
        if self.mode is DestinationMode.FILE:
            return self._shared
        if self.mode is DestinationMode.DIRECTORY and slug:
            handle = self.path.joinpath(f"{slug}.xml").open("w", encoding="utf-8")
            self._handles[slug] = handle
            return handle
        return None

    def current(self, slug: str) -> Optional[TextIO]:
        return self._shared if self.mode is DestinationMode.FILE else self._handles.get(slug)

    def release(self, slug: str) -> None:
        handle = self._handles.pop(slug, None)
        if handle is not None:
            handle.close()
        elif self._shared is not None:
            self._shared.flush()

    def close(self) -> None:
        for handle in self._handles.values():
            handle.close()
        self._handles.clear()
        if self._shared is not None:
            self._shared.close()
            self._shared = None
