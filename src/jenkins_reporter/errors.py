"""
Exceptions raised by the reporter.
"""


class ReporterError(Exception):
    """Base exception for all reporter errors."""
    pass


class EventFeedError(ReporterError):
    """Raised when a recorded event feed cannot be parsed."""

    def __init__(self, message: str, lineno: int = 0):
        self.lineno = lineno
        super().__init__(f"line {lineno}: {message}" if lineno else message)
