"""
Streaming JUnit XML reporter for test run events.
"""

from jenkins_reporter.config import ReporterConfig
from jenkins_reporter.listener import JenkinsListener

__all__ = [
    "JenkinsListener",
    "ReporterConfig",
]
