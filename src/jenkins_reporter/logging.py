import logging
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "jenkins_reporter"

def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    # stderr only; stdout carries the test echo.
    handler = RichHandler(console=console or Console(stderr=True), rich_tracebacks=True, show_path=False)
    logging.basicConfig(level=level.upper(), format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    return logging.getLogger(LOGGER_NAME)
