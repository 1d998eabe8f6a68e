from typing import Optional
import json
import typer
from .config import load_config, ReporterConfig
from .errors import EventFeedError
from .events import read_events
from .listener import JenkinsListener
from .logging import setup_logging

app = typer.Typer(add_completion=False, help="Jenkins reporter - stream JUnit XML from test run events")

def _resolve_config(config: Optional[str], junit: Optional[str], name: Optional[str],
                    stack: bool, sonar: bool, test_dir: Optional[str]) -> ReporterConfig:
    cfg = load_config(config) if config else ReporterConfig.from_env()
    overrides = {}
    if junit: overrides["report_path"] = junit
    if name: overrides["report_name"] = name
    if stack: overrides["include_stack"] = True
    if sonar: overrides["classname_from_file"] = True
    if test_dir: overrides["test_dir"] = test_dir
    return ReporterConfig.model_validate({**cfg.model_dump(), **overrides})

@app.command()
def replay(
    events: str = typer.Argument(..., help="JSON-lines file of recorded test events"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML (default: environment)"),
    junit: Optional[str] = typer.Option(None, "--junit", help="Report file, or existing directory for one file per suite"),
    name: Optional[str] = typer.Option(None, "--name", help="Report name"),
    stack: bool = typer.Option(False, "--stack", help="Include stack traces in failures"),
    sonar: bool = typer.Option(False, "--sonar", help="Use test file paths as classnames"),
    test_dir: Optional[str] = typer.Option(None, "--test-dir", help="Test root for --sonar classnames"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    setup_logging(log_level)
    cfg = _resolve_config(config, junit, name, stack, sonar, test_dir)
    listener = JenkinsListener(cfg)
    try:
        for event in read_events(events):
            listener.replay(event)
    except EventFeedError as e:
        raise typer.BadParameter(str(e), param_hint="EVENTS")
    except OSError as e:
        raise typer.BadParameter(f"cannot read {events}: {e.strerror}", param_hint="EVENTS")
    finally:
        listener.close()
    raise typer.Exit(code=0 if listener.stats.failures == 0 else 1)

@app.command("config")
def show_config(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML (default: environment)"),
    junit: Optional[str] = typer.Option(None, "--junit", help="Report file or directory"),
):
    cfg = _resolve_config(config, junit, None, False, False, None)
    typer.echo(json.dumps(cfg.model_dump(mode="json"), indent=2))
