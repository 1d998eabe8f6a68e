from pydantic import BaseModel, ConfigDict, Field
from typing import Mapping, Optional
import os, yaml, pathlib

ENV_REPORT_PATH = "JUNIT_REPORT_PATH"
ENV_REPORT_NAME = "JUNIT_REPORT_NAME"
ENV_REPORT_STACK = "JUNIT_REPORT_STACK"
ENV_ENABLE_SONAR = "JENKINS_REPORTER_ENABLE_SONAR"
ENV_TEST_DIR = "JENKINS_REPORTER_TEST_DIR"

def env_flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() not in ("0", "false", "no")

class ReporterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    report_path: Optional[pathlib.Path] = Field(None, description="Report file, or an existing directory for one file per suite")
    report_name: str = Field("Mocha Tests", description="name attribute of <testsuites>")
    include_stack: bool = Field(False, description="Append stack traces to failure bodies")
    classname_from_file: bool = Field(False, description="Derive classname from the test file path")
    test_dir: pathlib.Path = Field(pathlib.Path("test"), description="Test root, relative to cwd")
    cwd: pathlib.Path = Field(default_factory=pathlib.Path.cwd)

    @property
    def test_root(self) -> pathlib.Path:
        return self.cwd / self.test_dir

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ReporterConfig":
        env = os.environ if environ is None else environ
        data = {
            "report_path": env.get(ENV_REPORT_PATH) or None,
            "report_name": env.get(ENV_REPORT_NAME) or "Mocha Tests",
            "include_stack": env_flag(env.get(ENV_REPORT_STACK)),
            "classname_from_file": env_flag(env.get(ENV_ENABLE_SONAR)),
            "test_dir": env.get(ENV_TEST_DIR) or "test",
        }
        data.update(overrides)
        return cls.model_validate(data)

def load_config(path: str) -> ReporterConfig:
    data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    return ReporterConfig.model_validate(data)
