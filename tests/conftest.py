"""
Shared test configuration for aicli.

Provides:
- Temporary llm-functions directories with manifests and declarations
- A fake ProcessRunner that records argv instead of spawning processes
- Isolation from the developer's real environment variables
"""

import json
import logging
import os
import stat
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from aicli.integrations.process import ProcessResult

ENV_VARS = ("AICHAT_MODEL", "OPENAI_API_KEY", "LLM_FUNCTIONS_DIR", "LOG_LEVEL")


class FakeRunner:
    """Stand-in for ProcessRunner that records calls and replays canned results."""

    def __init__(self, results: Optional[List[ProcessResult]] = None):
        self.calls: List[Dict] = []
        self.results = list(results or [])

    def queue(self, code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.results.append(ProcessResult(code=code, stdout=stdout, stderr=stderr))

    def run(self, argv, cwd=None, env=None) -> ProcessResult:
        self.calls.append({"argv": [str(a) for a in argv], "cwd": cwd})
        if self.results:
            return self.results.pop(0)
        return ProcessResult(code=0, stdout="", stderr="")

    def probe(self, argv) -> bool:
        return self.run(argv).ok

    @property
    def last_argv(self) -> List[str]:
        return self.calls[-1]["argv"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests independent of the developer's aicli environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_aicli_logger():
    """Undo configure_logging() so caplog sees aicli records in every test."""
    yield
    logger = logging.getLogger("aicli")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def functions_dir(tmp_path) -> Path:
    """An llm-functions checkout with manifests, declarations and two binaries."""
    root = tmp_path / "llm-functions"
    (root / "bin").mkdir(parents=True)
    (root / "tools.txt").write_text(
        "# tools\nget_current_weather.sh\n\n  execute_command.sh  \n#disabled.sh\n",
        encoding="utf-8",
    )
    (root / "agents.txt").write_text("todo\ncoder\n", encoding="utf-8")
    (root / "functions.json").write_text(
        json.dumps(
            [
                {
                    "name": "get_current_weather",
                    "description": "Get the current weather in a given location.",
                    "parameters": {
                        "type": "object",
                        "properties": {"location": {"type": "string"}},
                        "required": ["location"],
                    },
                }
            ]
        ),
        encoding="utf-8",
    )
    for name in ("get_current_weather.sh", "todo"):
        script = root / "bin" / name
        script.write_text("#!/bin/sh\necho \"$@\"\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return root


@pytest.fixture
def config_file(tmp_path) -> Path:
    return tmp_path / "aicli" / "config.json"


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Add default markers based on test location."""
    for item in items:
        test_path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in test_path:
            item.add_marker(pytest.mark.unit)
        elif f"{os.sep}integration{os.sep}" in test_path:
            item.add_marker(pytest.mark.integration)
