"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from actionflow.ui.console import Console, set_console

PIPELINE = """
workflow "ci" {
  on = "push"
  resolves = ["deploy"]
}

action "build" {
  uses = "docker://alpine:3.9"
  runs = "make build"
}

action "test" {
  uses = "docker://alpine:3.9"
  needs = "build"
  args = ["make", "test --verbose"]
}

action "deploy" {
  uses = "docker://alpine:3.9"
  needs = ["test"]
  env = { TARGET = "prod" }
  secrets = ["DEPLOY_KEY"]
}
"""


@pytest.fixture(autouse=True)
def fresh_console() -> Console:
    """Each test gets its own non-debug console."""
    console = Console()
    set_console(console)
    return console


@pytest.fixture
def pipeline_source() -> str:
    return PIPELINE


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[str], Path]:
    """Create a repository dir with `.github/main.workflow` holding the given text."""

    def _make(text: str) -> Path:
        repo = tmp_path / "repo"
        (repo / ".github").mkdir(parents=True, exist_ok=True)
        (repo / ".github" / "main.workflow").write_text(text, encoding="utf-8")
        (repo / "README.md").write_text("hello\n", encoding="utf-8")
        return repo

    return _make
