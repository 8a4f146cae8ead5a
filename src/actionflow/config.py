# config.py
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_WORKFLOW_FILE = ".github/main.workflow"

# Paths as seen from inside the action container
CONTAINER_WORKSPACE = "/github/workspace"
CONTAINER_HOME = "/github/home"
CONTAINER_EVENT_PATH = "/github/workflow/event.json"


class RunConfig(BaseModel):
    """Options for a local workflow run, filled in from the CLI."""
    repo_dir: Path = Field(default_factory=lambda: Path("."))
    workflow_file: str = DEFAULT_WORKFLOW_FILE
    dry_run: bool = False
    docker_bin: str = "docker"
    keep_workspace: bool = False

    @property
    def workflow_path(self) -> Path:
        return self.repo_dir / self.workflow_file
