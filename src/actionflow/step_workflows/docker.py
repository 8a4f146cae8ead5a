# step_workflows/docker.py
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, List

from ..config import CONTAINER_EVENT_PATH, CONTAINER_HOME, CONTAINER_WORKSPACE
from ..errors import DockerUnavailableError, UnsupportedImageError
from ..model import Action, CompiledWorkflow
from ..ui.console import get_console

IMAGE_PREFIX = "docker://"


# ---------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------

def docker_image(action: Action) -> str:
    """Only pre-built images are supported: `uses = "docker://alpine:3.9"`."""
    if not action.uses.startswith(IMAGE_PREFIX):
        raise UnsupportedImageError(action.name, action.uses)
    return action.uses[len(IMAGE_PREFIX):]


def action_env(h: CompiledWorkflow, action: Action, commit: str) -> Dict[str, str]:
    """
    The action's own env with the runner's variables merged over it.

    Reserved variables win over user-declared ones of the same name.
    """
    env = dict(action.env)
    env.update({
        "HOME": CONTAINER_HOME,
        "GITHUB_WORKFLOW": h.workflow.name,
        "GITHUB_ACTION": action.name,
        "GITHUB_EVENT_NAME": h.workflow.on.value,
        "GITHUB_EVENT_PATH": CONTAINER_EVENT_PATH,
        "GITHUB_WORKSPACE": CONTAINER_WORKSPACE,
        "GITHUB_SHA": commit,
        "GH_ACTIONS_RUNNER_LOCAL": "1",
    })
    return env


def docker_command(
    h: CompiledWorkflow,
    action: Action,
    *,
    commit: str,
    workspace_dir: Path,
    home_dir: Path,
    docker_bin: str = "docker",
) -> List[str]:
    """Build the full `docker run` argv for one action."""
    image = docker_image(action)
    cmd = [docker_bin, "run", "--rm"]

    for key, value in action_env(h, action, commit).items():
        cmd.extend(["--env", f"{key}={value}"])

    cmd.extend(["--workdir", CONTAINER_WORKSPACE])
    cmd.extend(["--volume", f"{workspace_dir}:{CONTAINER_WORKSPACE}"])
    cmd.extend(["--volume", f"{home_dir}:{CONTAINER_HOME}"])

    # runs replaces the image entrypoint; args are appended after it
    if action.runs:
        argv = [*action.runs, *(action.args or [])]
        cmd.extend(["--entrypoint", argv[0]])
        trailing = argv[1:]
    else:
        trailing = list(action.args or [])

    cmd.append(image)
    cmd.extend(trailing)
    return cmd


# ---------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------

def run_action(
    h: CompiledWorkflow,
    action: Action,
    *,
    commit: str,
    workspace_dir: Path,
    home_dir: Path,
    docker_bin: str = "docker",
    dry_run: bool = False,
) -> int:
    """Run one action in a container and return docker's exit code (0 on dry run)."""
    console = get_console()
    console.print_action_start(action.name)
    console.print_image(docker_image(action))

    cmd = docker_command(
        h,
        action,
        commit=commit,
        workspace_dir=workspace_dir,
        home_dir=home_dir,
        docker_bin=docker_bin,
    )
    console.print_command(cmd)
    if dry_run:
        return 0

    # output streams straight to the terminal
    try:
        proc = subprocess.run(cmd, shell=False)
    except FileNotFoundError as e:
        raise DockerUnavailableError(docker_bin) from e
    return proc.returncode
