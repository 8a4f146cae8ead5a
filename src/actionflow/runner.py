# runner.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from . import builder, dag, decoder, lint, syntax
from .config import DEFAULT_WORKFLOW_FILE, RunConfig
from .errors import WorkflowNotFoundError, WorkflowUnreadableError
from .git_facts.git import head_sha
from .model import ActionId, CompiledWorkflow
from .step_workflows.docker import run_action
from .ui.console import get_console
from .workspace import prepare_workspace


# ----------------------------------------------------------------------
# Compilation
# ----------------------------------------------------------------------

def compile_workflow(text: str, report: Optional[lint.Report] = None) -> CompiledWorkflow:
    """
    parse -> decode -> resolve -> lint.

    Every stage raises a WorkflowError subclass; lint reports all of its
    violations before raising LintError.
    """
    nodes = syntax.parse(text)
    defs = decoder.decode(nodes)
    compiled = builder.build(defs)
    lint.lint(compiled, report)
    return compiled


def find_workflow_file(path: str | Path, workflow_file: str = DEFAULT_WORKFLOW_FILE) -> Path:
    """A workflow file path, or a repository dir holding `.github/main.workflow`."""
    p = Path(path).expanduser()
    if p.is_dir():
        p = p / workflow_file
    if not p.is_file():
        raise WorkflowNotFoundError(str(p))
    return p


def load_workflow(
    path: str | Path,
    workflow_file: str = DEFAULT_WORKFLOW_FILE,
    report: Optional[lint.Report] = None,
) -> CompiledWorkflow:
    wf_path = find_workflow_file(path, workflow_file)
    try:
        text = wf_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise WorkflowUnreadableError(
            str(wf_path), f"not valid UTF-8 at byte {e.start}"
        ) from e
    except OSError as e:
        raise WorkflowUnreadableError(str(wf_path), e.strerror or str(e)) from e
    return compile_workflow(text, report)


# ----------------------------------------------------------------------
# Plan (read-only view handed to the CLI / JSON output)
# ----------------------------------------------------------------------

class ActionView(BaseModel):
    id: int
    name: str
    uses: str
    needs: List[str] = Field(default_factory=list)
    runs: Optional[List[str]] = None
    args: Optional[List[str]] = None
    env: Dict[str, str] = Field(default_factory=dict)
    secrets: List[str] = Field(default_factory=list)


class ExecutionPlan(BaseModel):
    workflow: str
    on: str
    resolves: List[str]
    order: List[ActionView]


def plan(h: CompiledWorkflow, order: Optional[Sequence[ActionId]] = None) -> ExecutionPlan:
    if order is None:
        order = dag.schedule(h)

    def name_of(action_id: ActionId) -> str:
        return h.action(action_id).name

    views = []
    for action_id in order:
        act = h.action(action_id)
        views.append(ActionView(
            id=action_id.index,
            name=act.name,
            uses=act.uses,
            needs=[name_of(d) for d in act.needs],
            runs=act.runs,
            args=act.args,
            env=act.env,
            secrets=act.secrets,
        ))

    return ExecutionPlan(
        workflow=h.workflow.name,
        on=h.workflow.on.value,
        resolves=[name_of(d) for d in h.workflow.depends],
        order=views,
    )


# ----------------------------------------------------------------------
# Execution
# ----------------------------------------------------------------------

def run_workflow(
    h: CompiledWorkflow,
    order: Sequence[ActionId],
    config: RunConfig,
    *,
    commit: Optional[str] = None,
) -> int:
    """
    Run actions one at a time in `order`.

    Returns 0 if every action succeeded, otherwise the exit code of the
    first failing container (later actions are not started).
    """
    console = get_console()
    if commit is None:
        commit = head_sha(config.repo_dir)
    console.print_debug(f"GITHUB_SHA={commit}")

    with prepare_workspace(config.repo_dir, keep=config.keep_workspace) as ws:
        console.print_debug(f"workspace={ws.workspace_dir} home={ws.home_dir}")
        for action_id in order:
            act = h.action(action_id)
            code = run_action(
                h,
                act,
                commit=commit,
                workspace_dir=ws.workspace_dir,
                home_dir=ws.home_dir,
                docker_bin=config.docker_bin,
                dry_run=config.dry_run,
            )
            if code != 0:
                console.print_failure(act.name, code)
                return code
    return 0
