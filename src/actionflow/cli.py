# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from .config import DEFAULT_WORKFLOW_FILE, RunConfig
from .dag import schedule
from .errors import DependencyCycleError, LintError, WorkflowError
from .runner import load_workflow, plan, run_workflow
from .ui.console import Console, get_console, set_console


def _fail(exc: WorkflowError) -> None:
    """Report a failed stage and exit with status 1."""
    console = get_console()
    if isinstance(exc, DependencyCycleError):
        console.print_cycle(exc.edges)
    elif isinstance(exc, LintError):
        # violations were already printed one by one as lint found them
        console.print_error("Workflow failed validation", str(exc))
    else:
        console.print_error(
            exc.kind.replace("_", " "),
            str(exc),
            suggestion=exc.details.get("hint"),
        )
    console.print_traceback()
    sys.exit(1)


def _compile(path: str, workflow_file: str):
    try:
        h = load_workflow(path, workflow_file)
        return h, schedule(h)
    except WorkflowError as e:
        _fail(e)


workflow_file_option = click.option(
    "--workflow-file",
    default=DEFAULT_WORKFLOW_FILE,
    show_default=True,
    envvar="ACTIONFLOW_WORKFLOW_FILE",
    help="Workflow file, relative to PATH when PATH is a directory",
)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """actionflow: validate, order and run main.workflow files locally."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("path", default=".", type=click.Path())
@workflow_file_option
def check(path, workflow_file):
    """Parse, resolve, lint and schedule a workflow without running it."""
    h, order = _compile(path, workflow_file)
    get_console().print_info(
        f"OK: workflow '{h.workflow.name}' with {len(h)} action(s)"
    )


@cli.command(name="plan")
@click.argument("path", default=".", type=click.Path())
@workflow_file_option
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the plan as JSON")
def plan_cmd(path, workflow_file, as_json):
    """Print the order in which actions would run."""
    h, order = _compile(path, workflow_file)
    execution_plan = plan(h, order)
    if as_json:
        click.echo(execution_plan.model_dump_json(indent=2))
        return
    get_console().print_plan(h.workflow.name, [a.name for a in execution_plan.order])


@cli.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@workflow_file_option
@click.option("-d", "--dry", "dry_run", is_flag=True, default=False, help="Print docker commands without running them")
@click.option("--docker", "docker_bin", default="docker", show_default=True, envvar="ACTIONFLOW_DOCKER", help="Docker binary")
@click.option("--keep-workspace", is_flag=True, default=False, help="Do not delete the temporary workspace afterwards")
def run(path, workflow_file, dry_run, docker_bin, keep_workspace):
    """Run the workflow in PATH, one container per action."""
    console = get_console()
    config = RunConfig(
        repo_dir=Path(path),
        workflow_file=workflow_file,
        dry_run=dry_run,
        docker_bin=docker_bin,
        keep_workspace=keep_workspace,
    )
    h, order = _compile(path, workflow_file)
    console.print_run_started(
        workflow=h.workflow.name,
        source=str(config.workflow_path),
        action_count=len(h),
        dry_run=dry_run,
    )

    try:
        code = run_workflow(h, order, config)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except WorkflowError as e:
        _fail(e)
    sys.exit(code)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
