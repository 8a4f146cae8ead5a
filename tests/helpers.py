from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from actionflow.model import Action, ActionId, CompiledWorkflow, Event, Workflow


def compiled(*actions: Action, name: str = "wf", depends: Sequence[int] = ()) -> CompiledWorkflow:
    """Build a CompiledWorkflow by hand, bypassing the parser."""
    return CompiledWorkflow(
        workflow=Workflow(name=name, on=Event.PUSH, depends=tuple(ActionId(i) for i in depends)),
        _actions=tuple(actions),
    )


def action(
    name: str,
    *,
    needs: Sequence[int] = (),
    uses: str = "docker://alpine",
    runs: Optional[List[str]] = None,
    args: Optional[List[str]] = None,
    env: Optional[Dict[str, str]] = None,
    secrets: Optional[List[str]] = None,
) -> Action:
    return Action(
        name=name,
        uses=uses,
        runs=runs,
        args=args,
        needs=tuple(ActionId(i) for i in needs),
        env=env or {},
        secrets=secrets or [],
    )
