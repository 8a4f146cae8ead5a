# builder.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .errors import (
    DuplicateActionNameError,
    MissingWorkflowError,
    MultipleWorkflowError,
    UnknownActionReferenceError,
    UnknownTriggerError,
)
from .model import Action, ActionDef, ActionId, CompiledWorkflow, Def, Event, Workflow, WorkflowDef

TRIGGERS: Dict[str, Event] = {
    "push": Event.PUSH,
}


class IdTable:
    """Action name -> ActionId, assigned densely in first-declaration order."""

    def __init__(self) -> None:
        self._ids: Dict[str, ActionId] = {}

    def get(self, name: str) -> Optional[ActionId]:
        return self._ids.get(name)

    def feed(self, name: str) -> tuple[bool, ActionId]:
        """Returns (inserted, id). An already-known name is not re-assigned."""
        existing = self._ids.get(name)
        if existing is not None:
            return False, existing
        new_id = ActionId(len(self._ids))
        self._ids[name] = new_id
        return True, new_id

    def __len__(self) -> int:
        return len(self._ids)


def assign_ids(defs: Sequence[Def]) -> IdTable:
    """Pass 1: give every action an id; duplicates are rejected."""
    table = IdTable()
    for d in defs:
        if isinstance(d, ActionDef):
            inserted, _ = table.feed(d.name)
            if not inserted:
                raise DuplicateActionNameError(d.name, d.span)
    return table


def _resolve_names(table: IdTable, names: Sequence[str], referrer: str, span) -> tuple[ActionId, ...]:
    resolved: List[ActionId] = []
    for name in names:
        action_id = table.get(name)
        if action_id is None:
            raise UnknownActionReferenceError(referrer, name, span)
        resolved.append(action_id)
    return tuple(resolved)


def _resolve_workflow(table: IdTable, d: WorkflowDef) -> Workflow:
    on = TRIGGERS.get(d.on)
    if on is None:
        raise UnknownTriggerError(d.on, d.span)
    depends = _resolve_names(table, d.resolves, f"workflow {d.name}", d.span)
    return Workflow(name=d.name, on=on, depends=depends)


def _resolve_action(table: IdTable, d: ActionDef) -> Action:
    needs = _resolve_names(table, d.needs, f"action {d.name}", d.span)
    return Action(
        name=d.name,
        uses=d.uses,
        runs=d.runs,
        args=d.args,
        needs=needs,
        env=d.env,
        secrets=d.secrets,
    )


def build(defs: Sequence[Def]) -> CompiledWorkflow:
    """
    Resolve decoded blocks into a CompiledWorkflow.

    Two passes: ids are assigned for every action first, so `needs` and
    `resolves` may refer to actions declared further down the file.
    """
    table = assign_ids(defs)

    workflow: Optional[Workflow] = None
    actions: List[Action] = []
    for d in defs:
        if isinstance(d, WorkflowDef):
            if workflow is not None:
                raise MultipleWorkflowError(d.span)
            workflow = _resolve_workflow(table, d)
        else:
            actions.append(_resolve_action(table, d))

    if workflow is None:
        raise MissingWorkflowError()

    return CompiledWorkflow(workflow=workflow, _actions=tuple(actions))
