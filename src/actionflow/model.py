# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Span:
    """1-based line/column of a node in the workflow source."""
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ---------------------------------------------------------------------
# Block records (decoded, not yet resolved)
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowDef:
    name: str
    on: str
    resolves: List[str]
    span: Optional[Span] = None


@dataclass(frozen=True)
class ActionDef:
    name: str
    uses: str
    needs: List[str] = field(default_factory=list)
    runs: Optional[List[str]] = None
    args: Optional[List[str]] = None
    env: Dict[str, str] = field(default_factory=dict)
    secrets: List[str] = field(default_factory=list)
    span: Optional[Span] = None


Def = Union[WorkflowDef, ActionDef]


# ---------------------------------------------------------------------
# Resolved representation
# ---------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class ActionId:
    """Index into CompiledWorkflow's action table."""
    index: int

    def __repr__(self) -> str:
        return f"ActionId({self.index})"


class Event(str, Enum):
    PUSH = "push"


@dataclass(frozen=True)
class Workflow:
    name: str
    on: Event
    depends: Tuple[ActionId, ...] = ()


@dataclass(frozen=True)
class Action:
    """
    A resolved action: one container invocation.

    `runs`/`args` stay None when the block did not declare them, which is
    distinct from an explicitly empty list (rejected by lint).
    """
    name: str
    uses: str
    runs: Optional[List[str]] = None
    args: Optional[List[str]] = None
    needs: Tuple[ActionId, ...] = ()
    env: Dict[str, str] = field(default_factory=dict)
    secrets: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CompiledWorkflow:
    """The single workflow plus its action table, indexed by ActionId."""
    workflow: Workflow
    _actions: Tuple[Action, ...]

    def action(self, action_id: ActionId) -> Action:
        return self._actions[action_id.index]

    def actions(self) -> Iterator[Action]:
        return iter(self._actions)

    def action_ids(self) -> List[ActionId]:
        return [ActionId(i) for i in range(len(self._actions))]

    def __len__(self) -> int:
        return len(self._actions)
