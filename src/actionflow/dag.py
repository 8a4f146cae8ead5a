# dag.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import DependencyCycleError
from .model import ActionId, CompiledWorkflow


def build_graph(h: CompiledWorkflow) -> List[List[int]]:
    """
    Build the "needs" graph as an adjacency list.

    graph[i] lists the indices action i needs, in declaration order.
    """
    return [[dep.index for dep in act.needs] for act in h.actions()]


class Visit(Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class Traversal:
    """
    Explicit depth-first search state.

    `position[i]` is the index of node i on `stack` while it is IN_PROGRESS,
    which is where a cycle through i starts. `cursor` runs parallel to
    `stack` and holds the next edge to follow for each frame.
    """
    graph: List[List[int]]
    state: List[Visit] = field(init=False)
    position: List[int] = field(init=False)
    stack: List[int] = field(default_factory=list)
    cursor: List[int] = field(default_factory=list)
    order: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        n = len(self.graph)
        self.state = [Visit.UNVISITED] * n
        self.position = [-1] * n

    def push(self, node: int) -> None:
        self.state[node] = Visit.IN_PROGRESS
        self.position[node] = len(self.stack)
        self.stack.append(node)
        self.cursor.append(0)

    def pop(self) -> None:
        node = self.stack.pop()
        self.cursor.pop()
        self.order.append(node)
        self.state[node] = Visit.DONE
        self.position[node] = -1

    def cycle_from(self, node: int) -> List[int]:
        return self.stack[self.position[node]:]

    def visit(self, root: int) -> Optional[List[int]]:
        """DFS from root. Returns the nodes of a cycle if one is reached, else None."""
        base = len(self.stack)
        self.push(root)
        while len(self.stack) > base:
            top = self.stack[-1]
            edges = self.graph[top]
            i = self.cursor[-1]
            if i == len(edges):
                # every dependency of `top` is already in `order`
                self.pop()
                continue
            self.cursor[-1] = i + 1
            dep = edges[i]
            dep_state = self.state[dep]
            if dep_state is Visit.DONE:
                continue
            if dep_state is Visit.IN_PROGRESS:
                return self.cycle_from(dep)
            self.push(dep)
        return None


def schedule(h: CompiledWorkflow) -> List[ActionId]:
    """
    Return every action id once, each after all the actions it needs.

    Ties are broken by declaration order: roots are tried in source order
    and each action's `needs` are followed in the order written.
    Raises DependencyCycleError naming the loop if the graph has a cycle.
    """
    traversal = Traversal(build_graph(h))
    for root in range(len(traversal.graph)):
        if traversal.state[root] is not Visit.UNVISITED:
            continue
        cycle = traversal.visit(root)
        if cycle is not None:
            raise DependencyCycleError([h.action(ActionId(i)).name for i in cycle])

    return [ActionId(i) for i in traversal.order]
