"""Unit tests for the scheduler."""

from __future__ import annotations

import random

import pytest

from actionflow.dag import Traversal, Visit, build_graph, schedule
from actionflow.errors import DependencyCycleError
from actionflow.model import ActionId

from helpers import action, compiled


def _names(h, order):
    return [h.action(i).name for i in order]


def test_chain_runs_dependencies_first() -> None:
    h = compiled(
        action("build"),
        action("test", needs=[0]),
        action("deploy", needs=[1]),
        depends=[2],
    )
    assert _names(h, schedule(h)) == ["build", "test", "deploy"]


def test_declaration_order_breaks_ties() -> None:
    h = compiled(
        action("deploy", needs=[2, 1]),
        action("lint"),
        action("unit"),
    )
    # deploy's needs are followed in the order written
    assert _names(h, schedule(h)) == ["unit", "lint", "deploy"]


def test_disconnected_actions_are_included() -> None:
    h = compiled(action("a"), action("b"), action("c", needs=[0]))
    order = schedule(h)
    assert sorted(order) == [ActionId(0), ActionId(1), ActionId(2)]
    assert _names(h, order) == ["a", "b", "c"]


def test_shared_dependency_scheduled_once() -> None:
    h = compiled(
        action("setup"),
        action("lint", needs=[0]),
        action("unit", needs=[0]),
        action("package", needs=[1, 2]),
    )
    assert _names(h, schedule(h)) == ["setup", "lint", "unit", "package"]


def test_empty_action_table() -> None:
    assert schedule(compiled()) == []


@pytest.mark.parametrize("seed", range(20))
def test_random_dags_respect_every_edge(seed: int) -> None:
    rng = random.Random(seed)
    n = rng.randint(1, 30)
    # edges only point to lower "rank" so the graph is acyclic, then shuffle ids
    rank = list(range(n))
    rng.shuffle(rank)
    by_rank = {r: i for i, r in enumerate(rank)}
    actions = []
    for i in range(n):
        lower = [by_rank[r] for r in range(rank[i])]
        needs = rng.sample(lower, k=min(len(lower), rng.randint(0, 3)))
        actions.append(action(f"a{i}", needs=needs))
    h = compiled(*actions)

    order = schedule(h)

    assert sorted(i.index for i in order) == list(range(n))
    pos = {a: p for p, a in enumerate(order)}
    for a in h.action_ids():
        for dep in h.action(a).needs:
            assert pos[dep] < pos[a]


def test_two_node_cycle() -> None:
    h = compiled(action("a", needs=[1]), action("b", needs=[0]))
    with pytest.raises(DependencyCycleError) as exc:
        schedule(h)
    assert exc.value.cycle == ["a", "b"]
    assert exc.value.path == "a -> b -> a"
    assert exc.value.edges == [("a", "b"), ("b", "a")]


def test_self_dependency_is_a_cycle() -> None:
    h = compiled(action("a", needs=[0]))
    with pytest.raises(DependencyCycleError) as exc:
        schedule(h)
    assert exc.value.path == "a -> a"


def test_cycle_excludes_the_path_leading_into_it() -> None:
    h = compiled(
        action("x", needs=[1]),
        action("a", needs=[2]),
        action("b", needs=[3]),
        action("c", needs=[1]),
    )
    with pytest.raises(DependencyCycleError) as exc:
        schedule(h)
    assert exc.value.path == "a -> b -> c -> a"
    assert "a -> b -> c -> a" in str(exc.value)


def test_deep_chain_does_not_recurse() -> None:
    n = 20000
    actions = [action("a0")] + [action(f"a{i}", needs=[i - 1]) for i in range(1, n)]
    h = compiled(*actions)
    order = schedule(h)
    assert [i.index for i in order] == list(range(n))


def test_build_graph_follows_needs_order() -> None:
    h = compiled(action("a"), action("b"), action("c", needs=[1, 0]))
    assert build_graph(h) == [[], [], [1, 0]]


def test_traversal_state_machine() -> None:
    t = Traversal([[1], []])
    assert t.state == [Visit.UNVISITED, Visit.UNVISITED]

    t.push(0)
    assert t.state[0] is Visit.IN_PROGRESS
    assert t.position[0] == 0

    assert t.visit(1) is None
    assert t.state[1] is Visit.DONE
    assert t.order == [1]
    assert t.stack == [0]

    t.pop()
    assert t.state == [Visit.DONE, Visit.DONE]
    assert t.order == [1, 0]
    assert t.stack == []
