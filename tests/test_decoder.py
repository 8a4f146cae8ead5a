"""Unit tests for block decoding."""

from __future__ import annotations

import pytest

from actionflow.decoder import decode
from actionflow.errors import (
    DuplicateKeyError,
    MissingRequiredKeyError,
    TypeMismatchError,
    UnexpectedKeyError,
)
from actionflow.model import ActionDef, WorkflowDef
from actionflow.syntax import parse


def _decode(text: str):
    return decode(parse(text))


def test_decodes_pipeline(pipeline_source: str) -> None:
    wf, build, test, deploy = _decode(pipeline_source)

    assert isinstance(wf, WorkflowDef)
    assert (wf.name, wf.on, wf.resolves) == ("ci", "push", ["deploy"])

    assert isinstance(build, ActionDef)
    assert build.runs == ["make", "build"]
    assert build.args is None
    assert build.needs == []

    assert test.needs == ["build"]
    assert test.args == ["make", "test --verbose"]
    assert test.runs is None

    assert deploy.env == {"TARGET": "prod"}
    assert deploy.secrets == ["DEPLOY_KEY"]


def test_resolves_accepts_single_string() -> None:
    (wf,) = _decode('workflow "w" { on = "push" resolves = "a" }')
    assert wf.resolves == ["a"]


def test_optional_action_fields_default() -> None:
    (act,) = _decode('action "a" { uses = "docker://x" }')
    assert act == ActionDef(name="a", uses="docker://x", span=act.span)
    assert act.runs is None and act.args is None
    assert act.env == {} and act.secrets == [] and act.needs == []


def test_explicitly_empty_lists_are_kept() -> None:
    (act,) = _decode('action "a" { uses = "docker://x" runs = [] args = [] }')
    assert act.runs == []
    assert act.args == []


def test_duplicate_key() -> None:
    with pytest.raises(DuplicateKeyError) as exc:
        _decode('action "a" {\n uses = "x"\n uses = "y"\n}')
    assert exc.value.key == "uses"
    assert exc.value.span.line == 3


@pytest.mark.parametrize(
    "text, key",
    [
        ('action "a" { needs = "b" }', "uses"),
        ('workflow "w" { resolves = "a" }', "on"),
        ('workflow "w" { on = "push" }', "resolves"),
    ],
)
def test_missing_required_key(text: str, key: str) -> None:
    with pytest.raises(MissingRequiredKeyError) as exc:
        _decode(text)
    assert exc.value.key == key


def test_unexpected_key_names_first_leftover() -> None:
    text = 'action "a" {\n uses = "x"\n zeta = "1"\n alpha = "2"\n}'
    with pytest.raises(UnexpectedKeyError) as exc:
        _decode(text)
    assert exc.value.key == "zeta"
    assert exc.value.span.line == 3


def test_workflow_rejects_action_keys() -> None:
    with pytest.raises(UnexpectedKeyError) as exc:
        _decode('workflow "w" { on = "push" resolves = "a" uses = "x" }')
    assert exc.value.key == "uses"


@pytest.mark.parametrize(
    "body",
    [
        'uses = ["docker://x"]',
        'uses = "x" env = "A=1"',
        'uses = "x" secrets = "TOKEN"',
        'uses = "x" needs = { a = "b" }',
        'uses = "x" runs = { a = "b" }',
        'uses = "x" args = { a = "b" }',
    ],
)
def test_malformed_values_fail_even_for_optional_fields(body: str) -> None:
    with pytest.raises(TypeMismatchError):
        _decode(f'action "a" {{ {body} }}')


def test_trigger_must_be_string() -> None:
    with pytest.raises(TypeMismatchError) as exc:
        _decode('workflow "w" { on = ["push"] resolves = "a" }')
    assert str(exc.value).endswith("expected string, got array")


def test_decoding_has_no_cross_block_knowledge() -> None:
    # unknown references and duplicate names are left to the builder
    defs = _decode('action "a" { uses = "x" needs = "ghost" } action "a" { uses = "y" }')
    assert [d.name for d in defs] == ["a", "a"]
