# decoder.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from .errors import DuplicateKeyError, MissingRequiredKeyError, UnexpectedKeyError
from .model import ActionDef, Def, Span, WorkflowDef
from .syntax import BlockNode
from .values import (
    Value,
    as_list,
    as_list_or_singleton,
    as_list_or_split,
    as_map,
    as_string,
)

WORKFLOW_REQUIRED = ("on", "resolves")
ACTION_REQUIRED = ("uses",)

T = TypeVar("T")


def decode_body(node: BlockNode, required: Sequence[str]) -> Tuple[str, Dict[str, Value]]:
    """
    Collect a block's key/value pairs into a working map.

    Raises DuplicateKeyError on a repeated key and MissingRequiredKeyError
    if any of `required` is absent.
    """
    kvps: Dict[str, Value] = {}
    for pair in node.pairs:
        if pair.key in kvps:
            raise DuplicateKeyError(pair.key, pair.span)
        kvps[pair.key] = pair.value

    for key in required:
        if key not in kvps:
            raise MissingRequiredKeyError(key, node.span)

    return node.name, kvps


def _span_of(node: BlockNode, key: str) -> Span:
    return next((p.span for p in node.pairs if p.key == key), node.span)


def _check_consumed(node: BlockNode, kvps: Dict[str, Value]) -> None:
    # dicts keep insertion order, so this is the first leftover key in the source
    for key in kvps:
        raise UnexpectedKeyError(key, _span_of(node, key))


def decode_workflow(node: BlockNode) -> WorkflowDef:
    name, kvps = decode_body(node, WORKFLOW_REQUIRED)
    out = WorkflowDef(
        name=name,
        on=as_string(kvps.pop("on"), _span_of(node, "on")),
        resolves=as_list_or_singleton(kvps.pop("resolves"), _span_of(node, "resolves")),
        span=node.span,
    )
    _check_consumed(node, kvps)
    return out


def decode_action(node: BlockNode) -> ActionDef:
    name, kvps = decode_body(node, ACTION_REQUIRED)

    def take(key: str, project: Callable[[Value, Span], T], default: T) -> T:
        if key not in kvps:
            return default
        return project(kvps.pop(key), _span_of(node, key))

    out = ActionDef(
        name=name,
        uses=take("uses", as_string, ""),
        needs=take("needs", as_list_or_singleton, []),
        runs=take("runs", as_list_or_split, None),
        args=take("args", as_list_or_split, None),
        env=take("env", as_map, {}),
        secrets=take("secrets", as_list, []),
        span=node.span,
    )
    _check_consumed(node, kvps)
    return out


def decode_block(node: BlockNode) -> Def:
    if node.kind == "workflow":
        return decode_workflow(node)
    if node.kind == "action":
        return decode_action(node)
    raise ValueError(f"unknown block kind: {node.kind!r}")


def decode(nodes: Iterable[BlockNode]) -> List[Def]:
    """Decode every block, in source order."""
    return [decode_block(node) for node in nodes]
