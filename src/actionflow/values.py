# values.py
"""
Typed projections of raw block values.

A value is exactly one of:
  - str                (a quoted string, quotes already stripped)
  - list[str]          (a bracketed list of strings)
  - dict[str, str]     (a braced set of ident = "string" pairs)
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Union

from .errors import TypeMismatchError
from .model import Span

Value = Union[str, List[str], Dict[str, str]]

_ASCII_WS = re.compile(r"[ \t\n\f\r]+")


def kind_of(value: Value) -> str:
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "map"
    raise TypeError(f"not a workflow value: {value!r}")


def as_list_or_singleton(value: Value, span: Optional[Span] = None) -> List[str]:
    """needs = "a" is the same as needs = ["a"]."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return list(value)
    raise TypeMismatchError("array or single string", kind_of(value), span)


def as_list_or_split(value: Value, span: Optional[Span] = None) -> List[str]:
    """runs = "a b c" is the same as runs = ["a", "b", "c"]."""
    if isinstance(value, str):
        return [item for item in _ASCII_WS.split(value) if item]
    if isinstance(value, list):
        return list(value)
    raise TypeMismatchError(
        "array or string with space-separated items", kind_of(value), span
    )


def as_string(value: Value, span: Optional[Span] = None) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError("string", kind_of(value), span)
    return value


def as_list(value: Value, span: Optional[Span] = None) -> List[str]:
    if not isinstance(value, list):
        raise TypeMismatchError("array", kind_of(value), span)
    return list(value)


def as_map(value: Value, span: Optional[Span] = None) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise TypeMismatchError("map", kind_of(value), span)
    return dict(value)
