# syntax.py
"""
Tokenizer and recursive-descent parser for `main.workflow` files.

    workflow "deploy" {
      on = "push"
      resolves = ["deploy"]
    }

    action "build" {
      uses = "docker://alpine"
      runs = "sh -c make"
      env = { MODE = "release" }
    }

The parser knows nothing about which keys a block accepts; it only produces
BlockNode objects for the decoder.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from .errors import WorkflowSyntaxError
from .model import Span
from .values import Value

BLOCK_KINDS = ("workflow", "action")

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<comment>(?:\#|//)[^\n]*)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<ident>[A-Za-z_][A-Za-z0-9_\-]*)
  | (?P<punct>[{}\[\]=,])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: str  # "string" | "ident" | "punct" | "eof"
    text: str
    span: Span


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: Value
    span: Span


@dataclass(frozen=True)
class BlockNode:
    kind: str
    name: str
    span: Span
    pairs: List[KeyValue] = field(default_factory=list)


def _unquote(literal: str) -> str:
    # Backslashes only keep an inner quote from closing the token; the body
    # is stored as written.
    return literal[1:-1]


def tokenize(text: str) -> Iterator[Token]:
    pos = 0
    line = 1
    line_start = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        span = Span(line, pos - line_start + 1)
        if m is None:
            if text[pos] == '"':
                raise WorkflowSyntaxError("unterminated string literal", span)
            raise WorkflowSyntaxError(f"unexpected character {text[pos]!r}", span)

        kind = m.lastgroup
        chunk = m.group()
        if kind not in ("ws", "comment"):
            yield Token(kind, chunk, span)

        newlines = chunk.count("\n")
        if newlines:
            line += newlines
            line_start = m.start() + chunk.rfind("\n") + 1
        pos = m.end()

    yield Token("eof", "", Span(line, pos - line_start + 1))


class _Parser:
    def __init__(self, text: str):
        self._tokens = list(tokenize(text))
        self._pos = 0

    # ---- token helpers ----

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _next(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.kind != "eof":
            self._pos += 1
        return tok

    def _describe(self, tok: Token) -> str:
        if tok.kind == "eof":
            return "end of input"
        return repr(tok.text)

    def _expect(self, kind: str, text: str | None = None) -> Token:
        tok = self._next()
        if tok.kind != kind or (text is not None and tok.text != text):
            wanted = repr(text) if text is not None else kind
            raise WorkflowSyntaxError(
                f"expected {wanted}, found {self._describe(tok)}", tok.span
            )
        return tok

    def _at(self, kind: str, text: str | None = None) -> bool:
        tok = self._peek()
        return tok.kind == kind and (text is None or tok.text == text)

    def _string(self) -> str:
        tok = self._expect("string")
        return _unquote(tok.text)

    # ---- grammar ----

    def parse(self) -> List[BlockNode]:
        blocks: List[BlockNode] = []
        while not self._at("eof"):
            blocks.append(self._block())
        return blocks

    def _block(self) -> BlockNode:
        head = self._next()
        if head.kind != "ident" or head.text not in BLOCK_KINDS:
            raise WorkflowSyntaxError(
                f"expected 'workflow' or 'action', found {self._describe(head)}",
                head.span,
            )
        name = self._string()
        self._expect("punct", "{")
        pairs: List[KeyValue] = []
        while not self._at("punct", "}"):
            pairs.append(self._pair())
        self._expect("punct", "}")
        return BlockNode(kind=head.text, name=name, span=head.span, pairs=pairs)

    def _pair(self) -> KeyValue:
        key = self._expect("ident")
        self._expect("punct", "=")
        return KeyValue(key=key.text, value=self._value(), span=key.span)

    def _value(self) -> Value:
        tok = self._peek()
        if tok.kind == "string":
            return self._string()
        if self._at("punct", "["):
            return self._array()
        if self._at("punct", "{"):
            return self._map()
        raise WorkflowSyntaxError(
            f"expected string, array or map, found {self._describe(tok)}", tok.span
        )

    def _array(self) -> List[str]:
        self._expect("punct", "[")
        items: List[str] = []
        while not self._at("punct", "]"):
            items.append(self._string())
            if not self._at("punct", ","):
                break
            self._next()
        self._expect("punct", "]")
        return items

    def _map(self) -> Dict[str, str]:
        self._expect("punct", "{")
        out: Dict[str, str] = {}
        while not self._at("punct", "}"):
            ident = self._expect("ident")
            self._expect("punct", "=")
            out[ident.text] = self._string()
            # commas between map entries are optional
            if self._at("punct", ","):
                self._next()
        self._expect("punct", "}")
        return out


def parse(text: str) -> List[BlockNode]:
    """Parse workflow source into an ordered list of blocks."""
    return _Parser(text).parse()
