"""Condition expressions for composite template components.

Conditions are parsed into a small AST and interpreted against the merged
composite context. Caller text is never compiled or executed.

Supported syntax:
- Literals: true, false, null, numbers, 'single' or "double" quoted strings
- Dotted lookups: isAuthenticated, user.role, features.auth.enabled
- Comparison: a == b, a != b
- Boolean operators: !expr, expr && expr, expr || expr
- Grouping: ( expr )

Precedence from loosest to tightest: ``||``, ``&&``, ``!``, ``==``/``!=``.

Example usage:
    >>> ConditionEvaluator().evaluate("isAuthenticated && user.role == 'admin'", ctx)
    True

A lookup whose first segment is not present in the context is an
evaluation error (the caller decides how lenient to be); a missing nested
segment evaluates to null.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Tuple, Union

from .errors import ConditionEvaluationError, ConditionSyntaxError


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Lookup:
    path: Tuple[str, ...]


@dataclass(frozen=True)
class Not:
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str  # "&&", "||", "==", "!="
    left: "Node"
    right: "Node"


Node = Union[Literal, Lookup, Not, BinaryOp]


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<op>&&|\|\||==|!=|!|\(|\))
    |(?P<number>-?\d+(?:\.\d+)?)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {"true": True, "false": False, "null": None}


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    pos: int


def _tokenize(expr: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(expr):
        match = _TOKEN_RE.match(expr, pos)
        if match is None:
            raise ConditionSyntaxError(expr, f"unexpected character {expr[pos]!r}", position=pos)
        kind = match.lastgroup or ""
        if kind != "ws":
            tokens.append(_Token(kind, match.group(kind), pos))
        pos = match.end()
    return tokens


def _unquote(raw: str) -> str:
    body = raw[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


# ---------------------------------------------------------------------------
# Parser (recursive descent)
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, expr: str) -> None:
        self.expr = expr
        self.tokens = _tokenize(expr)
        self.index = 0

    def _peek(self) -> Optional[_Token]:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _accept(self, *ops: str) -> Optional[_Token]:
        tok = self._peek()
        if tok is not None and tok.kind == "op" and tok.value in ops:
            self.index += 1
            return tok
        return None

    def parse(self) -> Node:
        if not self.tokens:
            raise ConditionSyntaxError(self.expr, "empty expression")
        node = self._or()
        tok = self._peek()
        if tok is not None:
            raise ConditionSyntaxError(self.expr, f"unexpected token {tok.value!r}", position=tok.pos)
        return node

    def _or(self) -> Node:
        node = self._and()
        while self._accept("||"):
            node = BinaryOp("||", node, self._and())
        return node

    def _and(self) -> Node:
        node = self._not()
        while self._accept("&&"):
            node = BinaryOp("&&", node, self._not())
        return node

    def _not(self) -> Node:
        if self._accept("!"):
            return Not(self._not())
        return self._comparison()

    def _comparison(self) -> Node:
        node = self._primary()
        tok = self._accept("==", "!=")
        if tok is not None:
            node = BinaryOp(tok.value, node, self._primary())
        return node

    def _primary(self) -> Node:
        tok = self._peek()
        if tok is None:
            raise ConditionSyntaxError(self.expr, "unexpected end of expression", position=len(self.expr))
        if tok.kind == "op" and tok.value == "(":
            self.index += 1
            node = self._or()
            if not self._accept(")"):
                raise ConditionSyntaxError(self.expr, "missing ')'", position=tok.pos)
            return node
        self.index += 1
        if tok.kind == "number":
            return Literal(float(tok.value) if "." in tok.value else int(tok.value))
        if tok.kind == "string":
            return Literal(_unquote(tok.value))
        if tok.kind == "ident":
            if tok.value in _KEYWORDS:
                return Literal(_KEYWORDS[tok.value])
            return Lookup(tuple(tok.value.split(".")))
        raise ConditionSyntaxError(self.expr, f"unexpected token {tok.value!r}", position=tok.pos)


@lru_cache(maxsize=256)
def parse_condition(expr: str) -> Node:
    """Parse ``expr`` into an AST (cached per expression string).

    Raises:
        ConditionSyntaxError: If the expression is malformed.
    """
    return _Parser(expr.strip()).parse()


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

_MISSING = object()


class ConditionEvaluator:
    """Evaluate condition expressions against a context mapping."""

    def evaluate(self, expr: str, context: Mapping[str, Any]) -> bool:
        """Evaluate ``expr`` to a boolean.

        Raises:
            ConditionSyntaxError: If the expression is malformed
            ConditionEvaluationError: If a top-level name is undefined
        """
        node = parse_condition(expr)
        return bool(self._eval(node, context, expr))

    def _eval(self, node: Node, context: Mapping[str, Any], expr: str) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Lookup):
            return self._lookup(node.path, context, expr)
        if isinstance(node, Not):
            return not self._eval(node.operand, context, expr)
        if node.op == "&&":
            return bool(self._eval(node.left, context, expr)) and bool(self._eval(node.right, context, expr))
        if node.op == "||":
            return bool(self._eval(node.left, context, expr)) or bool(self._eval(node.right, context, expr))
        left = self._eval(node.left, context, expr)
        right = self._eval(node.right, context, expr)
        if node.op == "==":
            return left == right
        return left != right

    def _lookup(self, path: Tuple[str, ...], context: Mapping[str, Any], expr: str) -> Any:
        head, rest = path[0], path[1:]
        current = context.get(head, _MISSING) if isinstance(context, Mapping) else _MISSING
        if current is _MISSING:
            raise ConditionEvaluationError(expr, f"'{head}' is not defined")
        for part in rest:
            if isinstance(current, Mapping):
                current = current.get(part)
            else:
                return None
            if current is None:
                return None
        return current


__all__ = [
    "Literal",
    "Lookup",
    "Not",
    "BinaryOp",
    "Node",
    "parse_condition",
    "ConditionEvaluator",
]
