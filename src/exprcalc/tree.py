"""Shared helpers for working with the Tree/Token AST built by the parser.

The AST uses Lark's node classes: interior nodes are ``Tree`` instances
labelled ``program``, ``statement``, ``dyadic``, ``conditional``, ``call`` and
``args``; leaves are ``Token`` instances of type ``NUMBER``, ``STRING``,
``IDENT`` and ``OPERATOR``.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import List, Optional, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]

ADDITIVE_OPS = frozenset({'+', '-'})
MULTIPLICATIVE_OPS = frozenset({'*', '/'})


def is_tree(node: object) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: object) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: object) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: object) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def dyadic_operator(node: object) -> Optional[str]:
    if tree_label(node) != 'dyadic':
        return None

    return str(node.children[1].value)

# ---------------- Re-serialization ----------------

def to_source(node: Node) -> str:
    """Render an AST back into source text that parses to an equal tree."""
    label = tree_label(node)

    if label == 'program':
        return ' '.join(f"{_render_statement(stmt)};" for stmt in node.children)

    return _render(node)

def _render(node: Node) -> str:
    if is_token(node):
        return _render_token(node)

    match tree_label(node):
        case 'statement':
            return f"({_render_statement(node)})"
        case 'dyadic':
            return _render_dyadic(node)
        case 'conditional':
            cond, when_true, when_false = node.children
            return f"{_additive(cond)} ? {_additive(when_true)} : {_additive(when_false)}"
        case 'call':
            name, args = node.children
            return f"{name.value}({', '.join(_render(arg) for arg in args.children)})"
        case label:
            raise ValueError(f"Cannot render node {label!r}")

def _render_statement(stmt: Tree) -> str:
    return ', '.join(_render(expr) for expr in stmt.children)

def _render_dyadic(node: Tree) -> str:
    left, op_tok, right = node.children
    op = str(op_tok.value)

    if op in ADDITIVE_OPS:
        # left operand is a multiplicative, right operand an additive
        lhs = _group(left) if dyadic_operator(left) in ADDITIVE_OPS else _additive(left)
        rhs = _additive(right)
    else:
        # left operand is a primary, right operand a multiplicative
        lhs = _group(left) if tree_label(left) == 'dyadic' else _additive(left)
        rhs = _group(right) if dyadic_operator(right) in ADDITIVE_OPS else _additive(right)

    return f"{lhs} {op} {rhs}"

def _additive(node: Node) -> str:
    """Render a node in a position that only accepts an additive."""
    if tree_label(node) == 'conditional':
        return _group(node)

    return _render(node)

def _group(node: Node) -> str:
    return f"({_render(node)})"

def _render_token(tok: Token) -> str:
    match tok.type:
        case 'NUMBER':
            return _render_number(tok.value)
        case 'STRING':
            return _render_string(tok.value)
        case 'IDENT' | 'OPERATOR':
            return str(tok.value)
        case kind:
            raise ValueError(f"Cannot render token {kind!r}")

def _render_number(value: float) -> str:
    if math.isnan(value) or value < 0:
        raise ValueError(f"Number {value!r} has no literal form")
    if math.isinf(value):
        # digit run past the float range lexes back to inf
        return '1' + '0' * 309

    # plain decimal notation; the lexer has no exponent syntax
    text = format(Decimal(repr(float(value))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')

    return text or '0'

def _render_string(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'

    raise ValueError("String containing both quote characters has no literal form")
