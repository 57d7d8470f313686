from __future__ import annotations

from types import SimpleNamespace
from typing import Callable, Optional

from lark import Token, Tree

from .eval.calls import eval_call
from .eval.expr import eval_conditional, eval_dyadic
from .tree import Node, is_token, tree_children
from .types import CalcValue, Environment, EvaluationError, Frame


def _maybe_attach_location(exc: EvaluationError, node: Node) -> None:
    if getattr(exc, "calc_meta", None) is not None:
        return

    anchor = node
    if not is_token(anchor):
        # calls are located by their callee name
        children = tree_children(node)
        anchor = children[0] if children and is_token(children[0]) else None

    line = getattr(anchor, "line", None)
    if line is None:
        return

    exc.calc_meta = SimpleNamespace(line=line, column=getattr(anchor, "column", None))

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment] = None) -> CalcValue:
    """Evaluate a parsed tree against a caller-supplied environment."""
    frame = env if isinstance(env, Frame) else Frame(env)
    return eval_node(ast, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> CalcValue:
    try:
        return _eval_node_inner(n, frame)
    except EvaluationError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> CalcValue:
    if is_token(n):
        return _eval_token(n, frame)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        raise EvaluationError(f"Unknown node: {n.data}")

    return handler(n, frame)

# ---------------- Tokens ----------------

def _eval_token(t: Token, frame: Frame) -> CalcValue:
    match t.type:
        case 'NUMBER' | 'STRING':
            return t.value
        case 'IDENT':
            return frame.get(t.value)

    raise EvaluationError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Sequencing / dispatch ----------------

def _eval_sequence(n: Tree, frame: Frame) -> CalcValue:
    """Evaluate children in order; the last one's value is the result."""
    result: CalcValue = None

    for child in n.children:
        result = eval_node(child, frame)

    return result

_NODE_DISPATCH: dict[str, Callable[[Tree, Frame], CalcValue]] = {
    'program': _eval_sequence,
    'statement': _eval_sequence,
    'dyadic': lambda n, frame: eval_dyadic(n, frame, eval_node),
    'conditional': lambda n, frame: eval_conditional(n, frame, eval_node),
    'call': lambda n, frame: eval_call(n, frame, eval_node),
}
