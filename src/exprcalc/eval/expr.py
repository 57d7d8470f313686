from __future__ import annotations

import math
from typing import Any, Callable, List

from lark import Tree

from ..tree import Node, tree_label
from ..types import CalcValue, Frame
from .helpers import is_truthy, stringify, to_number

EvalFunc = Callable[[Node, Frame], CalcValue]

def eval_dyadic(n: Tree, frame: Frame, eval_func: EvalFunc) -> CalcValue:
    """Evaluate a right-nested dyadic spine without recursing on the right.

    Left operands are evaluated in source order and the rightmost operand
    last, which is the order a recursive walk would use; the results are
    then folded from the right.
    """
    operands: List[Any] = []
    ops: List[str] = []
    node: Node = n

    while tree_label(node) == 'dyadic':
        left, op_tok, right = node.children
        operands.append(eval_func(left, frame))
        ops.append(str(op_tok.value))
        node = right

    acc = eval_func(node, frame)

    for op, lhs in zip(reversed(ops), reversed(operands)):
        acc = apply_binary_operator(op, lhs, acc)

    return acc

def apply_binary_operator(op: str, lhs: Any, rhs: Any) -> CalcValue:
    if op == '+':
        if isinstance(lhs, str) or isinstance(rhs, str):
            return stringify(lhs) + stringify(rhs)
        return to_number(lhs) + to_number(rhs)

    a = to_number(lhs)
    b = to_number(rhs)

    match op:
        case '-':
            return a - b
        case '*':
            return a * b
        case '/':
            return _divide(a, b)

    raise ValueError(f"Unknown operator {op!r}")

def _divide(a: float, b: float) -> float:
    if b != 0:
        return a / b

    # IEEE 754 semantics instead of ZeroDivisionError
    if a == 0 or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)

def eval_conditional(n: Tree, frame: Frame, eval_func: EvalFunc) -> CalcValue:
    cond_node, true_node, false_node = n.children
    cond = eval_func(cond_node, frame)

    return eval_func(true_node if is_truthy(cond) else false_node, frame)
