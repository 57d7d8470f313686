from __future__ import annotations

from typing import Callable, List

from lark import Tree

from ..runtime import call_value
from ..tree import Node, tree_children
from ..types import CalcValue, Frame

EvalFunc = Callable[[Node, Frame], CalcValue]

def eval_args_node(args_node: Tree, frame: Frame, eval_func: EvalFunc) -> List[CalcValue]:
    """Evaluate every argument left to right, whether or not the callee uses it."""
    return [eval_func(arg, frame) for arg in tree_children(args_node)]

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> CalcValue:
    name_tok, args_node = n.children
    args = eval_args_node(args_node, frame, eval_func)

    # callee is resolved only after its arguments
    return call_value(str(name_tok.value), args, frame)
