from __future__ import annotations

import logging
from typing import Callable, Optional

from lark import Tree

from .evaluator import eval_expr
from .parser_rd import parse_source
from .types import CalcValue, Environment

logger = logging.getLogger(__name__)


def parse(src: str) -> Tree:
    """Lex and parse ``src`` into a program tree.

    Raises LexError or ParseError on the first problem found. Parentheses
    and call argument lists nest at most ``EXPRCALC_MAX_DEPTH`` levels
    (default 100); deeper nesting raises NestingTooDeep.
    """
    return parse_source(src)


def evaluate(src: str, env: Optional[Environment] = None) -> CalcValue:
    """Lex, parse and evaluate ``src`` against ``env``.

    The source is parsed afresh on every call; nothing is cached.
    """
    ast = parse_source(src)
    return eval_expr(ast, env)


def compile_source(src: str) -> Callable[[Optional[Environment]], CalcValue]:
    """Bind ``src`` to a function of the environment.

    Each call of the returned function re-parses the source, so errors in
    ``src`` surface when it is called, not here.
    """
    def run(env: Optional[Environment] = None) -> CalcValue:
        logger.debug("evaluating compiled source (%d characters)", len(src))
        return evaluate(src, env)

    run.__doc__ = f"Evaluate {src!r} against an environment."
    return run
