"""exprcalc: lexer, recursive descent parser and evaluator for a small expression language."""

from .lexer_rd import InvalidCharacter, LexError, MalformedNumber, UnterminatedString, tokenize
from .parser_rd import NestingTooDeep, ParseError, UnexpectedToken, UnexpectedTrailingToken, parse_source
from .evaluator import eval_expr
from .runtime import receives_environment
from .runner import compile_source, evaluate, parse
from .tree import to_source
from .types import EvaluationError, NotCallable

__all__ = [
    "EvaluationError",
    "InvalidCharacter",
    "LexError",
    "MalformedNumber",
    "NestingTooDeep",
    "NotCallable",
    "ParseError",
    "UnexpectedToken",
    "UnexpectedTrailingToken",
    "UnterminatedString",
    "compile_source",
    "eval_expr",
    "evaluate",
    "parse",
    "parse_source",
    "receives_environment",
    "to_source",
    "tokenize",
]
