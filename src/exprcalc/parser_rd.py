"""
Recursive Descent Parser for exprcalc

Structure:
- Lexer: token list from source (lexer_rd)
- Parser: one method per grammar level, consuming a token queue
- AST: Lark Tree/Token nodes (see tree.py for the node vocabulary)

Grammar (lowest to highest binding power):

    program        := statement (';' statement)* ';'
    statement      := expression (',' expression)*
    expression     := additive ('?' additive ':' additive)?
    additive       := multiplicative (('+'|'-') additive)?
    multiplicative := primary (('*'|'/') multiplicative)?
    primary        := NUMBER | STRING | IDENT ('(' arguments ')')? | '(' statement ')'
    arguments      := (expression (',' expression)*)?

Additive and multiplicative chains are right-associative: ``2-3-4`` is
``2-(3-4)``.
"""

import logging
from collections import deque
from typing import Deque, FrozenSet, Iterable, List, Optional

from lark import Token, Tree

from .config import max_nesting_depth
from .token_types import KIND_NAMES, TT, Tok
from .tree import Node

logger = logging.getLogger(__name__)

_EOF = Tok(TT.EOF, None)

# Printable names for the kinds a grammar level may expect
START = frozenset({'number', 'string', 'identifier', '('})
ARGUMENTS_START = START | {')'}
STATEMENT_FOLLOW = frozenset({';', ')', ','})
ADDITIVE_FOLLOW = frozenset({';', '?', ':', ')', ','})
MULTIPLICATIVE_FOLLOW = ADDITIVE_FOLLOW | {'+', '-'}

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


class UnexpectedToken(ParseError):
    """Head token cannot continue the production being parsed"""
    def __init__(self, rule: str, expected: Iterable[str], token: Optional[Tok]):
        self.rule = rule
        self.expected: FrozenSet[str] = frozenset(expected)
        found = token.describe() if token is not None else 'end of input'
        wanted = ' '.join(sorted(self.expected))
        super().__init__(f"{rule}: expected one of [{wanted}], got {found}", token)


class UnexpectedTrailingToken(UnexpectedToken):
    """Tokens remain after a complete program"""


class NestingTooDeep(ParseError):
    pass

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for exprcalc.

    Every grammar method checks that the head token can begin its
    production before descending, and checks the token after an operand
    against the set of tokens that may follow it. There is no recovery:
    the first mismatch aborts the parse.
    """

    def __init__(self, tokens: List[Tok], max_depth: Optional[int] = None):
        self.tokens: Deque[Tok] = deque(tokens)
        self.max_depth = max_depth if max_depth is not None else max_nesting_depth()
        self.depth = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[0] if self.tokens else _EOF

    def advance(self) -> Tok:
        """Consume current token"""
        if not self.tokens:
            return _EOF
        return self.tokens.popleft()

    def kind(self) -> str:
        """Printable kind of the current token ('number', '+', ';', ...)"""
        tok = self.current
        if tok.type in KIND_NAMES:
            return KIND_NAMES[tok.type]
        return str(tok.value)

    def check(self, *kinds: str) -> bool:
        return self.kind() in kinds

    def require(self, rule: str, expected: FrozenSet[str]) -> None:
        """Fail unless the current token is one of the expected kinds"""
        if self.kind() not in expected:
            raise UnexpectedToken(rule, expected, self.token_or_none())

    def expect(self, rule: str, kind: str) -> Tok:
        self.require(rule, frozenset({kind}))
        return self.advance()

    def token_or_none(self) -> Optional[Tok]:
        return self.tokens[0] if self.tokens else None

    def enter_nested(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise NestingTooDeep(f"Nesting deeper than {self.max_depth} levels", self.token_or_none())

    def leave_nested(self) -> None:
        self.depth -= 1

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program: one or more ';'-terminated statements"""
        self.require('program', START)
        statements = []

        while True:
            statements.append(self.parse_statement())
            self.expect('program', ';')

            if not self.tokens:
                break

            if not self.check(*START):
                raise UnexpectedTrailingToken('program', START | {'end of input'}, self.current)

        logger.debug("parsed %d statement(s)", len(statements))
        return Tree('program', statements)

    def parse_statement(self) -> Tree:
        """Parse comma-joined expressions: expr (',' expr)*"""
        self.require('statement', START)
        expressions = [self.parse_expression()]

        while True:
            self.require('statement', STATEMENT_FOLLOW)
            if not self.check(','):
                break
            self.advance()
            self.require('statement', START)
            expressions.append(self.parse_expression())

        return Tree('statement', expressions)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> Node:
        """Parse conditional: additive ('?' additive ':' additive)?"""
        self.require('expression', START)
        condition = self.parse_additive()

        if not self.check('?'):
            return condition

        self.advance()
        when_true = self.parse_additive()
        self.expect('expression', ':')
        when_false = self.parse_additive()
        return Tree('conditional', [condition, when_true, when_false])

    def parse_additive(self) -> Node:
        """Parse addition/subtraction: multiplicative (('+'|'-') additive)?"""
        return self._parse_right_chain(
            'additive', self.parse_multiplicative, ('+', '-'), ADDITIVE_FOLLOW,
        )

    def parse_multiplicative(self) -> Node:
        """Parse multiplication/division: primary (('*'|'/') multiplicative)?"""
        return self._parse_right_chain(
            'multiplicative', self.parse_primary, ('*', '/'), MULTIPLICATIVE_FOLLOW,
        )

    def _parse_right_chain(self, rule, parse_operand, ops, follow) -> Node:
        """
        Collect operands and operators in a loop, then fold from the right.

        Builds the same tree as the right-recursive grammar rule without
        one Python frame per operator.
        """
        operands = []
        operators = []

        while True:
            self.require(rule, START)
            operands.append(parse_operand())

            if self.check(*follow):
                break
            if not self.check(*ops):
                raise UnexpectedToken(rule, follow | set(ops), self.token_or_none())

            op = self.advance()
            operators.append(Token('OPERATOR', op.value, start_pos=op.pos, line=op.line, column=op.column))

        node = operands[-1]
        for left, op_tok in zip(reversed(operands[:-1]), reversed(operators)):
            node = Tree('dyadic', [left, op_tok, node])

        return node

    def parse_primary(self) -> Node:
        """
        Parse primary expressions:
        - Number and string literals
        - Identifiers and calls
        - Parenthesized statements
        """
        self.require('primary', START)
        tok = self.advance()

        if tok.type in (TT.NUMBER, TT.STRING):
            return Token(tok.type.name, tok.value, start_pos=tok.pos, line=tok.line, column=tok.column)

        if tok.type == TT.IDENT:
            name = Token('IDENT', tok.value, start_pos=tok.pos, line=tok.line, column=tok.column)
            if not self.check('('):
                return name

            self.advance()
            self.enter_nested()
            args = self.parse_arguments()
            self.leave_nested()
            self.expect('primary', ')')
            return Tree('call', [name, args])

        # '(' statement ')'
        self.enter_nested()
        statement = self.parse_statement()
        self.leave_nested()
        self.expect('primary', ')')
        return statement

    def parse_arguments(self) -> Tree:
        """Parse call arguments up to (not including) the closing ')'"""
        self.require('arguments', ARGUMENTS_START)
        args = []

        if self.check(')'):
            return Tree('args', args)

        while True:
            args.append(self.parse_expression())
            self.require('arguments', frozenset({')', ','}))
            if self.check(')'):
                break
            self.advance()
            self.require('arguments', START)

        return Tree('args', args)

# ============================================================================
# Entry point
# ============================================================================

def parse_source(source: str, max_depth: Optional[int] = None) -> Tree:
    """
    Parse exprcalc source code to AST.

    Args:
        source: Source code to parse
        max_depth: Nesting limit; defaults to the configured value
    """
    from .lexer_rd import tokenize

    tokens = tokenize(source)
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse()
