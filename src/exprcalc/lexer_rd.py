"""
Lexer for exprcalc - Recursive Descent Parser

Tokenizes expression source into a list of tokens.

Features:
- Single-pass tokenization with one forward cursor
- Position tracking (offset, line, column)
- Quoted strings without escape processing
"""

import logging
from typing import List

from .token_types import TT, Tok

logger = logging.getLogger(__name__)

DIGITS = frozenset('0123456789')
LETTERS = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ')
IDENT_START = LETTERS | {'_', '$'}
IDENT_PART = IDENT_START | DIGITS

# ============================================================================
# Errors
# ============================================================================

class LexError(Exception):
    """Lexical analysis error with the cursor position where it was detected"""

    def __init__(self, message: str, pos: int, line: int, column: int):
        self.message = message
        self.pos = pos
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")


class InvalidCharacter(LexError):
    pass


class MalformedNumber(LexError):
    pass


class UnterminatedString(LexError):
    pass

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    exprcalc lexer.

    Each cursor position is classified in a fixed priority order:
    number, string, identifier, operator, parenthesis, colon, comma,
    semicolon, question mark, whitespace.
    """

    OPERATORS = frozenset('+-*/')

    # Single-character punctuation
    PUNCTUATION = {
        '(': TT.PAREN,
        ')': TT.PAREN,
        ':': TT.COLON,
        ',': TT.COMMA,
        ';': TT.SEMI,
        '?': TT.QMARK,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        logger.debug("lexed %d token(s) from %d character(s)", len(self.tokens), len(self.source))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        if ch in DIGITS or ch == '.':
            self.scan_number()
            return

        if ch in ('"', "'"):
            self.scan_string()
            return

        if ch in IDENT_START:
            self.scan_identifier()
            return

        if ch in self.OPERATORS:
            self.scan_single(TT.OPERATOR)
            return

        token_type = self.PUNCTUATION.get(ch)
        if token_type is not None:
            self.scan_single(token_type)
            return

        if ch.isspace():
            self.advance()
            return

        raise InvalidCharacter(f"Unexpected character {ch!r}", self.pos, self.line, self.column)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self):
        """Scan number literal: digits with at most one decimal point"""
        start, line, column = self.pos, self.line, self.column
        value = ''
        seen_point = False

        while self.peek() in DIGITS or self.peek() == '.':
            if self.peek() == '.':
                if seen_point:
                    raise MalformedNumber(
                        "Second decimal point in number literal", self.pos, self.line, self.column
                    )
                seen_point = True
            value += self.advance()

        if value == '.':
            raise MalformedNumber("Number literal has no digits", start, line, column)

        self.emit(TT.NUMBER, float(value), start, line, column)

    def scan_string(self):
        """Scan string literal: "..." or '...'"""
        start, line, column = self.pos, self.line, self.column
        quote = self.source[self.pos]
        end = self.source.find(quote, self.pos + 1)

        if end < 0:
            raise UnterminatedString("Unterminated string", start, line, column)

        self.advance()  # Opening quote
        content = self.advance(end - self.pos)
        self.advance()  # Closing quote
        self.emit(TT.STRING, content, start, line, column)

    def scan_identifier(self):
        """Scan identifier; there are no keywords"""
        start, line, column = self.pos, self.line, self.column
        value = self.advance()

        while self.peek() in IDENT_PART:
            value += self.advance()

        self.emit(TT.IDENT, value, start, line, column)

    def scan_single(self, token_type: TT):
        """Scan a one-character operator or punctuation token"""
        start, line, column = self.pos, self.line, self.column
        self.emit(token_type, self.advance(), start, line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(result)
        return result

    def emit(self, token_type: TT, value, pos: int, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(type=token_type, value=value, pos=pos, line=line, column=column))


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
