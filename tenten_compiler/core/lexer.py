"""Lexer: raw sequencer source text to a flat token list.

WHY: The parser should only reason about directives, names, strings and
numbers, never about characters, quoting or number prefixes. The lexer
is the one place that knows the character-level grammar.

HOW: A single cursor walks the source left to right, tracking line and
column. Each loop iteration skips blanks, looks at one character, and
reads exactly one token (or skips one unknown character). The cursor
only ever moves forward, so tokenizing always terminates.

RULES:
- Space, tab and carriage return are skipped; newline is a token
- "#" or ";" starts a line comment; the trimmed text becomes a COMMENT
- "@name" is a DIRECTIVE; the name is lower-cased
- '"..."' or "'...'" is a STRING; an unterminated string (newline or end
  of input before the closing quote) records an error but the partial
  value is still emitted
- A digit, "$", or "-" followed by a digit starts a NUMBER; "0x"/"$"
  forms are hexadecimal, everything else is signed decimal
- [A-Za-z_] starts an IDENTIFIER of [A-Za-z0-9_-]*, lower-cased
- ":" is a COLON
- Any other character is silently dropped
- The token list always ends with EOF carrying the final position
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from tenten_compiler.core.diagnostics import Diagnostic

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")
_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_IDENT_CHARS = _IDENT_START | _DEC_DIGITS | {"-"}
_BLANKS = frozenset(" \t\r")


class TokenType(str, Enum):
    DIRECTIVE = "DIRECTIVE"
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    COMMENT = "COMMENT"
    NEWLINE = "NEWLINE"
    COLON = "COLON"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """One lexical token.

    value is the lower-cased name for DIRECTIVE/IDENTIFIER, the raw
    content for STRING/COMMENT, the decoded int for NUMBER, and None for
    the structural tokens.
    """

    type: TokenType
    line: int
    col: int
    value: Union[str, int, None] = None


class Lexer:
    """Single-pass character scanner. One instance per source text."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: List[Token] = []
        self.errors: List[Diagnostic] = []

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return ""

    def _advance(self) -> str:
        ch = self._peek()
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_blanks(self) -> None:
        while self._peek() in _BLANKS:
            self._advance()

    def _read_string(self) -> str:
        quote = self._advance()
        chars: List[str] = []
        while self._peek() not in (quote, "", "\n"):
            chars.append(self._advance())
        if self._peek() == quote:
            self._advance()
        else:
            self.errors.append(Diagnostic(
                msg="Unterminated string", line=self.line, col=self.col,
            ))
        return "".join(chars)

    def _read_digits(self, allowed: frozenset) -> str:
        chars: List[str] = []
        while self._peek() in allowed:
            chars.append(self._advance())
        return "".join(chars)

    def _read_number(self) -> int:
        if self._peek() == "0" and self._peek(1) in ("x", "X"):
            self._advance()
            self._advance()
            digits = self._read_digits(_HEX_DIGITS)
            return int(digits, 16) if digits else 0

        if self._peek() == "$":
            self._advance()
            digits = self._read_digits(_HEX_DIGITS)
            return int(digits, 16) if digits else 0

        sign = 1
        if self._peek() == "-":
            self._advance()
            sign = -1
        digits = self._read_digits(_DEC_DIGITS)
        return sign * int(digits) if digits else 0

    def _read_identifier(self) -> str:
        chars: List[str] = []
        while self._peek() in _IDENT_CHARS:
            chars.append(self._advance())
        return "".join(chars)

    def _emit(self, token_type: TokenType, line: int, col: int, value=None) -> None:
        self.tokens.append(Token(type=token_type, line=line, col=col, value=value))

    def tokenize(self) -> Tuple[List[Token], List[Diagnostic]]:
        while self.pos < len(self.source):
            self._skip_blanks()
            ch = self._peek()
            line, col = self.line, self.col

            if ch == "":
                break

            if ch == "\n":
                self._emit(TokenType.NEWLINE, line, col)
                self._advance()
                continue

            if ch in ("#", ";"):
                self._advance()
                chars: List[str] = []
                while self._peek() not in ("\n", ""):
                    chars.append(self._advance())
                self._emit(TokenType.COMMENT, line, col, "".join(chars).strip())
                continue

            if ch == "@":
                self._advance()
                name = self._read_identifier()
                self._emit(TokenType.DIRECTIVE, line, col, name.lower())
                continue

            if ch in ('"', "'"):
                self._emit(TokenType.STRING, line, col, self._read_string())
                continue

            if ch in _DEC_DIGITS or ch == "$" or (ch == "-" and self._peek(1) in _DEC_DIGITS):
                self._emit(TokenType.NUMBER, line, col, self._read_number())
                continue

            if ch == ":":
                self._emit(TokenType.COLON, line, col)
                self._advance()
                continue

            if ch in _IDENT_START:
                self._emit(TokenType.IDENTIFIER, line, col, self._read_identifier().lower())
                continue

            # Unknown character, skip
            self._advance()

        self._emit(TokenType.EOF, self.line, self.col)
        return self.tokens, self.errors


def tokenize(source: str) -> Tuple[List[Token], List[Diagnostic]]:
    """Tokenize source text. Returns (tokens, errors)."""
    return Lexer(source).tokenize()
