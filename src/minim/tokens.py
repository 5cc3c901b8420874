"""Minim tokenizer — lexes source into a flat token list."""

from __future__ import annotations

from .ast import Pos
from .errors import MinimSyntaxError


# Token type constants
TK_NUMBER = "NUMBER"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "let",
    "fn",
    "if",
    "else",
    "while",
    "do",
    "for",
    "return",
    "true",
    "false",
}

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    ">",
    "<",
    "(",
    ")",
    "{",
    "}",
    ";",
    ",",
    ":",
}

INT64_MIN: int = -(1 << 63)
_INT64_SPAN: int = 1 << 64


def wrap_i64(value: int) -> int:
    """Reduce an unbounded int to signed 64-bit two's complement."""
    return (value - INT64_MIN) % _INT64_SPAN + INT64_MIN


class TokenizeError(MinimSyntaxError):
    """Error during tokenization."""

    def __init__(self, msg: str, line: int, col: int):
        super().__init__(msg, Pos(line, col))
        self.line: int = line
        self.col: int = col


class Token:
    """A token with type, value, and position.

    Keywords use the keyword itself as their type. Number tokens keep their
    source spelling in `value` and the accumulated 64-bit value in `number`.
    """

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col
        self.number: int = 0

    def describe(self) -> str:
        if self.type == TK_EOF:
            return "end of input"
        return "'" + self.value + "'"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (
            self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def tokenize(source: str) -> list[Token]:
    """Tokenize Minim source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            pos += 1
            line += 1
            col = 1
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            col += 1
            continue

        start_pos = pos
        start_line = line
        start_col = col

        # Number: unsigned decimal, wraps at 64 bits
        if _is_digit(c):
            value = 0
            while pos < length and _is_digit(source[pos]):
                value = wrap_i64(value * 10 + ord(source[pos]) - ord("0"))
                pos += 1
                col += 1
            tok = Token(TK_NUMBER, source[start_pos:pos], start_line, start_col)
            tok.number = value
            tokens.append(tok)
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_ident_char(source[pos]):
                pos += 1
                col += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                tokens.append(Token(word, word, start_line, start_col))
            else:
                tokens.append(Token(TK_IDENT, word, start_line, start_col))
            continue

        # '=' or '=='
        if c == "=":
            if pos + 1 < length and source[pos + 1] == "=":
                tokens.append(Token(TK_OP, "==", start_line, start_col))
                pos += 2
                col += 2
            else:
                tokens.append(Token(TK_OP, "=", start_line, start_col))
                pos += 1
                col += 1
            continue

        # '!=' only; a lone '!' is not an operator
        if c == "!":
            if pos + 1 < length and source[pos + 1] == "=":
                tokens.append(Token(TK_OP, "!=", start_line, start_col))
                pos += 2
                col += 2
                continue
            raise TokenizeError("unexpected character after '!'", line, col)

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, start_line, start_col))
            pos += 1
            col += 1
            continue

        raise TokenizeError("unexpected character: " + repr(c), line, col)

    tokens.append(Token(TK_EOF, "", line, col))
    return tokens
