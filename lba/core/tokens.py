"""Tokens produced by the lexer. A Token is immutable once produced."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TokenType(Enum):
    # single-character tokens
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COMMA = ","
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    SEMICOLON = ";"
    SLASH = "/"
    STAR = "*"

    # one or two character tokens
    BANG = "!"
    BANG_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    # literals
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"

    # keywords
    CLASS = "class"
    ELSE = "else"
    FALSE = "false"
    FN = "fn"
    IF = "if"
    LET = "let"
    NIL = "nil"
    PRINT = "print"
    RETURN = "return"
    STATIC = "static"
    THIS = "this"
    TRUE = "true"
    UI = "ui"
    WHILE = "while"

    EOF = "end of input"


KEYWORDS = {
    token_type.value: token_type
    for token_type in (
        TokenType.CLASS, TokenType.ELSE, TokenType.FALSE, TokenType.FN, TokenType.IF, TokenType.LET, TokenType.NIL,
        TokenType.PRINT, TokenType.RETURN, TokenType.STATIC, TokenType.THIS, TokenType.TRUE, TokenType.UI,
        TokenType.WHILE,
    )
}


@dataclass(frozen=True)
class Token:
    """line is 1-based, column is the 0-based offset of the token's first character within its line."""
    type: TokenType
    lexeme: str
    literal: Optional[Union[float, str]] = None
    line: int = 1
    column: int = 0

    def __str__(self):
        return f"{self.type.name} {self.lexeme!r}"
