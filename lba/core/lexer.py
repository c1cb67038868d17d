"""Lexical analysis for the Lambda language. Converts source text into a flat list of Tokens in a single pass, without
backtracking.

Lexical grammar:

```
<number>     ::= <digit>+                          ; no decimal point: "1.5" is NUMBER DOT NUMBER
<string>     ::= '"' <char except '"'>* '"'        ; may span lines, no escape sequences
<identifier> ::= <alpha> (<alpha> | <digit>)*      ; keywords are exact matches of KEYWORDS
<comment>    ::= "**" <char>* "**"                 ; skipped entirely, not nested
```

Errors do not stop scanning: each bad character, unterminated string or unterminated comment is recorded as a LexError
and the lexer moves on, so a single pass reports as many problems as possible.
"""

from lba.core.tokens import KEYWORDS, Token, TokenType
from lba.lang.error import LexError


class Lexer:
    """Scans a whole source text. Call scan() once."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        "[": TokenType.LEFT_BRACKET,
        "]": TokenType.RIGHT_BRACKET,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "/": TokenType.SLASH,
    }
    # char: (token if followed by '=', token otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source):
        self.source = source
        self.tokens = []
        self.errors = []

        self.start = 0       # offset of the first char of the current token
        self.current = 0     # offset of the char about to be consumed
        self.line = 1
        self.line_start = 0  # offset of the first char of the current line

        self._start_line = 1
        self._start_column = 0

    def scan(self):
        """Returns (tokens, errors). tokens always ends with a single EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self._start_line = self.line
            self._start_column = self.current - self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens, self.errors

    def scan_token(self):
        char = self.advance()

        if char in Lexer.SINGLE:
            self.add_token(Lexer.SINGLE[char])
        elif char in Lexer.DOUBLE:
            with_equal, without = Lexer.DOUBLE[char]
            self.add_token(with_equal if self.match("=") else without)
        elif char == "*":
            if self.match("*"):
                self.comment()
            else:
                self.add_token(TokenType.STAR)
        elif char == '"':
            self.string()
        elif char in Lexer.WHITESPACE:
            pass
        elif char == "\n":
            self.newline()
        elif Lexer.is_digit(char):
            self.number()
        elif Lexer.is_alpha(char):
            self.identifier()
        else:
            self.error("Unexpected character '{}'.", char)

    def comment(self):
        """Skips a '** ... **' block comment. The opening '**' has been consumed."""
        while not (self.peek() == "*" and self.peek_next() == "*") and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            self.error("Unterminated comment.")
            return

        self.advance()
        self.advance()

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Lexer.is_digit(self.peek()):
            self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Lexer.is_alpha(self.peek()) or Lexer.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def newline(self):
        """Bookkeeping after a '\\n' has been consumed."""
        self.line += 1
        self.line_start = self.current

    def add_token(self, token_type, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self._start_line, self._start_column))

    def error(self, msg, *exprs):
        """Records a LexError at the start of the current token. Scanning continues."""
        self.errors.append(LexError(msg, list(exprs), line=self._start_line, column=self._start_column))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"
