"""Editor diagnostics. Runs only the lexer and the parser, never the interpreter, and converts their errors into the
shape a language server publishes:

```
{"range": {"start": {"line": 0, "character": 4}, "end": {"line": 0, "character": 5}},
 "message": "Unexpected character '@'.", "severity": 1, "source": "lba"}
```

Lines and characters are 0-based here, unlike the 1-based lines printed by ErrorHandler.
"""

from dataclasses import dataclass
from enum import IntEnum

from lba.core.lexer import Lexer
from lba.core.parser import Parser


class Severity(IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Position:
    line: int
    character: int

    def to_dict(self):
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self):
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: Severity = Severity.ERROR
    source: str = "lba"

    @classmethod
    def from_error(cls, error, severity=Severity.ERROR):
        """Converts a LexError/ParseError into a Diagnostic spanning the offending token (at least one character)."""
        line = (error.line or 1) - 1
        start = error.column or 0
        return cls(Range(Position(line, start), Position(line, start + error.length)), error.msg, severity)

    def to_dict(self):
        return {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": int(self.severity),
            "source": self.source,
        }


def collect_errors(source):
    """Returns (lex errors, parse errors) of source."""
    tokens, lex_errors = Lexer(source).scan()
    parser = Parser(tokens)
    parser.parse()
    return lex_errors, parser.errors


def diagnose(source):
    """Returns the Diagnostics of source, lex errors first, each group in source order."""
    lex_errors, parse_errors = collect_errors(source)
    return [Diagnostic.from_error(error) for error in lex_errors + parse_errors]
