"""Error handling for the Lambda language. Only LbaExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

There are three non-overlapping kinds of script errors:

```
LexError        ; unexpected character, unterminated string/comment (collected, scanning continues)
ParseError      ; unexpected token, invalid assignment target, too many parameters (recovered per statement)
LbaRuntimeError ; raised while interpreting, stops the run
```
"""

import sys

from termcolor import colored


class LbaException(Exception):
    """Templates an error/warning message so that it can be used to throw a Lambda error/warning. The message template
    is formatted with exprs, which are highlighted when the error is displayed.
    """
    kind = "error"
    exit_code = 1

    def __init__(self, msg, exprs=None, line=None, column=None, length=1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.msg = msg.format(*self.exprs)

        self.line = line      # 1-based, None if unknown
        self.column = column  # 0-based offset into the line, None if unknown
        self.length = max(length, 1)

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def colored_msg(self):
        """Returns self.msg with every expr snippet bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))

    @property
    def location(self):
        """Human readable 'line:col' (1-based), or an empty string when unknown."""
        if self.line is None:
            return ""
        if self.column is None:
            return f"{self.line}"
        return f"{self.line}:{self.column + 1}"


class LexError(LbaException):
    """Lexical error: reported with a 1-line/1-column span, scanning continues afterwards."""
    exit_code = 65


class ParseError(LbaException):
    """Syntax error for a single token. Raised inside the parser and caught at the declaration level."""
    exit_code = 65

    def __init__(self, token, msg):
        where = "at end" if not token.lexeme else f"at '{token.lexeme}'"
        template = "{}: " + msg.replace("{", "{{").replace("}", "}}")
        super().__init__(template, where, line=token.line, column=token.column, length=len(token.lexeme))
        self.token = token


class LbaRuntimeError(LbaException):
    """Error raised while interpreting. token is the offending token, and may be filled in by the caller if a native
    function raised the error without knowing where it was called from.
    """
    kind = "runtime error"
    exit_code = 70

    def __init__(self, token, msg, exprs=None):
        super().__init__(msg, exprs)
        self.token = None
        self.attach(token)

    def attach(self, token):
        """Sets the location of this error to token."""
        self.token = token
        if token is not None:
            self.line = token.line
            self.column = token.column
            self.length = max(len(token.lexeme), 1)


class UndefinedVariable(LbaRuntimeError):
    """Lookup or assignment of a name that no enclosing frame defines."""


class UndefinedProperty(LbaRuntimeError):
    """Property access that misses on a class, instance or native handle."""


class TypeMismatch(LbaRuntimeError):
    """Operand or argument of the wrong type."""


class ArityMismatch(LbaRuntimeError):
    """Wrong number of arguments for a fixed-arity callable."""


class NotCallable(LbaRuntimeError):
    """Call of a value that is not a function or class."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom Lambda errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.path = "<script>"
        self.lines = []
        self.errors = []

    @property
    def out(self):
        return self.stream if self.stream is not None else sys.stderr

    @property
    def exit_code(self):
        """Exit code of the first reported error, 0 if nothing was reported."""
        return self.errors[0].exit_code if self.errors else 0

    def register_file(self, path, source=""):
        """Registers path and its source text, used for error locations and diagnosis."""
        self.path = path
        self.lines = source.split("\n")

    def reset(self):
        """Forgets reported errors. Used between lines in command-line mode."""
        self.errors = []

    def diagnose(self, error, warning=False):
        """Returns offending source line with the offending part highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        line = self.lines[error.line - 1]
        start = min(error.column or 0, len(line))
        end = min(start + error.length, len(line))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * max(end - start - 1, 0), color, attrs=["bold"])

        return diagnosis

    def _can_diagnose(self, error):
        return not error.internal and error.diagnosis and error.line is not None and 0 < error.line <= len(self.lines)

    def _header(self, error):
        location = f"{self.path}:{error.location}: " if error.location else f"{self.path}: "
        return colored(location, attrs=["bold"])

    def warn(self, *args, **kwargs):
        """Generates and prints a warning message based on args."""
        error = LbaException(*args, **kwargs)

        error_msg = self._header(error)
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.colored_msg()
        print(error_msg, file=self.out)

        if self._can_diagnose(error):
            print(self.diagnose(error, warning=True), file=self.out)

    def report(self, error):
        """Prints error and records it. Does not exit: many lex/parse errors can be reported in one pass."""
        self.errors.append(error)

        error_msg = self._header(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored(f"{error.kind}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg()
        print(error_msg, file=self.out)

        if self._can_diagnose(error):
            print(self.diagnose(error), file=self.out)

    def throw(self, error):
        """Reports error, then exits with error.exit_code if this handler is fatal."""
        self.report(error)
        if self.fatal:
            sys.exit(error.exit_code)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LbaException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LbaRuntimeError(None, "maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, LbaException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LbaException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
