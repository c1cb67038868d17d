"""Session control for the Lambda language: loads a script (or takes lines from the command line), runs it through
Lexer -> Parser -> Interpreter and reports every error through the session's ErrorHandler.

Lex and parse errors block execution entirely: all of them are reported, and nothing is interpreted. A runtime error
stops the run, but output produced before it stands.
"""

import logging
import os

from lba.core.interpreter import Interpreter
from lba.core.lexer import Lexer
from lba.core.parser import Parser
from lba.lang.error import LbaException

logger = logging.getLogger(__name__)


class Session:
    """Governs a Lambda session. The interpreter (and therefore the global frame) persists for the whole session."""
    SH_FILE = "<in>"  # command-line interpreter filename
    DEFAULT_SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "scripts", "default.lba")

    def __init__(self, error_handler, path, cmd_line=False, source=None, stdout=None, toolkit=None):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.source = source if source is not None else ""

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE and source is None:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = file.read()
            except OSError:
                raise LbaException("'{}' could not be opened", path, diagnosis=False)

        elif path == Session.SH_FILE and not cmd_line:
            raise LbaException("'<in>' is a reserved filename")

        self.error_handler.register_file(path, self.source)
        self.interpreter = Interpreter(error_handler, path, stdout, toolkit)

    @property
    def toolkit(self):
        return self.interpreter.toolkit

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Preprocesses a line typed on the command line, prepending the pending text add_to_prev. Returns the updated
        line and whether it must be continued (it has more '{' than '}').
        """
        if add_to_prev:
            line = add_to_prev + "\n" + line
        line = line.rstrip()
        return line, line.count("{") > line.count("}")

    def compile(self, source):
        """Lexes and parses source. Returns the statements, or None after reporting every lex/parse error."""
        tokens, lex_errors = Lexer(source).scan()
        parser = Parser(tokens)
        statements, __ = parser.parse()
        logger.debug("%s: %d token(s), %d statement(s)", self.path, len(tokens), len(statements))

        errors = lex_errors + parser.errors
        if not errors:
            return statements

        for error in errors:
            self.error_handler.report(error)
        halted = LbaException("execution halted due to {} syntax error(s)", str(len(errors)), diagnosis=False)
        self.error_handler.report(halted)
        return None

    def run(self, source=None):
        """Runs source (the loaded script by default). Returns whether it ran to completion without errors."""
        if source is None:
            source = self.source
        elif self.cmd_line:
            self.error_handler.register_file(self.path, source)

        statements = self.compile(source)
        if statements is None:
            return False
        return self.interpreter.interpret(statements)
