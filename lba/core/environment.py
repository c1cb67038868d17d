"""Scope frames. Frames are shared by reference: closures, bound methods and callers may all hold the same frame, and it
lives as long as any of them does.
"""

from lba.lang.error import UndefinedVariable


class Environment:
    """One frame of the scope chain: name -> value bindings plus an optional enclosing frame."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this frame. Re-declaring a name in the same frame overwrites it."""
        self.values[name] = value

    def get(self, token):
        """Returns the value bound to token.lexeme in the nearest frame that defines it."""
        environment = self.find(token.lexeme)
        if environment is None:
            raise UndefinedVariable(token, "Undefined variable '{}'.", token.lexeme)
        return environment.values[token.lexeme]

    def assign(self, token, value):
        """Rebinds token.lexeme in the nearest frame that defines it. Never creates a binding."""
        environment = self.find(token.lexeme)
        if environment is None:
            raise UndefinedVariable(token, "Undefined variable '{}'.", token.lexeme)
        environment.values[token.lexeme] = value

    def find(self, name):
        """Returns the innermost frame defining name, or None."""
        environment = self
        while environment is not None:
            if name in environment.values:
                return environment
            environment = environment.enclosing
        return None

    def __contains__(self, name):
        return self.find(name) is not None

    def __repr__(self):
        return f"Environment({self.values!r}, enclosing={self.enclosing is not None})"
