"""Runtime values of the Lambda language.

Primitive values are plain Python objects:

```
nil     -> None
boolean -> bool
number  -> float
string  -> str
list    -> list
```

Everything callable (script functions, classes, built-ins, methods of UI handles) implements LbaCallable. Instances of
script classes are LbaInstances; objects handed out by a native collaborator are wrapped in NativeInstances.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from lba.core.environment import Environment
from lba.lang.error import UndefinedProperty

VARIADIC = -1  # arity sentinel: the callable validates its own argument count


@dataclass
class Returned:
    """Signal produced by a return statement. Propagated by execute() until the enclosing call unwraps it."""
    value: Any = None


class LbaCallable(ABC):
    """Capability shared by everything that can be called from a script."""

    @abstractmethod
    def arity(self):
        """Number of expected arguments, or VARIADIC."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this object with already evaluated arguments and returns the result value."""

    @abstractmethod
    def __str__(self):
        ...


class NativeFunction(LbaCallable):
    """Callable implemented in Python. function receives (interpreter, arguments)."""

    def __init__(self, name, arity, function, kind="native fn"):
        self.name = name
        self._arity = arity
        self.function = function
        self.kind = kind

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(interpreter, arguments)

    def __str__(self):
        return f"<{self.kind} {self.name}>"


class LbaFunction(LbaCallable):
    """Function or method declared in a script. closure is the frame the declaration was evaluated in."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self):
        return self.declaration.name.lexeme

    def bind(self, instance):
        """Returns a copy of this function whose closure is a new frame defining 'this' as instance."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LbaFunction(self.declaration, environment, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.values["this"]
        if isinstance(signal, Returned):
            return signal.value
        return None

    def __str__(self):
        return f"<fn {self.name}>"


class LbaClass(LbaCallable):
    """Class declared in a script. Owns its instance and static method tables."""

    def __init__(self, name, methods, static_methods=None):
        self.name = name
        self.methods = methods
        self.static_methods = static_methods if static_methods is not None else {}

    def find_method(self, name):
        return self.methods.get(name)

    def find_static_method(self, name):
        return self.static_methods.get(name)

    def arity(self):
        """Arity of init (0 without one). Class calls are checked against it like any fixed-arity call, instead of
        leaving extra or missing arguments to init.
        """
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, arguments):
        """Instantiates this class, running init (if declared) for its side effects only."""
        instance = LbaInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def get(self, token):
        """Property access on the class itself only sees static methods."""
        method = self.find_static_method(token.lexeme)
        if method is None:
            raise UndefinedProperty(token, "Undefined static method '{}'.", token.lexeme)
        return method

    def __str__(self):
        return f"<class {self.name}>"


class LbaInstance:
    """Instance of an LbaClass. Fields are created on first assignment."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, token):
        if token.lexeme in self.fields:
            return self.fields[token.lexeme]

        method = self.klass.find_method(token.lexeme)
        if method is not None:
            return method.bind(self)

        raise UndefinedProperty(token, "Undefined property '{}'.", token.lexeme)

    def set(self, token, value):
        self.fields[token.lexeme] = value

    def __str__(self):
        return f"<instance of {self.klass.name}>"


class NativeInstance:
    """Opaque handle owned by a native collaborator, exposed to scripts through a fixed property table of callables."""

    def __init__(self, class_name, handle, properties=None, description=None):
        self.class_name = class_name
        self.handle = handle
        self.properties = properties if properties is not None else {}
        self.description = description if description is not None else f"<ui {class_name.lower()}>"

    def get(self, token):
        if token.lexeme in self.properties:
            return self.properties[token.lexeme]
        raise UndefinedProperty(token, "Undefined property '{}' on {}.", [token.lexeme, self.class_name])

    def __str__(self):
        return self.description


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Value equality for nil/bool/number/string, identity for everything else. Values of different types are never
    equal, so true != 1.
    """
    if left is None or right is None:
        return left is None and right is None
    if type(left) is not type(right):
        return False
    if isinstance(left, (bool, float, str)):
        return left == right
    return left is right


def stringify(value):
    """Converts value to the text print writes."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return "[" + ", ".join(stringify(element) for element in value) + "]"
    return str(value)
