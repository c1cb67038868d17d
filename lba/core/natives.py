"""Built-in functions available to every script. register_standard_library is called once, when an Interpreter is
constructed, and only populates the given global frame.
"""

import time

from lba.core.values import NativeFunction
from lba.lang.error import TypeMismatch


def _clock(interpreter, arguments):
    return time.time()


def _len(interpreter, arguments):
    items, = arguments
    if not isinstance(items, list):
        raise TypeMismatch(None, "Argument to len() must be a list.")
    return float(len(items))


def _get(interpreter, arguments):
    """Returns items[index], or nil if index is out of range or not a whole number."""
    items, index = arguments
    if not isinstance(items, list) or isinstance(index, bool) or not isinstance(index, float):
        raise TypeMismatch(None, "get() requires a list and a number index.")
    if not index.is_integer() or not 0 <= index < len(items):
        return None
    return items[int(index)]


STANDARD_LIBRARY = [
    NativeFunction("clock", 0, _clock),
    NativeFunction("len", 1, _len),
    NativeFunction("get", 2, _get),
]


def register_standard_library(environment):
    """Defines every built-in function in environment."""
    for function in STANDARD_LIBRARY:
        environment.define(function.name, function)
    return environment
