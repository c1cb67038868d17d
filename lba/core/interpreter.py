"""Tree-walking evaluator for the Lambda language.

Statements and expressions are dispatched through tables keyed by node class (see nodes.py), one handler per class.
execute() returns None, or a Returned signal when a return statement ran; blocks, ifs and whiles pass the signal up
until a function call unwraps it. Runtime errors are LbaRuntimeErrors and are only caught by interpret().
"""

import logging
import math
import sys

from lba.core import nodes
from lba.core.environment import Environment
from lba.core.natives import register_standard_library
from lba.core.tokens import TokenType
from lba.core.values import (
    VARIADIC, LbaCallable, LbaClass, LbaFunction, LbaInstance, NativeInstance, Returned, is_equal, is_truthy, stringify,
)
from lba.lang.error import (
    ArityMismatch, ErrorHandler, LbaRuntimeError, NotCallable, TypeMismatch, UndefinedProperty,
)
from lba.ui.bindings import register_ui_bindings
from lba.ui.toolkit import Toolkit

logger = logging.getLogger(__name__)


class Interpreter:
    """Executes statements against a persistent global frame. Output of print statements goes to stdout."""

    def __init__(self, error_handler=None, path="<script>", stdout=None, toolkit=None):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)
        self.path = path
        self.stdout = stdout
        self.toolkit = toolkit if toolkit is not None else Toolkit()

        self.globals = Environment()
        register_standard_library(self.globals)
        register_ui_bindings(self.globals, self.toolkit)
        self.environment = self.globals

        self._statements = {
            nodes.ExpressionStatement: self.visit_expression_statement,
            nodes.PrintStatement: self.visit_print_statement,
            nodes.VarStatement: self.visit_var_statement,
            nodes.BlockStatement: self.visit_block_statement,
            nodes.IfStatement: self.visit_if_statement,
            nodes.WhileStatement: self.visit_while_statement,
            nodes.FunctionStatement: self.visit_function_statement,
            nodes.ReturnStatement: self.visit_return_statement,
            nodes.ClassStatement: self.visit_class_statement,
        }
        self._expressions = {
            nodes.Literal: self.visit_literal,
            nodes.ListLiteral: self.visit_list_literal,
            nodes.Variable: self.visit_variable,
            nodes.Assign: self.visit_assign,
            nodes.Unary: self.visit_unary,
            nodes.Binary: self.visit_binary,
            nodes.Call: self.visit_call,
            nodes.Get: self.visit_get,
            nodes.Set: self.visit_set,
            nodes.This: self.visit_this,
        }

    def interpret(self, statements):
        """Executes statements in order. Returns False if a runtime error was reported (execution stops there)."""
        logger.debug("interpreting %d statement(s) from %s", len(statements), self.path)
        try:
            for statement in statements:
                self.execute(statement)
        except LbaRuntimeError as error:
            self.error_handler.report(error)
            return False
        except RecursionError:
            self.error_handler.report(LbaRuntimeError(None, "maximum recursion depth exceeded"))
            return False
        return True

    # --- dispatch ---

    def execute(self, statement):
        try:
            handler = self._statements[type(statement)]
        except KeyError:
            raise TypeError(f"no handler for statement {type(statement).__name__}") from None
        return handler(statement)

    def evaluate(self, expr):
        try:
            handler = self._expressions[type(expr)]
        except KeyError:
            raise TypeError(f"no handler for expression {type(expr).__name__}") from None
        return handler(expr)

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current frame on every exit path. Returns the Returned
        signal of a return statement, if one ran.
        """
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    return signal
        finally:
            self.environment = previous
        return None

    # --- statements ---

    def visit_expression_statement(self, statement):
        self.evaluate(statement.expression)

    def visit_print_statement(self, statement):
        value = self.evaluate(statement.expression)
        print(stringify(value), file=self.stdout if self.stdout is not None else sys.stdout)

    def visit_var_statement(self, statement):
        value = None
        if statement.initializer is not None:
            value = self.evaluate(statement.initializer)
        self.environment.define(statement.name.lexeme, value)

    def visit_block_statement(self, statement):
        return self.execute_block(statement.statements, Environment(self.environment))

    def visit_if_statement(self, statement):
        if is_truthy(self.evaluate(statement.condition)):
            return self.execute(statement.then_branch)
        if statement.else_branch is not None:
            return self.execute(statement.else_branch)
        return None

    def visit_while_statement(self, statement):
        while is_truthy(self.evaluate(statement.condition)):
            signal = self.execute(statement.body)
            if signal is not None:
                return signal
        return None

    def visit_function_statement(self, statement):
        self.environment.define(statement.name.lexeme, LbaFunction(statement, self.environment))

    def visit_return_statement(self, statement):
        value = None
        if statement.value is not None:
            value = self.evaluate(statement.value)
        return Returned(value)

    def visit_class_statement(self, statement):
        methods = {}
        static_methods = {}
        for method in statement.methods:
            is_initializer = method.name.lexeme == "init" and not method.is_static  # static init is a plain function
            function = LbaFunction(method, self.environment, is_initializer)
            if method.is_static:
                static_methods[method.name.lexeme] = function
            else:
                methods[method.name.lexeme] = function

        self.environment.define(statement.name.lexeme, LbaClass(statement.name.lexeme, methods, static_methods))

    # --- expressions ---

    def visit_literal(self, expr):
        return expr.value

    def visit_list_literal(self, expr):
        return [self.evaluate(element) for element in expr.elements]

    def visit_variable(self, expr):
        return self.environment.get(expr.name)

    def visit_assign(self, expr):
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_this(self, expr):
        return self.environment.get(expr.keyword)

    def visit_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        Interpreter.check_numbers(expr.operator, right)
        return -right

    def visit_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if Interpreter.is_number(left) and Interpreter.is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise TypeMismatch(operator, "Operands of '{}' must be two numbers or two strings.", operator.lexeme)

        Interpreter.check_numbers(operator, left, right)
        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            return Interpreter.divide(left, right)
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        if operator.type is TokenType.LESS_EQUAL:
            return left <= right

        raise TypeError(f"unknown binary operator {operator.type.name}")

    def visit_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LbaCallable):
            raise NotCallable(expr.paren, "Can only call functions and classes, not '{}'.", stringify(callee))

        arity = callee.arity()
        if arity != VARIADIC and len(arguments) != arity:
            msg = "Expected {} arguments but got {}."
            raise ArityMismatch(expr.paren, msg, [str(arity), str(len(arguments))])

        try:
            return callee.call(self, arguments)
        except LbaRuntimeError as error:
            if error.token is None:
                error.attach(expr.paren)
            raise

    def visit_get(self, expr):
        obj = self.evaluate(expr.object)

        if isinstance(obj, (LbaClass, NativeInstance, LbaInstance)):
            return obj.get(expr.name)

        raise UndefinedProperty(expr.name, "Only instances and classes have properties, not '{}'.", stringify(obj))

    def visit_set(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LbaInstance):
            raise TypeMismatch(expr.name, "Only instances have fields, not '{}'.", stringify(obj))

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    # --- helpers ---

    @staticmethod
    def is_number(value):
        return isinstance(value, float) and not isinstance(value, bool)

    @staticmethod
    def check_numbers(operator, *operands):
        if all(Interpreter.is_number(operand) for operand in operands):
            return
        if len(operands) == 1:
            raise TypeMismatch(operator, "Operand of '{}' must be a number.", operator.lexeme)
        raise TypeMismatch(operator, "Operands of '{}' must be numbers.", operator.lexeme)

    @staticmethod
    def divide(left, right):
        """IEEE division: x / 0 is +-Infinity, 0 / 0 is NaN."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right
