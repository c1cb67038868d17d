"""Syntax tree nodes. Both node families are closed: the interpreter has exactly one handler per class below. Nodes are
produced once per parse and never mutated.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from lba.core.tokens import Token


class Expr:
    """Superclass of every expression node."""


class Stmt:
    """Superclass of every statement node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class ListLiteral(Expr):
    bracket: Token
    elements: Tuple[Expr, ...]


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing ')', used for error locations
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class This(Expr):
    keyword: Token


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expression: Expr


@dataclass(frozen=True)
class PrintStatement(Stmt):
    expression: Expr


@dataclass(frozen=True)
class VarStatement(Stmt):
    """Produced by both 'let' and 'ui' declarations; keyword only records which one was used."""
    name: Token
    initializer: Optional[Expr]
    keyword: Optional[Token] = None


@dataclass(frozen=True)
class BlockStatement(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class IfStatement(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class WhileStatement(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class FunctionStatement(Stmt):
    """Top-level 'fn' declarations and class methods. is_static only applies to methods."""
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]
    is_static: bool = False


@dataclass(frozen=True)
class ReturnStatement(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(frozen=True)
class ClassStatement(Stmt):
    name: Token
    methods: Tuple[FunctionStatement, ...]
