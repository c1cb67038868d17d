"""Recursive-descent parser for the Lambda language: one method per grammar rule.

```
<declaration> ::= <class_decl> | <fun_decl> | <ui_decl> | <var_decl> | <statement>
<class_decl>  ::= "class" IDENT "{" ("static"? <function>)* "}"     ; a method named init is the constructor
<fun_decl>    ::= "fn" <function>
<function>    ::= IDENT "(" <params>? ")" "{" <declaration>* "}"    ; at most 255 params
<var_decl>    ::= "let" IDENT ("=" <expression>)? ";"
<ui_decl>     ::= "ui" IDENT ("=" <expression>)? ";"                 ; same as let at runtime
<statement>   ::= <if_stmt> | <while_stmt> | <return_stmt> | <print_stmt> | <block> | <expr_stmt>

<expression>  ::= <assignment>
<assignment>  ::= (<call> ".")? IDENT "=" <assignment> | <equality>  ; right-associative
<equality>    ::= <comparison> (("!=" | "==") <comparison>)*
<comparison>  ::= <term> ((">" | ">=" | "<" | "<=") <term>)*
<term>        ::= <factor> (("-" | "+") <factor>)*
<factor>      ::= <unary> (("/" | "*") <unary>)*
<unary>       ::= ("!" | "-") <unary> | <call>
<call>        ::= <primary> ("(" <arguments>? ")" | "." IDENT)*
<primary>     ::= "true" | "false" | "nil" | NUMBER | STRING | "this" | IDENT
                | "[" <arguments>? "]" | "(" <expression> ")"
```

Errors use panic-mode recovery: a ParseError unwinds to declaration(), which records it, synchronizes to the next
statement boundary and carries on. Failed declarations are dropped from the result.
"""

import logging

from lba.core import nodes
from lba.core.tokens import TokenType
from lba.lang.error import ParseError

logger = logging.getLogger(__name__)


class Parser:
    """Parses a token list produced by Lexer.scan. Call parse() once."""
    MAX_ARGUMENTS = 255
    SYNC_TOKENS = (TokenType.LET, TokenType.UI, TokenType.FN)

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0
        self.errors = []
        self._function_depth = 0

    @property
    def error_count(self):
        return len(self.errors)

    def parse(self):
        """Returns (statements, error_count). statements only contains declarations that parsed successfully."""
        statements = []
        while not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        logger.debug("parsed %d statement(s) with %d error(s)", len(statements), self.error_count)
        return statements, self.error_count

    # --- declarations ---

    def declaration(self):
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FN):
                return self.function("function")
            if self.match(TokenType.LET, TokenType.UI):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            is_static = self.match(TokenType.STATIC)
            methods.append(self.function("method", is_static))

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return nodes.ClassStatement(name, tuple(methods))

    def function(self, kind, is_static=False):
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")

        self._function_depth += 1
        try:
            body = self.block()
        finally:
            self._function_depth -= 1

        return nodes.FunctionStatement(name, tuple(params), tuple(body), is_static)

    def var_declaration(self):
        keyword = self.previous()
        kind = "UI component" if keyword.type is TokenType.UI else "variable"
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        what = "UI declaration" if keyword.type is TokenType.UI else "variable declaration"
        self.consume(TokenType.SEMICOLON, f"Expect ';' after {what}.")
        return nodes.VarStatement(name, initializer, keyword)

    # --- statements ---

    def statement(self):
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.BlockStatement(tuple(self.block()))
        return self.expression_statement()

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = self.statement() if self.match(TokenType.ELSE) else None
        return nodes.IfStatement(condition, then_branch, else_branch)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.WhileStatement(condition, self.statement())

    def return_statement(self):
        keyword = self.previous()
        if not self._function_depth:
            self.error(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.ReturnStatement(keyword, value)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.PrintStatement(value)

    def block(self):
        """Parses declarations up to and including the closing '}'. The opening '{' has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.ExpressionStatement(expr)

    # --- expressions ---

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.equality()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            if isinstance(expr, nodes.Get):
                return nodes.Set(expr.object, expr.name, value)

            self.error(equals, "Invalid assignment target.")

        return expr

    def _binary(self, operand, *operators):
        """Parses a left-associative chain of operand separated by any of operators."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def equality(self):
        return self._binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self._binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                arguments = self.arguments(TokenType.RIGHT_PAREN)
                paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
                expr = nodes.Call(expr, paren, tuple(arguments))
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                return expr

    def arguments(self, closing):
        """Comma-separated expressions up to (not including) closing."""
        arguments = []
        if not self.check(closing):
            while True:
                if len(arguments) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break
        return arguments

    def primary(self):
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous().literal)
        if self.match(TokenType.THIS):
            return nodes.This(self.previous())
        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous())

        if self.match(TokenType.LEFT_BRACKET):
            bracket = self.previous()
            elements = self.arguments(TokenType.RIGHT_BRACKET)
            self.consume(TokenType.RIGHT_BRACKET, "Expect ']' after list elements.")
            return nodes.ListLiteral(bracket, tuple(elements))

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return expr

        raise self.error(self.peek(), "Expect expression.")

    # --- helpers ---

    def match(self, *types):
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type, msg):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), msg)

    def check(self, token_type):
        return not self.is_at_end() and self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, msg):
        """Records a ParseError and returns it. Callers raise it when the current production cannot continue."""
        error = ParseError(token, msg)
        self.errors.append(error)
        return error

    def synchronize(self):
        """Discards tokens until just past a ';' or until the next token starts a binding or function declaration."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.SYNC_TOKENS:
                return
            self.advance()
