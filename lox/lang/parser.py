"""Recursive-descent parser for Lox. Grammar, lowest precedence first:

```
<program>     ::= <declaration>* EOF
<declaration> ::= "class" IDENT "{" <function>* "}"
                | "fun" <function>
                | "var" IDENT ( "=" <expression> )? ";"
                | <statement>
<function>    ::= IDENT "(" ( IDENT ( "," IDENT )* )? ")" <block>
<statement>   ::= <expression> ";"
                | "for" "(" ( <var decl> | <expression> ";" | ";" ) <expression>? ";" <expression>? ")" <statement>
                | "if" "(" <expression> ")" <statement> ( "else" <statement> )?
                | "print" <expression> ";"
                | "return" <expression>? ";"
                | "while" "(" <expression> ")" <statement>
                | <block>
<block>       ::= "{" <declaration>* "}"

<expression>  ::= IDENT "=" <expression> | <or>       ; right associative
<or>          ::= <and> ( "or" <and> )*
<and>         ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" ( <expression> ( "," <expression> )* )? ")" )*
<primary>     ::= "true" | "false" | "nil" | NUMBER | STRING | IDENT | "(" <expression> ")"
```

`for` has no node of its own: it is desugared into a while loop inside a block.

Parsing never raises to the caller. A syntax error, or nesting deeper than the Python stack allows, unwinds to the
enclosing declaration, which discards tokens up to the next statement boundary and carries on, so that several errors
can be reported in one pass.
"""

from lox.lang import syntax
from lox.lang.error import ParseError
from lox.lang.tokens import STATEMENT_KEYWORDS, TokenType


class Parser:
    """Parses eagerly on construction. Results are in self.statements and self.errors."""
    MAX_ARGUMENTS = 254

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0

        self.statements = []
        self.errors = []

        while not self.is_at_end:
            stmt = self.declaration()
            if stmt is not None:
                self.statements.append(stmt)

    # token stream helpers

    @property
    def is_at_end(self):
        return self.peek.type is TokenType.EOF

    @property
    def peek(self):
        return self.tokens[self.current]

    @property
    def previous(self):
        return self.tokens[self.current - 1]

    def check(self, token_type):
        return not self.is_at_end and self.peek.type is token_type

    def advance(self):
        if not self.is_at_end:
            self.current += 1
        return self.previous

    def match(self, *token_types):
        """Consumes the next token if it is one of token_types."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type, msg):
        """Consumes the next token, raising a ParseError if it isn't of token_type."""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek, msg)

    def error(self, token, msg):
        """Records a ParseError at token and returns it, so that the caller can decide whether to unwind."""
        if token.type is TokenType.EOF:
            error = ParseError(msg + " at end", line=token.line, column=token.column)
        else:
            error = ParseError(msg + " at '{}'", token.lexeme, line=token.line, column=token.column)
        self.errors.append(error)
        return error

    def synchronize(self):
        """Discards tokens until the next one plausibly begins a statement, or a semicolon has been consumed."""
        while not self.is_at_end:
            if self.peek.type in STATEMENT_KEYWORDS:
                return
            if self.advance().type is TokenType.SEMICOLON:
                return

    # declarations

    def declaration(self):
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek, "too much nesting")
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "expect class name")
        self.consume(TokenType.LEFT_BRACE, "expect '{{' before class body")

        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end:
            methods.append(self.function("method"))

        self.consume(TokenType.RIGHT_BRACE, "expect '}}' after class body")
        return syntax.Class(name, tuple(methods))

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"expect {kind} name")
        self.consume(TokenType.LEFT_PAREN, f"expect '(' after {kind} name")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek, f"can't have more than {Parser.MAX_ARGUMENTS} parameters")
                params.append(self.consume(TokenType.IDENTIFIER, "expect parameter name"))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "expect ')' after parameters")

        self.consume(TokenType.LEFT_BRACE, f"expect '{{{{' before {kind} body")
        return syntax.Function(name, tuple(params), tuple(self.block()))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "expect variable name")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "expect ';' after variable declaration")
        return syntax.Var(name, initializer)

    # statements

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return syntax.Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        self.consume(TokenType.LEFT_PAREN, "expect '(' after 'for'")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after loop condition")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "expect ')' after for clauses")

        body = self.statement()

        if increment is not None:
            body = syntax.Block((body, syntax.Expression(increment)))
        if condition is None:
            condition = syntax.Literal(True)
        body = syntax.While(condition, body)
        if initializer is not None:
            body = syntax.Block((initializer, body))

        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "expect '(' after 'if'")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "expect ')' after if condition")

        then_branch = self.statement()
        else_branch = self.statement() if self.match(TokenType.ELSE) else None

        return syntax.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after value")
        return syntax.Print(value)

    def return_statement(self):
        keyword = self.previous

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "expect ';' after return value")
        return syntax.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "expect '(' after 'while'")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "expect ')' after condition")

        return syntax.While(condition, self.statement())

    def block(self):
        """Parses the declarations of a block whose opening brace has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end:
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "expect '}}' after block")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after expression")
        return syntax.Expression(expr)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous
            value = self.assignment()

            if isinstance(expr, syntax.Variable):
                return syntax.Assign(expr.name, value)

            self.error(equals, "invalid assignment target")  # no need to unwind, the parser isn't confused

        return expr

    def _binary(self, operand, node, *operators):
        """Parses a left-associative chain of operand separated by operators."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous
            expr = node(expr, operator, operand())
        return expr

    def logic_or(self):
        return self._binary(self.logic_and, syntax.Logical, TokenType.OR)

    def logic_and(self):
        return self._binary(self.equality, syntax.Logical, TokenType.AND)

    def equality(self):
        return self._binary(self.comparison, syntax.Binary, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(self.term, syntax.Binary, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                            TokenType.LESS_EQUAL)

    def term(self):
        return self._binary(self.factor, syntax.Binary, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self._binary(self.unary, syntax.Binary, TokenType.SLASH, TokenType.STAR)

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous
            return syntax.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek, f"can't have more than {Parser.MAX_ARGUMENTS} arguments")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "expect ')' after arguments")
        return syntax.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return syntax.Literal(False)
        if self.match(TokenType.TRUE):
            return syntax.Literal(True)
        if self.match(TokenType.NIL):
            return syntax.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return syntax.Literal(self.previous.literal)

        if self.match(TokenType.IDENTIFIER):
            return syntax.Variable(self.previous)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "expect ')' after expression")
            return syntax.Grouping(expr)

        raise self.error(self.peek, "expect expression")
