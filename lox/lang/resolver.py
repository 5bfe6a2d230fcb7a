"""Static scope resolution for Lox.

The resolver walks the whole tree once, keeping a stack of local scopes (name: whether or not its initializer has
finished). Globals are never tracked: the stack is empty at the top level. For every variable reference or assignment
that binds to a local scope, the number of scopes between the reference and its declaration is written into the
interpreter's side table; references with no entry are looked up in the globals at runtime.

Every error is collected, and resolution always runs to completion so that all of them can be reported at once.
"""

import enum

from lox.lang import syntax
from lox.lang.error import LoxError, ResolveError


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()
    METHOD = enum.auto()


class Resolver:
    """Resolves statements into interpreter's hop-count table. Errors are collected in self.errors."""

    def __init__(self, interpreter):
        self.interpreter = interpreter
        self.scopes = []
        self.current_function = FunctionType.NONE
        self.errors = []

    def resolve(self, statements):
        """Resolves every statement in statements and returns the list of errors found so far."""
        for stmt in statements:
            self.resolve_stmt(stmt)
        return self.errors

    def error(self, token, msg):
        self.errors.append(ResolveError(msg, token.lexeme, line=token.line, column=token.column))

    # scopes

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "'{}' is already declared in this scope; only globals can be redeclared")
        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        """Records the hop count to the nearest scope declaring name. Nothing is recorded for globals."""
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return

    def resolve_function(self, function, function_type):
        enclosing_function = self.current_function
        self.current_function = function_type

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function

    # statements

    def resolve_stmt(self, stmt):
        """Resolves stmt. Nesting deeper than the Python stack allows is recorded as an error, and the scope stack is
        restored to what it was before stmt.
        """
        depth, function_type = len(self.scopes), self.current_function
        try:
            self.visit_stmt(stmt)
        except RecursionError:
            del self.scopes[depth:]
            self.current_function = function_type
            self.errors.append(ResolveError("too much nesting", diagnosis=False))

    def visit_stmt(self, stmt):
        if isinstance(stmt, syntax.Block):
            self.begin_scope()
            self.resolve(stmt.statements)
            self.end_scope()

        elif isinstance(stmt, syntax.Var):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)

        elif isinstance(stmt, syntax.Function):
            # defined eagerly so that the function can refer to itself recursively
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt, FunctionType.FUNCTION)

        elif isinstance(stmt, syntax.Class):
            self.declare(stmt.name)
            self.define(stmt.name)
            for method in stmt.methods:
                self.resolve_function(method, FunctionType.METHOD)

        elif isinstance(stmt, (syntax.Expression, syntax.Print)):
            self.resolve_expr(stmt.expression)

        elif isinstance(stmt, syntax.If):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)

        elif isinstance(stmt, syntax.While):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)

        elif isinstance(stmt, syntax.Return):
            if self.current_function is FunctionType.NONE:
                self.error(stmt.keyword, "can't return from top-level code")
            if stmt.value is not None:
                self.resolve_expr(stmt.value)

        else:
            raise LoxError("cannot resolve statement '{}'", type(stmt).__name__, internal=True)

    # expressions

    def resolve_expr(self, expr):
        if isinstance(expr, syntax.Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.error(expr.name, "can't read local variable '{}' in its own initializer")
            self.resolve_local(expr, expr.name)

        elif isinstance(expr, syntax.Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)

        elif isinstance(expr, (syntax.Binary, syntax.Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)

        elif isinstance(expr, syntax.Unary):
            self.resolve_expr(expr.right)

        elif isinstance(expr, syntax.Grouping):
            self.resolve_expr(expr.expression)

        elif isinstance(expr, syntax.Call):
            self.resolve_expr(expr.callee)
            for argument in expr.arguments:
                self.resolve_expr(argument)

        elif isinstance(expr, syntax.Literal):
            pass

        else:
            raise LoxError("cannot resolve expression '{}'", type(expr).__name__, internal=True)
