"""Abstract syntax tree for Lox. Both node hierarchies are closed: every consumer (resolver, interpreter) handles each
variant explicitly and raises an internal LoxError for anything else.

Nodes are frozen and compare by identity. Every expression also carries a unique integer id, which is the key the
resolver and interpreter use for their hop-count side table: two identical expressions at different places in the
source must resolve independently.
"""

import itertools
from dataclasses import dataclass, field

from lox.lang.tokens import Token

_ids = itertools.count()


@dataclass(frozen=True, eq=False)
class Expr:
    id: int = field(default_factory=lambda: next(_ids), init=False, repr=False)


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: object


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to report errors at the call site
    arguments: tuple


@dataclass(frozen=True, eq=False)
class Stmt:
    pass


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Expr = None


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: tuple


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: tuple
    body: tuple


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Expr = None


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    """Parsed and resolved, but not evaluated: the runtime has no class or instance support."""
    name: Token
    methods: tuple
