"""Lexical environments: a name -> value mapping chained to its enclosing environment. The chain is rooted at the
global environment, whose enclosing is None.
"""

from lox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self._enclosing = enclosing

    @property
    def enclosing(self):
        """Set once on creation."""
        return self._enclosing

    def define(self, name, value):
        """Binds name in this environment. Rebinding an existing name is allowed (global redeclaration)."""
        self.values[name] = value

    def get(self, name):
        """Looks token name up through the whole chain."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing
        raise LoxRuntimeError(name, "undefined variable '{}'")

    def assign(self, name, value):
        """Assigns to an existing binding of token name somewhere in the chain."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise LoxRuntimeError(name, "undefined variable '{}'")

    def ancestor(self, distance):
        """Returns the environment distance links up the chain (0 is self)."""
        environment = self
        for __ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self):
        return f"Environment(values={list(self.values)}, enclosing={self.enclosing!r})"
