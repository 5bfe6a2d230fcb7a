"""Callable runtime values: native functions implemented in Python, and user-defined functions (closures)."""

from abc import ABC, abstractmethod

from lox.runtime.environment import Environment


class LoxCallable(ABC):

    @property
    @abstractmethod
    def arity(self):
        """Exact number of arguments call expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this object with already-evaluated arguments. The interpreter checks arity beforehand."""


class NativeFunction(LoxCallable):

    def __init__(self, name, arity, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    @property
    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.fn(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction({self.name!r}, {self._arity})"


class LoxFunction(LoxCallable):
    """A function declaration paired with the environment it was declared in. The environment is captured by reference,
    so later changes to captured variables are visible inside the function, and vice versa.
    """

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    @property
    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)
        if completion is not None:
            return completion.value
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self):
        return f"LoxFunction({self.declaration.name.lexeme!r}, arity={self.arity})"
