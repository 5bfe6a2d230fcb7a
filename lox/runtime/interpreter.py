"""Tree-walking evaluator for resolved Lox programs.

Statement execution returns a completion: None when a statement completes normally, or a Returned carrying the value of
a `return` statement. Blocks, ifs and loops hand a Returned straight back to their caller without running anything
else, and LoxFunction.call consumes it. Runtime errors are LoxRuntimeErrors: they abort the current interpret call and
are kept in Interpreter.err.
"""

import sys
import time
from dataclasses import dataclass

from lox.lang import syntax
from lox.lang.error import LoxError, LoxRuntimeError
from lox.lang.tokens import TokenType
from lox.runtime.callable import LoxCallable, LoxFunction, NativeFunction
from lox.runtime.environment import Environment
from lox.runtime.printer import StdoutPrinter


RECURSION_LIMIT = 10000  # Python frames; one Lox call takes roughly ten


@dataclass(frozen=True)
class Returned:
    """Completion of a statement that executed `return`."""
    value: object = None


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Values of different types are never equal."""
    if left is None and right is None:
        return True
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value):
    """Display form of a runtime value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


class Interpreter:
    """Holds all state that outlives a single run: globals, the resolution side table and the last result/error."""

    def __init__(self, printer=None):
        self.printer = printer if printer is not None else StdoutPrinter()

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # dict of expression id: hop count, written by the resolver

        self.result = None  # display form of the last value computed by the current run
        self.err = None     # LoxRuntimeError of the last run, if any

        self.globals.define("clock", NativeFunction("clock", 0, time.time))

        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def interpret(self, statements):
        """Executes statements. A runtime error stops the run and is kept in self.err; globals defined before it
        remain. self.result is None unless the run computed a value.
        """
        self.result = None
        self.err = None
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.err = error
            self.environment = self.globals

    def resolve(self, expr, depth):
        """Called by the resolver: expr's variable lives depth environments up from where it is evaluated."""
        self.locals[expr.id] = depth

    # statements

    def execute(self, stmt):
        """Executes stmt and returns its completion (None or Returned)."""
        if isinstance(stmt, syntax.Expression):
            self.result = stringify(self.evaluate(stmt.expression))

        elif isinstance(stmt, syntax.Print):
            self.result = stringify(self.evaluate(stmt.expression))
            self.printer.print(self.result)

        elif isinstance(stmt, syntax.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
                self.result = stringify(value)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, syntax.Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, syntax.If):
            condition = self.evaluate(stmt.condition)
            self.result = stringify(condition)

            if is_truthy(condition):
                return self.execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch)

        elif isinstance(stmt, syntax.While):
            return self.execute_while(stmt)

        elif isinstance(stmt, syntax.Function):
            self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

        elif isinstance(stmt, syntax.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
                self.result = stringify(value)
            return Returned(value)

        elif isinstance(stmt, syntax.Class):
            raise LoxRuntimeError(stmt.name, "can't declare class '{}': classes are not supported")

        else:
            raise LoxError("cannot execute statement '{}'", type(stmt).__name__, internal=True)

        return None

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment however the block exits."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                completion = self.execute(stmt)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous
        return None

    def execute_while(self, stmt):
        while True:
            condition = self.evaluate(stmt.condition)
            self.result = stringify(condition)
            if not is_truthy(condition):
                return None

            completion = self.execute(stmt.body)
            if completion is not None:
                return completion

    # expressions

    def evaluate(self, expr):
        if isinstance(expr, syntax.Literal):
            return expr.value

        elif isinstance(expr, syntax.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, syntax.Variable):
            return self.look_up_variable(expr.name, expr)

        elif isinstance(expr, syntax.Assign):
            value = self.evaluate(expr.value)

            distance = self.locals.get(expr.id)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, syntax.Logical):
            left = self.evaluate_operand(expr.operator, expr.left)

            if expr.operator.type is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left

            return self.evaluate_operand(expr.operator, expr.right)

        elif isinstance(expr, syntax.Unary):
            return self.evaluate_unary(expr)

        elif isinstance(expr, syntax.Binary):
            return self.evaluate_binary(expr)

        elif isinstance(expr, syntax.Call):
            return self.evaluate_call(expr)

        raise LoxError("cannot evaluate expression '{}'", type(expr).__name__, internal=True)

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr.id)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def evaluate_operand(self, operator, expr):
        """Evaluates an operand of operator. Running out of Python stack is reported at operator."""
        try:
            return self.evaluate(expr)
        except RecursionError:
            raise LoxRuntimeError(operator, "stack overflow") from None

    def evaluate_unary(self, expr):
        right = self.evaluate_operand(expr.operator, expr.right)

        if expr.operator.type is TokenType.MINUS:
            check_number_operand(expr.operator, right)
            return -right
        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        raise LoxRuntimeError(expr.operator, "unknown unary operator '{}'")

    def evaluate_binary(self, expr):
        operator = expr.operator
        left = self.evaluate_operand(operator, expr.left)
        right = self.evaluate_operand(operator, expr.right)

        if operator.type is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator, "operands of '{}' must be two numbers or include a string")

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        check_number_operands(operator, left, right)

        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            if right == 0:
                raise LoxRuntimeError(operator, "division by zero")
            return left / right
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        if operator.type is TokenType.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(operator, "unknown binary operator '{}'")

    def evaluate_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "can only call functions, not {}", stringify(callee))

        if len(arguments) != callee.arity:
            msg = "expected {} arguments but got {}"
            raise LoxRuntimeError(expr.paren, msg, [str(callee.arity), str(len(arguments))])

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "stack overflow") from None


def check_number_operand(operator, operand):
    if not isinstance(operand, float):
        raise LoxRuntimeError(operator, "operand of '{}' must be a number")


def check_number_operands(operator, left, right):
    if not isinstance(left, float) or not isinstance(right, float):
        raise LoxRuntimeError(operator, "operands of '{}' must be numbers")
