import unittest

from lox.lang import syntax
from lox.lang.error import ResolveError
from lox.lang.lexical import Lexer
from lox.lang.parser import Parser
from lox.lang.resolver import Resolver
from lox.lang.tokens import Token, TokenType
from lox.runtime.interpreter import Interpreter
from lox.runtime.printer import BufferPrinter


def resolve(source):
    """Returns (statements, interpreter, errors) for source."""
    parser = Parser(Lexer(source).tokens)
    assert not parser.errors, parser.errors

    interpreter = Interpreter(BufferPrinter())
    errors = Resolver(interpreter).resolve(parser.statements)
    return parser.statements, interpreter, errors


class ResolverErrorTestCase(unittest.TestCase):

    def test_valid_programs(self):
        should_pass = [
            "var a = 1; var a = 2;",
            "var a = a;",  # globals aren't tracked, this fails at runtime instead
            "{ var a = 1; { var b = a; } }",
            "fun f(a) { return a; }",
            "fun f() { fun g() { return 1; } return g; }",
            "{ var a = 1; fun f() { return a; } }",
            "fun f(a) { { var a = 2; } }",
            "class A { m() { return 1; } }",
        ]
        for case in should_pass:
            __, __, errors = resolve(case)
            self.assertEqual([], errors, case)

    def test_own_initializer(self):
        __, __, errors = resolve("{ var a = a; }")
        self.assertEqual(1, len(errors))
        self.assertIsInstance(errors[0], ResolveError)
        self.assertEqual("can't read local variable 'a' in its own initializer", errors[0].msg)

        __, __, errors = resolve("var a = 1; { var a = a + 1; }")
        self.assertEqual(1, len(errors))

    def test_redeclaration(self):
        should_fail = [
            "{ var a = 1; var a = 2; }",
            "fun f(a) { var a = 1; }",
            "fun f(a, a) { }",
            "{ fun g() { } var g; }",
        ]
        for case in should_fail:
            __, __, errors = resolve(case)
            self.assertEqual(1, len(errors), case)
            self.assertIn("already declared in this scope", errors[0].msg, case)

    def test_top_level_return(self):
        __, __, errors = resolve("return 1;")
        self.assertEqual(1, len(errors))
        self.assertEqual("can't return from top-level code", errors[0].msg)

        __, __, errors = resolve("{ if (true) return; }")
        self.assertEqual(1, len(errors))

    def test_all_errors_reported(self):
        __, __, errors = resolve("return 1;\n{ var a = 1; var a = 2; }\n{ var b = b; }")
        self.assertEqual([1, 2, 3], [error.line for error in errors])

    def test_deep_nesting_is_an_error(self):
        minus = Token(TokenType.MINUS, "-", None, 1)
        expr = syntax.Literal(1.0)
        for __ in range(50000):
            expr = syntax.Unary(minus, expr)
        statements = [syntax.Block((syntax.Expression(expr),)), syntax.Print(syntax.Literal(2.0))]

        resolver = Resolver(Interpreter(BufferPrinter()))
        errors = resolver.resolve(statements)
        self.assertEqual(1, len(errors))
        self.assertIsInstance(errors[0], ResolveError)
        self.assertEqual("too much nesting", errors[0].msg)
        self.assertEqual([], resolver.scopes)

    def test_error_column(self):
        __, __, errors = resolve("{ var b = b; }")
        self.assertEqual(10, errors[0].column)


class ResolverDistanceTestCase(unittest.TestCase):

    def test_globals_are_not_recorded(self):
        __, interpreter, __ = resolve("var a = 1; print a; a = 2; fun f() { return a; }")
        self.assertEqual({}, interpreter.locals)

    def test_block_distance(self):
        statements, interpreter, __ = resolve("{ var a = 1; { print a; } }")
        variable = statements[0].statements[1].statements[0].expression
        self.assertEqual(1, interpreter.locals[variable.id])

    def test_parameter_distance(self):
        statements, interpreter, __ = resolve("fun f(x) { return x; }")
        variable = statements[0].body[0].value
        self.assertEqual(0, interpreter.locals[variable.id])

    def test_assignment_distance(self):
        statements, interpreter, __ = resolve("{ var a; fun f() { a = 1; } }")
        assign = statements[0].statements[1].body[0].expression
        self.assertEqual(1, interpreter.locals[assign.id])

    def test_identical_expressions_resolve_independently(self):
        statements, interpreter, __ = resolve("{ var a = 1; { print a; var a = 2; print a; } }")
        inner = statements[0].statements[1].statements
        first, second = inner[0].expression, inner[2].expression

        self.assertEqual(first.name.lexeme, second.name.lexeme)
        self.assertEqual(1, interpreter.locals[first.id])
        self.assertEqual(0, interpreter.locals[second.id])

    def test_nearest_scope_wins(self):
        statements, interpreter, __ = resolve("{ var a = 1; { var a = 2; { print a; } } }")
        variable = statements[0].statements[1].statements[1].statements[0].expression
        self.assertEqual(1, interpreter.locals[variable.id])


if __name__ == '__main__':
    unittest.main()
