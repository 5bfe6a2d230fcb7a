"""Session control for Lox. A Session owns one interpreter for its whole lifetime and pushes source text through the
pipeline (lexer -> parser -> resolver -> interpreter), either from a file or one command-line entry at a time. Global
bindings survive from one run to the next; runtime errors don't.
"""

from dataclasses import dataclass, field

from lox.lang.error import LoxError
from lox.lang.lexical import Lexer
from lox.lang.parser import Parser
from lox.lang.resolver import Resolver
from lox.runtime.interpreter import Interpreter


@dataclass
class Report:
    """Outcome of one run. Phases after the first one with errors are skipped, so their fields stay empty."""
    lexical_errors: list = field(default_factory=list)
    parse_errors: list = field(default_factory=list)
    resolve_errors: list = field(default_factory=list)
    runtime_error: LoxError = None
    result: str = None  # display form of the last value computed by this run

    @property
    def errors(self):
        """Errors of the first failing phase, in lexical -> parse -> resolve -> runtime order."""
        for errors in (self.lexical_errors, self.parse_errors, self.resolve_errors):
            if errors:
                return errors
        return [self.runtime_error] if self.runtime_error is not None else []

    @property
    def ok(self):
        return not self.errors


class Session:
    """Governs a Lox session: one interpreter, any number of runs."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, printer=None):
        self.error_handler = error_handler
        self.error_handler.register_source(path, "")

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(printer)
        self.results = []  # formatted results of successful command-line runs

        if self.cmd_line:
            self.error_handler.fatal = False
        elif path == Session.SH_FILE:
            raise LoxError("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    def execute(self, source):
        """Runs source through the whole pipeline without reporting anything. Returns a Report."""
        report = Report()
        step = self.error_handler.register_step

        lexer = Lexer(source)
        report.lexical_errors = lexer.errors
        step("lex", f"{len(lexer.tokens) - 1} tokens, {len(lexer.errors)} errors")
        if lexer.errors:
            return report

        parser = Parser(lexer.tokens)
        report.parse_errors = parser.errors
        step("parse", f"{len(parser.statements)} statements, {len(parser.errors)} errors")
        if parser.errors:
            return report

        resolver = Resolver(self.interpreter)
        report.resolve_errors = resolver.resolve(parser.statements)
        step("resolve", f"{len(self.interpreter.locals)} locals resolved, {len(report.resolve_errors)} errors")
        if report.resolve_errors:
            return report

        self.interpreter.interpret(parser.statements)
        report.runtime_error = self.interpreter.err
        if report.runtime_error is None:
            report.result = self.interpreter.result
        step("run", "ok" if report.runtime_error is None else "runtime error")

        return report

    def run(self, source):
        """Runs source and reports the first failing phase through the error handler. Returns whether or not the run
        succeeded. In command-line mode the result of a successful run, if it computed one, is kept in self.results.
        """
        self.error_handler.register_source(self.path, source)

        report = self.execute(source)
        if not report.ok:
            self.error_handler.throw_all(report.errors)
            return False

        if self.cmd_line and report.result is not None:
            self.results.append(report.result)
        return True

    def run_file(self):
        """Reads self.path and runs it."""
        try:
            with open(self.path, "r") as file:
                source = file.read()
        except OSError:
            raise LoxError("'{}' could not be opened", self.path, diagnosis=False)

        return self.run(source)

    def pop(self):
        """Returns and forgets the latest result."""
        return self.results.pop()
