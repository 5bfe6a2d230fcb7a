"""Error handling for the Lox language. Only LoxErrors should be encountered while running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors come in four tiers, reported in this order: lexical, parse, resolve and runtime. The first three are collected
by their phase and never raised to the caller; runtime errors abort the current run only.
"""

import sys

from termcolor import colored


class LoxError(Exception):
    """Templates an error message so that it can be used to report a Lox error. msg is formatted with exprs, and
    exprs[0] should be the offending lexeme (used for the diagnosis line).
    """

    def __init__(self, msg, exprs=None, line=None, column=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*exprs)
        self.expr = exprs[0] if exprs else ""
        self.line = line
        self.column = column  # offset of exprs[0] within its line, if known

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def __str__(self):
        if self.line is None:
            return self.msg
        return f"[line {self.line}] {self.msg}"


class LexicalError(LoxError):
    """Malformed literal, unterminated string or unrecognized character."""


class ParseError(LoxError):
    """Grammar violation."""


class ResolveError(LoxError):
    """Static scoping violation found by the resolver."""


class LoxRuntimeError(LoxError):
    """Aborts the current run. Carries the token the error is reported at."""

    def __init__(self, token, msg, exprs=None):
        super().__init__(msg, exprs if exprs is not None else token.lexeme, line=token.line, column=token.column)
        self.token = token
        self.expr = token.lexeme


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report Lox errors instead."""
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.sources = {}  # dict of path: source lines, used for diagnosis
        self.path = None   # path currently being run

    def register_source(self, path, source):
        """Registers source under path. Should be called prior to reporting errors for that source."""
        self.sources[path] = source.split("\n")
        self.path = path

    def register_step(self, phase, detail):
        """Prints a pipeline step trace if verbose."""
        if self.verbose:
            print(colored(f"[{phase}] ", ErrorHandler.STEP, attrs=["bold"]) + colored(detail, attrs=["dark"]))

    def source_line(self, line_num):
        """Returns line line_num of the current source, or None if it is not known."""
        lines = self.sources.get(self.path, [])
        if line_num is None or not 0 < line_num <= len(lines):
            return None
        return lines[line_num - 1]

    @staticmethod
    def diagnose(error, line):
        """Returns line with the offending part of error highlighted and underlined. Assumes error.expr in line.
        The column of error is used when it points at error.expr, otherwise the first occurrence is underlined.
        """
        color = ErrorHandler.ERROR

        start = error.column
        if start is None or line[start:start + len(error.expr)] != error.expr:
            start = line.index(error.expr)
        end = start + len(error.expr)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        path = self.path if self.path is not None else "<unknown>"
        if error.line is None:
            return colored(f"{path}: ", attrs=["bold"])
        return colored(f"{path}:{error.line}: ", attrs=["bold"])

    def _print_diagnosis(self, error):
        if error.internal or not error.diagnosis or not error.expr:
            return
        line = self.source_line(error.line)
        if line is not None and error.expr in line:
            print(ErrorHandler.diagnose(error, line))

    def report(self, error):
        """Prints error without exiting."""
        error_msg = self._location(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        self._print_diagnosis(error)

    def throw(self, error):
        """Reports error, then exits if fatal."""
        self.throw_all([error])

    def throw_all(self, errors):
        """Reports every error in errors (one phase's worth), then exits once if fatal."""
        for error in errors:
            self.report(error)

        if len(errors) > 1:
            print(colored(f"{len(errors)} errors generated.", attrs=["bold"]))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LoxError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LoxError("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LoxError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
