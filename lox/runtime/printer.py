"""Output sinks for print statements. The interpreter only ever talks to a Printer, so hosts (tests, other front ends)
can swap the destination without touching evaluation.
"""

import sys
from abc import ABC, abstractmethod


class Printer(ABC):

    @abstractmethod
    def print(self, *fragments):
        """Renders fragments as one line."""


class StdoutPrinter(Printer):
    """Writes each line to sys.stdout (looked up on every call, so redirection works)."""

    def print(self, *fragments):
        sys.stdout.write("".join(fragments) + "\n")


class BufferPrinter(Printer):
    """Keeps printed lines in memory."""

    def __init__(self):
        self.lines = []

    def print(self, *fragments):
        self.lines.append("".join(fragments))

    @property
    def text(self):
        return "".join(line + "\n" for line in self.lines)
