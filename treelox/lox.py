import dataclasses
import logging
import sys

from .config import Options
from .diagnostics import Diagnostics, write_stderr
from .errors import LoxRuntimeError
from .interpreter import Interpreter
from .parser import Parser
from .resolver import Resolver
from .scanner import Scanner

logger = logging.getLogger(__name__)

# Each Lox call costs a handful of Python frames.
RECURSION_LIMIT = 15000


class TreeLox:
    """Runs source text through scanner, parser, resolver and interpreter.

    One TreeLox keeps one interpreter, so globals defined by an earlier run
    stay visible to later ones (which is what the prompt relies on).
    """

    def __init__(self, options=None, write=print, write_error=write_stderr,
                 write_warning=write_stderr):
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.options = options or Options()
        self.diagnostics = Diagnostics(write_error, write_warning)
        self.interpreter = Interpreter(self.diagnostics, self.options, write)

    def main(self, filename=None):
        if filename is not None:
            self.run_file(filename)
        else:
            self.run_prompt()

        if self.diagnostics.had_error:
            return 65
        if self.diagnostics.had_runtime_error:
            return 70
        return 0

    def run_file(self, filename):
        with open(filename, "r") as file:
            self.run(file.read(), filename)

    def run_prompt(self):
        self.options = dataclasses.replace(self.options, repl_echo=True)
        self.interpreter.options = self.options
        while True:
            try:
                line = input("> ")
            except EOFError:
                print()
                break
            self.diagnostics.reset()
            self.run(line, "<stdin>")

    def run(self, source, file=""):
        tokens = Scanner(source, self.diagnostics, file).scan_tokens()
        logger.debug("Scanned %d tokens from %r", len(tokens), file)

        statements = Parser(tokens, self.diagnostics).parse()
        logger.debug("Parsed %d top-level statements", len(statements))

        if self.diagnostics.had_error:
            logger.debug("Skipping resolution after syntax errors")
            return

        try:
            locals = Resolver(self.diagnostics, self.options).resolve(statements)
        except RecursionError:
            self.diagnostics.error(tokens[-1], "Program nests too deeply.")
            return
        logger.debug("Resolved %d local references", len(locals))

        if self.diagnostics.had_error:
            logger.debug("Skipping evaluation after resolution errors")
            return

        self.interpreter.resolve(locals)
        try:
            self.interpreter.interpret(statements)
        except RecursionError:
            self.diagnostics.runtime_error(
                LoxRuntimeError(tokens[-1], "Stack overflow."))
