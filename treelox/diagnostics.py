import sys

from .tokens import Token


def write_stderr(text):
    print(text, file=sys.stderr)


class Diagnostics:
    """Collects errors and warnings from every pipeline stage.

    Scanner and resolver problems are reported against a line number, parser
    problems against the offending token. Each message is handed to a writer
    callable so hosts decide where the text goes.
    """

    def __init__(self, write_error=write_stderr, write_warning=write_stderr):
        self.write_error = write_error
        self.write_warning = write_warning
        self.had_error = False
        self.had_runtime_error = False

    def error(self, where, message):
        self.had_error = True
        self.write_error(f"[line {line_of(where)}] Error{describe(where)}: {message}")

    def warning(self, where, message):
        self.write_warning(f"[line {line_of(where)}] Warning{describe(where)}: {message}")

    def runtime_error(self, error):
        self.had_runtime_error = True
        self.write_error(f"{error.message} [line {error.token.line}]")

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False


def line_of(where):
    if isinstance(where, Token):
        return where.line
    return where


def describe(where):
    if not isinstance(where, Token):
        return ""
    if where.type == "EOF":
        return " at end"
    return f" at '{where.lexeme}'"
