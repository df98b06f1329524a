"""Shared fixtures for the treelox test suite."""

from dataclasses import dataclass, field

import pytest

from treelox import Diagnostics, Options, TreeLox
from treelox.parser import Parser
from treelox.scanner import Scanner


@dataclass
class Run:
    """Everything one program wrote, split by sink."""

    output: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    lox: TreeLox | None = None


@pytest.fixture
def run():
    def run(source, **options):
        result = Run()
        result.lox = TreeLox(
            Options(**options),
            write=result.output.append,
            write_error=result.errors.append,
            write_warning=result.warnings.append)
        result.lox.run(source)
        return result

    return run


@pytest.fixture
def diagnostics():
    errors = []
    warnings = []
    sink = Diagnostics(errors.append, warnings.append)
    sink.errors = errors
    sink.warnings = warnings
    return sink


@pytest.fixture
def parse(diagnostics):
    def parse(source):
        tokens = Scanner(source, diagnostics).scan_tokens()
        return Parser(tokens, diagnostics).parse()

    return parse
