from dataclasses import dataclass


@dataclass
class Options:
    """Execution policy and presentation switches for one interpreter."""

    repl_echo: bool = False
    max_loop_iterations: int | None = None  # None means loops are unbounded
    warn_unused: bool = False
