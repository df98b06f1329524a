from .config import Options
from .diagnostics import Diagnostics
from .lox import TreeLox

__all__ = ["Diagnostics", "Options", "TreeLox"]
