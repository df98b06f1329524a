import argparse
import logging
import sys

from .config import Options
from .lox import TreeLox


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="treelox", description="Run Lox scripts")
    parser.add_argument("filename", nargs="?")
    parser.add_argument(
        "--max-loop-iterations", type=int, default=None, metavar="N",
        help="abort any single loop after N iterations")
    parser.add_argument(
        "--warn-unused", action="store_true",
        help="warn about local variables that are never read")
    parser.add_argument(
        "--verbose", action="store_true", help="log pipeline stages")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    options = Options(
        max_loop_iterations=args.max_loop_iterations,
        warn_unused=args.warn_unused)
    return TreeLox(options).main(args.filename)


if __name__ == "__main__":
    sys.exit(main())
