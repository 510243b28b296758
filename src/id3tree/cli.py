"""Command-line entry point: read a delimited file, induce a tree, print it.

Usage:
    id3tree <csv_file_path> <result_column_number> [options]
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from loguru import logger

from id3tree.dataset import read_dataset
from id3tree.exceptions import DatasetReadError, InvariantViolationError
from id3tree.induction import InductionConfig, induce
from id3tree.logging import LoggingHandle, LogLevel, enable_logging
from id3tree.tree import render_tree

_VERBOSITY_LEVELS: tuple[LogLevel, ...] = ("INFO", "SPLIT", "DEBUG")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the `id3tree` command.

    Returns:
        argparse.ArgumentParser: The configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="id3tree",
        description="Induce an ID3 classification tree from a delimited text file and print it.",
    )
    parser.add_argument("csv_file_path", help="Delimited text file whose first row is the header.")
    parser.add_argument("result_column_number", type=int, help="0-based index of the label column.")
    parser.add_argument("--separator", default=",", help="Field delimiter (default: ',').")
    parser.add_argument(
        "--strict-gain",
        action="store_true",
        help="Only split on attributes with strictly positive information gain.",
    )
    parser.add_argument(
        "--no-fold-unknown",
        action="store_true",
        help="Treat the '?' label as an ordinary label instead of folding it into the most common one.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for split decisions (-vv) and leaves (-vvv).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command.

    Args:
        argv (Sequence[str] | None): Arguments without the program name.
            Defaults to `sys.argv[1:]`.

    Returns:
        int: Process exit code, 0 on success. Failures exit through
            `SystemExit` with code 2 for usage errors and 1 otherwise.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    handle: LoggingHandle | None = None
    if args.verbose:
        handle = enable_logging(level=_VERBOSITY_LEVELS[min(args.verbose, len(_VERBOSITY_LEVELS)) - 1])

    config = InductionConfig(
        fold_unknown_labels=not args.no_fold_unknown,
        require_positive_gain=args.strict_gain,
    )
    try:
        dataset = read_dataset(args.csv_file_path, args.result_column_number, separator=args.separator)
        tree = induce(dataset, config)
    except (DatasetReadError, InvariantViolationError, ValueError) as exc:
        logger.error("Tree induction failed", error=str(exc))
        parser.exit(1, f"{parser.prog}: error: {exc}\n")
    finally:
        if handle is not None:
            handle.disable()

    print(render_tree(tree))
    return 0
