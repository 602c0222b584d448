"""The `dart-scope-generator` command.

Reads parsed frugal schema documents and writes one Dart package per schema, with a
publisher and a subscriber class for every scope. Generated packages import the `thrift`
and `frugal` Dart runtimes.
"""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Sequence

from dart_scope_generator.config import DEFAULT_OUTPUT_DIR
from dart_scope_generator.run import run

logger = logging.getLogger(__name__)


def _add_input_arguments(parser: argparse.ArgumentParser):
    """Options that select which schema documents are read.

    Args:
        parser (argparse.ArgumentParser): The parser to extend.
    """
    inputs = parser.add_argument_group("input")
    inputs.add_argument(
        "-p",
        "--paths",
        type=str,
        nargs="+",
        default=["**/*.frugal.yaml"],
        help="schema documents (YAML or JSON), directories or glob expressions to generate from.",
    )
    inputs.add_argument(
        "-e",
        "--excludes",
        type=str,
        nargs="+",
        default=[],
        help="schema documents or glob expressions to skip.",
    )
    inputs.add_argument(
        "-r",
        "--recursive",
        dest="recursive",
        default=False,
        action="store_true",
        help="descend into directories and let `**` match nested directories.",
    )


def _add_output_arguments(parser: argparse.ArgumentParser):
    """Options that shape the generated Dart packages.

    Args:
        parser (argparse.ArgumentParser): The parser to extend.
    """
    outputs = parser.add_argument_group("output")
    outputs.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"root of the generated packages, one subdirectory per schema (default: {DEFAULT_OUTPUT_DIR}).",
    )
    outputs.add_argument(
        "--format",
        dest="format",
        default=False,
        action="store_true",
        help="run `dart format` over each scope file; unformatted output is kept if dart is unavailable.",
    )
    outputs.add_argument(
        "--compiler-version",
        dest="compiler_version",
        type=str,
        default=None,
        help="frugal version stamped into file headers and used as the package version.",
    )
    outputs.add_argument(
        "--delimiter",
        type=str,
        default=None,
        help="separator between the prefix, scope and operation parts of a topic.",
    )


def setup_parser() -> argparse.ArgumentParser:
    """Build the argument parser of `dart-scope-generator`.

    Returns:
        argparse.ArgumentParser: Parser with the input and output option groups.
    """
    parser = argparse.ArgumentParser(
        prog="dart-scope-generator",
        description="Generate Dart publishers, subscribers and pubspec manifests for frugal scopes.",
    )
    _add_input_arguments(parser)
    _add_output_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Generate Dart packages for the schema documents selected on the command line.

    Relative paths are resolved against the current working directory.

    Args:
        argv (Sequence[str] | None, optional): Command-line arguments; `sys.argv[1:]` if None.

    Returns:
        int: Exit status, 0 once all packages are written.
    """
    logging.basicConfig(level=logging.INFO)

    parser = setup_parser()
    args = parser.parse_args(argv)

    root_directory = os.getcwd()
    logger.info("Resolving schema paths against %s", root_directory)

    written = run(args, root_directory)
    logger.debug("%d scope file(s) written.", len(written))

    return 0
