"""Top-level module for Dart scope generation."""

from __future__ import annotations

import argparse
import glob
import logging
import os.path
import subprocess
import tempfile
from pathlib import Path

from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.generator import DartGenerator
from dart_scope_generator.schema import Schema, load_schema

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".yaml", ".yml", ".json")
DART_SUFFIX = ".dart"


def format_outputs(raw_input: str) -> str:
    """Formats raw Dart source using `dart format`.

    Args:
        raw_input (str): The unformatted input.

    Returns:
        str: The formatted output, or the raw input if formatting is not possible.
    """
    try:
        with tempfile.NamedTemporaryFile(mode="w", suffix=DART_SUFFIX, delete=False, encoding="utf-8") as f:
            temp_path = Path(f.name)
            f.write(raw_input)

        try:
            subprocess.run(
                ["dart", "format", str(temp_path)],
                capture_output=True,
                check=True,
            )
            return temp_path.read_text(encoding="utf-8")

        finally:
            temp_path.unlink(missing_ok=True)

    except FileNotFoundError:
        logger.warning("dart not found, writing unformatted output.")
        return raw_input
    except subprocess.CalledProcessError as e:
        logger.error(f"dart format failed: {e}")
        logger.error(f"Stderr: {e.stderr.decode('utf-8', errors='replace')}")
        return raw_input


def find_schema_paths(
    paths: list[str],
    excludes: list[str],
    root_directory: str,
    recursive: bool,
) -> list[str]:
    """Collect schema documents from paths, directories and glob expressions.

    Args:
        paths (list[str]): Paths, directories or glob expressions to search.
        excludes (list[str]): Paths or glob expressions to leave out.
        root_directory (str): The directory relative paths are resolved against.
        recursive (bool): Whether directories and `**` globs are searched recursively.

    Returns:
        list[str]: The sorted schema document paths.
    """
    excluded_paths: set[str] = set()
    for exclude in excludes:
        exclude_path = os.path.join(root_directory, exclude)
        if os.path.isfile(exclude_path):
            excluded_paths.add(exclude_path)
        else:
            excluded_paths = excluded_paths.union(glob.glob(exclude_path, recursive=recursive))

    search_paths: set[str] = set()
    for path in paths:
        search_path = os.path.join(root_directory, path)

        if recursive and os.path.isdir(search_path):
            for root, _, files in os.walk(search_path):
                for file in files:
                    if file.endswith(SCHEMA_SUFFIXES):
                        search_paths.add(os.path.join(root, file))
        elif os.path.isdir(search_path):
            for file in os.listdir(search_path):
                file_path = os.path.join(search_path, file)
                if os.path.isfile(file_path) and file.endswith(SCHEMA_SUFFIXES):
                    search_paths.add(file_path)
        else:
            search_paths = search_paths.union(glob.glob(search_path, recursive=recursive))

    return sorted(search_paths - excluded_paths)


def generate_schema(
    schema: Schema,
    output_dir: str,
    config: GeneratorConfig = DEFAULT_CONFIG,
    format_dart: bool = False,
) -> list[str]:
    """Entry-point for generating the Dart package of one schema.

    Args:
        schema (Schema): The schema to generate for.
        output_dir (str): The root output directory.
        config (GeneratorConfig): Generator settings.
        format_dart (bool): Whether to run `dart format` on the generated sources.

    Returns:
        list[str]: The written scope files.
    """
    generator = DartGenerator(config)
    formatter = format_outputs if format_dart else None
    return generator.generate(schema, output_dir, formatter)


def run(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Run the generator on a set of paths that point to schema documents.

    Uses `generate_schema` on each input file.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the generator.
        root_directory (str): The directory, from which the generator is executed.

    Returns:
        list[str]: All scope files that were written.
    """
    config = GeneratorConfig(
        compiler_version=getattr(args, "compiler_version", None) or DEFAULT_CONFIG.compiler_version,
        topic_delimiter=getattr(args, "delimiter", None) or DEFAULT_CONFIG.topic_delimiter,
    )
    output_dir = os.path.join(root_directory, args.output_dir)

    schema_paths = find_schema_paths(args.paths, args.excludes, root_directory, args.recursive)
    if not schema_paths:
        logger.warning("No schema documents found for %s.", args.paths)
        return []

    written: list[str] = []
    for path in schema_paths:
        schema = load_schema(path)
        logger.info("Generating '%s' from '%s'.", schema.name, path)
        written.extend(generate_schema(schema, output_dir, config, getattr(args, "format", False)))

    logger.info("Generated %d scope file(s) from %d schema(s).", len(written), len(schema_paths))
    return written
