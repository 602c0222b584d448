"""The Dart backend as seen by the compiler driver."""

from __future__ import annotations

import logging
import os.path
from collections.abc import Callable
from enum import Enum

from dart_scope_generator.config import DEFAULT_CONFIG, DEFAULT_OUTPUT_DIR, GeneratorConfig
from dart_scope_generator.errors import UnsupportedFileTypeError
from dart_scope_generator.exports import ExportAggregator
from dart_scope_generator.manifest import DependencyManifestBuilder
from dart_scope_generator.namespace import NamespaceResolver
from dart_scope_generator.schema import Schema, Scope, Service
from dart_scope_generator.topic import TopicTemplateCompiler
from dart_scope_generator.writer import ScopeWriter

logger = logging.getLogger(__name__)


class FileType(Enum):
    """Kinds of files a driver can ask a backend for."""

    COMBINED_SERVICE_FILE = "combined_service"
    COMBINED_SCOPE_FILE = "combined_scope"
    PUBLISH_FILE = "publish"
    SUBSCRIBE_FILE = "subscribe"


class DartGenerator:
    """Generates the Dart package of a schema: scope sources, the manifest and the facade exports.

    Services produce no output in this backend.
    """

    def __init__(self, config: GeneratorConfig = DEFAULT_CONFIG):
        self.config = config
        self.resolver = NamespaceResolver(config)
        self.compiler = TopicTemplateCompiler(config)
        self.manifest_builder = DependencyManifestBuilder(config, self.resolver)
        self.exports = ExportAggregator(config, self.resolver)

    @staticmethod
    def default_output_dir() -> str:
        return DEFAULT_OUTPUT_DIR

    def get_output_dir(self, directory: str, schema: Schema) -> str:
        """The package directory of a schema below `directory`, named after its module."""
        if self.config.language in schema.namespaces:
            return os.path.join(directory, self.resolver.to_module_name(schema.namespaces[self.config.language]))
        return os.path.join(directory, schema.name)

    def generate_dependencies(self, schema: Schema, directory: str) -> None:
        """Write `pubspec.yaml` and add the scope exports to the facade file.

        Args:
            schema (Schema): The schema.
            directory (str): The package directory of the schema.
        """
        self.manifest_builder.write(schema, directory)
        self.exports.append_exports(schema, self.exports.facade_path(schema, directory))

    def generate_file(self, name: str, output_dir: str, file_type: FileType) -> str:
        """Determine and prepare the path of a generated file.

        Args:
            name (str): The name of the scope the file is for.
            output_dir (str): The package directory.
            file_type (FileType): The kind of file requested.

        Returns:
            str: The path of the file below `lib/src`. Parent directories are created.

        Raises:
            UnsupportedFileTypeError: For any file type other than a combined scope file.
        """
        if file_type is not FileType.COMBINED_SCOPE_FILE:
            raise UnsupportedFileTypeError(f"Bad file type for dartlang generator: {file_type.value}")

        source_dir = os.path.join(output_dir, "lib", "src")
        os.makedirs(source_dir, exist_ok=True)
        return os.path.join(source_dir, f"{self.config.file_prefix}{name.lower()}.{self.config.language}")

    def generate_scope(
        self,
        schema: Schema,
        scope: Scope,
        output_dir: str,
        formatter: Callable[[str], str] | None = None,
    ) -> str:
        """Render a scope and write it to its file.

        Args:
            schema (Schema): The schema declaring the scope.
            scope (Scope): The scope.
            output_dir (str): The package directory.
            formatter (Callable[[str], str] | None, optional): Applied to the source before writing.

        Returns:
            str: The path of the written file.
        """
        path = self.generate_file(scope.name, output_dir, FileType.COMBINED_SCOPE_FILE)
        writer = ScopeWriter(schema, self.config, self.resolver, self.compiler)

        output = writer.dumps(scope)
        if formatter is not None:
            output = formatter(output)

        with open(path, "w", encoding="utf8") as output_file:
            output_file.write(output)

        logger.info("Wrote scope '%s' to '%s'.", scope.name, path)
        return path

    def generate_service(self, schema: Schema, service: Service) -> None:
        logger.debug("Skipping service '%s' of schema '%s'.", service.name, schema.name)

    def generate(
        self,
        schema: Schema,
        directory: str,
        formatter: Callable[[str], str] | None = None,
    ) -> list[str]:
        """Generate the complete package of a schema below `directory`.

        Args:
            schema (Schema): The schema.
            directory (str): The root output directory shared by all packages.
            formatter (Callable[[str], str] | None, optional): Applied to every scope source.

        Returns:
            list[str]: The paths of the scope files that were written.
        """
        output_dir = self.get_output_dir(directory, schema)
        os.makedirs(output_dir, exist_ok=True)

        written = [self.generate_scope(schema, scope, output_dir, formatter) for scope in schema.scopes]
        for service in schema.services:
            self.generate_service(schema, service)

        self.generate_dependencies(schema, output_dir)
        return written
