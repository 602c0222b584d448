"""Builds the `pubspec.yaml` manifest of a generated Dart package."""

from __future__ import annotations

import logging
import os.path
from dataclasses import dataclass, field
from typing import Any

import yaml

from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.errors import ManifestWriteError
from dart_scope_generator.namespace import NamespaceResolver
from dart_scope_generator.schema import Schema

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "pubspec.yaml"
DESCRIPTION = "Autogenerated by the frugal compiler"


@dataclass(frozen=True)
class GitDependency:
    """A dependency fetched from a git remote."""

    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"git": {"url": self.url}}


@dataclass(frozen=True)
class PathDependency:
    """A dependency on a sibling package in the same output tree."""

    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}


Dependency = GitDependency | PathDependency


@dataclass
class Manifest:
    """Package metadata of one generated Dart package."""

    name: str
    version: str
    sdk: str
    description: str = DESCRIPTION
    dependencies: dict[str, Dependency] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """The manifest as a plain mapping, in the field order of `pubspec.yaml`."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "environment": {"sdk": self.sdk},
            "dependencies": {name: self.dependencies[name].to_dict() for name in sorted(self.dependencies)},
        }


class DependencyManifestBuilder:
    """Creates the manifest for a schema and writes it next to the generated sources."""

    def __init__(self, config: GeneratorConfig = DEFAULT_CONFIG, resolver: NamespaceResolver | None = None):
        self._config = config
        self._resolver = resolver if resolver is not None else NamespaceResolver(config)

    def build(self, schema: Schema) -> Manifest:
        """Build the manifest of a schema.

        The runtime libraries are always present. Each referenced include adds a path
        dependency on the sibling package named after its module. Dependencies are keyed by
        module name, so includes that resolve to the same namespace yield one entry.

        Args:
            schema (Schema): The schema to build the manifest for.

        Returns:
            Manifest: The manifest.
        """
        dependencies: dict[str, Dependency] = {
            name: GitDependency(url) for name, url in self._config.runtime_dependencies.items()
        }

        for include in schema.referenced_includes():
            module_name = self._resolver.to_module_name(self._resolver.resolve_include(schema, include))
            if module_name in dependencies:
                logger.debug("Dependency '%s' of include '%s' is already present.", module_name, include)
            dependencies[module_name] = PathDependency(f"../{module_name}")

        return Manifest(
            name=self._resolver.package_name(schema),
            version=self._config.compiler_version,
            sdk=self._config.sdk_constraint,
            dependencies=dependencies,
        )

    @staticmethod
    def dumps(manifest: Manifest) -> str:
        """Serialize a manifest to YAML."""
        return yaml.safe_dump(manifest.to_dict(), sort_keys=False, default_flow_style=False)

    def write(self, schema: Schema, directory: str) -> str:
        """Build the manifest of a schema and write it to `directory/pubspec.yaml`.

        Args:
            schema (Schema): The schema.
            directory (str): The output directory of the schema's package.

        Returns:
            str: The path of the written manifest.

        Raises:
            ManifestWriteError: If serialization or writing fails. The original error is the cause.
        """
        path = os.path.join(directory, MANIFEST_FILE_NAME)
        manifest = self.build(schema)

        try:
            content = self.dumps(manifest)
            with open(path, "w", encoding="utf8") as f:
                f.write(content)
        except (OSError, yaml.YAMLError) as e:
            raise ManifestWriteError(f"Could not write manifest '{path}': {e}") from e

        logger.info("Wrote manifest '%s' with %d dependencies.", path, len(manifest.dependencies))
        return path
