"""Re-exports the publisher and subscriber classes of every scope from the library facade file."""

from __future__ import annotations

import logging
import os.path

from dart_scope_generator import helper
from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.errors import FacadeWriteError
from dart_scope_generator.namespace import NamespaceResolver
from dart_scope_generator.schema import Schema, Scope

logger = logging.getLogger(__name__)


class ExportAggregator:
    """Keeps the export lines of a schema's facade file in sync with its scopes."""

    def __init__(self, config: GeneratorConfig = DEFAULT_CONFIG, resolver: NamespaceResolver | None = None):
        self._config = config
        self._resolver = resolver if resolver is not None else NamespaceResolver(config)

    def facade_path(self, schema: Schema, directory: str) -> str:
        """The facade file of a schema's package, e.g. `<directory>/lib/com_example.dart`."""
        return os.path.join(directory, "lib", f"{self._resolver.package_name(schema)}.{self._config.language}")

    def export_line(self, scope: Scope) -> str:
        """The export declaration of one scope."""
        name = helper.title(scope.name)
        file_name = f"{self._config.file_prefix}{scope.name.lower()}.{self._config.language}"
        return f"export 'src/{file_name}' show {name}Publisher, {name}Subscriber;"

    def append_exports(self, schema: Schema, facade_path: str) -> list[str]:
        """Append the export lines of all scopes that the facade file does not contain yet.

        Content that is already present is never rewritten; new lines are written after the
        original end of file. Running this twice adds nothing the second time. A missing facade
        file is created.

        Args:
            schema (Schema): The schema whose scopes are exported.
            facade_path (str): Path of the facade file.

        Returns:
            list[str]: The export lines that were appended.

        Raises:
            FacadeWriteError: If the facade file cannot be read or written. The original error is the cause.
        """
        try:
            existing = ""
            if os.path.exists(facade_path):
                with open(facade_path, encoding="utf8") as f:
                    existing = f.read()

            present = {line.strip() for line in existing.splitlines()}
            missing: list[str] = []
            for scope in schema.scopes:
                line = self.export_line(scope)
                if line not in present and line not in missing:
                    missing.append(line)

            if not missing:
                logger.debug("Facade '%s' already exports all scopes.", facade_path)
                return []

            os.makedirs(os.path.dirname(facade_path) or ".", exist_ok=True)
            with open(facade_path, "a", encoding="utf8") as f:
                if existing and not existing.endswith("\n"):
                    f.write("\n")
                f.write("\n" + "\n".join(missing) + "\n")

        except (OSError, UnicodeDecodeError) as e:
            raise FacadeWriteError(f"Could not update facade '{facade_path}': {e}") from e

        logger.info("Added %d export(s) to '%s'.", len(missing), facade_path)
        return missing
