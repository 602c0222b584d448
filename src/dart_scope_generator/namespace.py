"""Resolution of schema namespaces and include references into Dart module identifiers."""

from __future__ import annotations

from dart_scope_generator import helper
from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.schema import Operation, Schema

ALIAS_PREFIX = "t_"


class NamespaceResolver:
    """Maps namespaces and includes of a schema to the identifiers used in generated Dart.

    A missing namespace declaration is not an error: the schema name (or the include name)
    is used in its place.
    """

    def __init__(self, config: GeneratorConfig = DEFAULT_CONFIG):
        self._lang = config.language

    def resolve_namespace(self, schema: Schema) -> str:
        """The namespace the schema declares for Dart, or the bare schema name."""
        return schema.namespaces.get(self._lang, schema.name)

    def resolve_include(self, schema: Schema, include_name: str) -> str:
        """The namespace an included schema declares for Dart, or the include name."""
        namespace = schema.namespace_for_include(include_name, self._lang)
        if namespace is None:
            return include_name
        return namespace

    @staticmethod
    def to_module_name(identifier: str) -> str:
        """Normalize a dotted identifier into a module name, e.g. `a.b` becomes `a_b`."""
        return helper.to_library_name(identifier)

    def module_alias(self, identifier: str) -> str:
        """The import prefix generated code uses for a module, e.g. `a.B` becomes `t_a_b`."""
        return f"{ALIAS_PREFIX}{self.to_module_name(identifier).lower()}"

    def package_name(self, schema: Schema) -> str:
        """The lower-cased package name of the schema, used for the manifest and the facade file."""
        return self.to_module_name(self.resolve_namespace(schema)).lower()

    def library_name(self, schema: Schema) -> str:
        """The last component of the declared namespace, or the schema name."""
        namespace = schema.namespaces.get(self._lang)
        if namespace is None:
            return schema.name
        return namespace.split(".")[-1]

    def param_alias(self, schema: Schema, operation: Operation) -> str:
        """The import alias under which the parameter type of an operation is reachable.

        With an include, the alias derives from the include's namespace. Without one, the
        type is expected in a sibling file named after the type itself, so the alias derives
        from the lower-cased type name and never from the enclosing schema's namespace.

        Args:
            schema (Schema): The schema that declares the operation.
            operation (Operation): The operation.

        Returns:
            str: The alias, e.g. `t_base` or `t_userevent`.
        """
        if operation.include:
            return self.module_alias(self.resolve_include(schema, operation.include))
        return self.module_alias(operation.param_type)

    def qualified_param_name(self, schema: Schema, operation: Operation) -> str:
        """The parameter type of an operation qualified with its import alias, e.g. `t_base.Thing`."""
        return f"{self.param_alias(schema, operation)}.{operation.param_type}"
