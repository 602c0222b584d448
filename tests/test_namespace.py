"""Tests for namespace and include resolution."""

from __future__ import annotations

import pytest

from dart_scope_generator.config import GeneratorConfig
from dart_scope_generator.namespace import NamespaceResolver
from dart_scope_generator.schema import Include, Operation, Schema


@pytest.fixture
def resolver() -> NamespaceResolver:
    return NamespaceResolver()


class TestResolveNamespace:
    """Tests for the namespace of the schema itself."""

    def test_declared_namespace(self, resolver, include_schema):
        assert resolver.resolve_namespace(include_schema) == "com.example.store"

    def test_missing_namespace_falls_back_to_schema_name(self, resolver, events_schema):
        assert resolver.resolve_namespace(events_schema) == "events"

    def test_namespace_of_other_language_is_ignored(self, resolver):
        schema = Schema(name="orders", namespaces={"go": "github.com/orders"})
        assert resolver.resolve_namespace(schema) == "orders"

    def test_language_comes_from_config(self, include_schema):
        resolver = NamespaceResolver(GeneratorConfig(language="go"))
        assert resolver.resolve_namespace(include_schema) == "store"

    def test_package_name_is_lower_cased_module_name(self, resolver):
        schema = Schema(name="x", namespaces={"dart": "Com.Example.Store"})
        assert resolver.package_name(schema) == "com_example_store"

    def test_library_name_uses_last_component(self, resolver, include_schema, events_schema):
        assert resolver.library_name(include_schema) == "store"
        assert resolver.library_name(events_schema) == "events"


class TestResolveInclude:
    """Tests for include resolution."""

    def test_declared_include_namespace(self, resolver, include_schema):
        assert resolver.resolve_include(include_schema, "base") == "a.b"

    def test_include_without_dart_namespace_uses_include_name(self, resolver, include_schema):
        assert resolver.resolve_include(include_schema, "plain") == "plain"

    def test_unknown_include_uses_include_name(self, resolver, include_schema):
        assert resolver.resolve_include(include_schema, "missing") == "missing"

    def test_resolution_is_deterministic(self, resolver, include_schema):
        first = resolver.resolve_include(include_schema, "shared")
        second = resolver.resolve_include(include_schema, "shared")
        assert first == second == "a.b"


class TestModuleNames:
    """Tests for module name normalization."""

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("a.b", "a_b"),
            ("com.example.Events", "com_example_Events"),
            ("plain", "plain"),
        ],
    )
    def test_to_module_name(self, identifier, expected):
        assert NamespaceResolver.to_module_name(identifier) == expected

    def test_module_alias_is_lower_cased(self, resolver):
        assert resolver.module_alias("com.Example") == "t_com_example"


class TestQualifiedParamName:
    """Tests for the alias rule of operation parameters."""

    @pytest.mark.parametrize(
        "operation, expected",
        [
            (Operation("Added", "Item", include="base"), "t_a_b.Item"),
            (Operation("Moved", "Move", include="plain"), "t_plain.Move"),
            (Operation("Counted", "Count"), "t_count.Count"),
            (Operation("Created", "UserEvent"), "t_userevent.UserEvent"),
        ],
    )
    def test_qualified_param_name(self, resolver, include_schema, operation, expected):
        assert resolver.qualified_param_name(include_schema, operation) == expected

    def test_same_schema_alias_ignores_schema_namespace(self, resolver):
        schema = Schema(name="store", namespaces={"dart": "com.example.store"})
        alias = resolver.param_alias(schema, Operation("Counted", "Count"))
        assert alias == "t_count"
        assert "store" not in alias

    def test_includes_with_same_namespace_share_alias(self, resolver, include_schema):
        base = resolver.param_alias(include_schema, Operation("Added", "Item", include="base"))
        shared = resolver.param_alias(include_schema, Operation("Removed", "Item", include="shared"))
        assert base == shared == "t_a_b"

    def test_dotted_include_namespace(self, resolver):
        schema = Schema(name="s", includes={"inc": Include("inc", {"dart": "com.Vendor.Types"})})
        name = resolver.qualified_param_name(schema, Operation("Sent", "Thing", include="inc"))
        assert name == "t_com_vendor_types.Thing"
