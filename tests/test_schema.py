"""Tests for the schema model and the schema document loader."""

from __future__ import annotations

import json

import pytest

from dart_scope_generator.errors import SchemaLoadError
from dart_scope_generator.schema import Include, Operation, Prefix, Schema, Scope, load_schema, parse_schema


class TestModel:
    """Tests for the schema dataclasses."""

    def test_prefix_template(self):
        assert Prefix("user.{id}.{kind}", ("id", "kind")).template() == "user.%s.%s"

    def test_prefix_without_placeholders(self):
        prefix = Prefix("user")
        assert prefix.template() == "user"
        assert prefix.placeholder_count == 0

    def test_operation_param(self):
        assert Operation("A", "Thing", include="base").param == "base.Thing"
        assert Operation("A", "Thing").param == "Thing"

    def test_referenced_includes_are_distinct_and_ordered(self, include_schema):
        assert include_schema.referenced_includes() == ["base", "shared", "plain"]

    def test_namespace_for_include(self, include_schema):
        assert include_schema.namespace_for_include("base", "dart") == "a.b"
        assert include_schema.namespace_for_include("plain", "dart") is None
        assert include_schema.namespace_for_include("missing", "dart") is None


class TestLoader:
    """Tests for loading schema documents."""

    def test_load_yaml(self, schema_document):
        schema = load_schema(str(schema_document))

        assert schema.name == "events"
        assert schema.namespaces == {"dart": "com.example.events"}
        assert schema.includes["base"] == Include("base", {"dart": "a.b"})
        assert schema.includes["plain"] == Include("plain")
        assert [scope.name for scope in schema.scopes] == ["Events", "Alerts"]
        assert [service.name for service in schema.services] == ["Store"]

    def test_scope_details(self, schema_document):
        events = load_schema(str(schema_document)).scopes[0]

        assert events.comment == ("This scope publishes user events.",)
        assert events.prefix == Prefix("user.{id}", ("id",))
        assert events.operations == (
            Operation("Created", "UserEvent"),
            Operation("Tagged", "Tag", include="base"),
        )

    def test_empty_prefix(self, schema_document):
        alerts = load_schema(str(schema_document)).scopes[1]
        assert alerts.prefix == Prefix("", ())

    def test_explicit_prefix_variables(self):
        schema = parse_schema(
            {
                "name": "s",
                "scopes": [{"name": "S", "prefix": {"string": "a.{x}.{y}", "variables": ["second", "first"]}}],
            }
        )
        assert schema.scopes[0].prefix == Prefix("a.{x}.{y}", ("second", "first"))

    def test_load_json(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"name": "s", "scopes": [{"name": "S", "operations": []}]}))
        assert load_schema(str(path)) == Schema(name="s", scopes=(Scope("S"),))

    def test_extra_referenced_includes(self):
        schema = parse_schema({"name": "s", "includes": ["deep"], "referenced_includes": ["deep"]})
        assert schema.includes == {"deep": Include("deep")}
        assert schema.referenced_includes() == ["deep"]

    def test_missing_name(self):
        with pytest.raises(SchemaLoadError, match="name"):
            parse_schema({"scopes": []})

    def test_missing_operation_param(self):
        with pytest.raises(SchemaLoadError, match="param"):
            parse_schema({"name": "s", "scopes": [{"name": "S", "operations": [{"name": "A"}]}]})

    def test_document_must_be_mapping(self):
        with pytest.raises(SchemaLoadError):
            parse_schema(["not", "a", "mapping"])

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("name: [unclosed")
        with pytest.raises(SchemaLoadError):
            load_schema(str(path))
