"""Pytest configuration and fixtures for Dart scope generator tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from dart_scope_generator.schema import Include, Operation, Prefix, Schema, Scope

EVENTS_SCHEMA_DOCUMENT = """
name: events
namespaces:
  dart: com.example.events
includes:
  - name: base
    namespaces:
      dart: a.b
  - name: shared
    namespaces:
      dart: a.b
  - name: plain
scopes:
  - name: Events
    comment: This scope publishes user events.
    prefix: "user.{id}"
    operations:
      - name: Created
        param: UserEvent
      - name: Tagged
        param: base.Tag
  - name: Alerts
    prefix: ""
    operations:
      - name: Raised
        param: shared.Alert
      - name: Cleared
        param: plain.Alert
services:
  - name: Store
"""


@pytest.fixture
def events_scope() -> Scope:
    """The `Events` scope with prefix `user.{id}` and one same-schema operation."""
    return Scope(
        name="Events",
        prefix=Prefix("user.{id}", ("id",)),
        operations=(Operation("Created", "UserEvent"),),
    )


@pytest.fixture
def events_schema(events_scope) -> Schema:
    """A schema without namespace declarations that holds the `Events` scope."""
    return Schema(name="events", scopes=(events_scope,))


@pytest.fixture
def include_schema() -> Schema:
    """A schema with two includes sharing the namespace `a.b` and one without a Dart namespace."""
    return Schema(
        name="store",
        namespaces={"dart": "com.example.store", "go": "store"},
        includes={
            "base": Include("base", {"dart": "a.b"}),
            "shared": Include("shared", {"dart": "a.b"}),
            "plain": Include("plain"),
        },
        scopes=(
            Scope(
                name="items",
                prefix=Prefix("store.{region}.{shop}", ("region", "shop")),
                operations=(
                    Operation("Added", "Item", include="base"),
                    Operation("Removed", "Item", include="shared"),
                    Operation("Moved", "Move", include="plain"),
                    Operation("Counted", "Count"),
                ),
                comment=("Inventory changes.",),
            ),
        ),
    )


@pytest.fixture
def schema_document(tmp_path) -> Path:
    """A schema document on disk, as written by the parser."""
    path = tmp_path / "schemas" / "events.frugal.yaml"
    path.parent.mkdir()
    path.write_text(EVENTS_SCHEMA_DOCUMENT, encoding="utf8")
    return path
