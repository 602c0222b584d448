"""Parsed schema model and a loader for schema documents produced by the IDL parser."""

from __future__ import annotations

import json
import logging
import os.path
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from dart_scope_generator.errors import SchemaLoadError

logger = logging.getLogger(__name__)

PREFIX_VARIABLE = re.compile(r"{(\w*)}")


@dataclass(frozen=True)
class Include:
    """A reference to another schema, together with that schema's declared namespaces."""

    name: str
    namespaces: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Prefix:
    """The topic prefix of a scope.

    `string` is the literal as written in the IDL, e.g. `user.{id}`. `variables` lists the
    variable names in declaration order; placeholder `i` in the literal binds to `variables[i]`.
    """

    string: str = ""
    variables: tuple[str, ...] = ()

    def template(self) -> str:
        """The literal with every `{name}` placeholder replaced by a positional `%s` slot."""
        return PREFIX_VARIABLE.sub("%s", self.string)

    @property
    def placeholder_count(self) -> int:
        return len(PREFIX_VARIABLE.findall(self.string))


@dataclass(frozen=True)
class Operation:
    """A single message kind of a scope."""

    name: str
    param_type: str
    include: str = ""
    comment: tuple[str, ...] = ()

    @property
    def param(self) -> str:
        """The parameter as written in the IDL, e.g. `base.Thing` or `UserEvent`."""
        if self.include:
            return f"{self.include}.{self.param_type}"
        return self.param_type


@dataclass(frozen=True)
class Scope:
    """A pub/sub channel definition."""

    name: str
    prefix: Prefix = field(default_factory=Prefix)
    operations: tuple[Operation, ...] = ()
    comment: tuple[str, ...] = ()

    def referenced_includes(self) -> list[str]:
        """Distinct include names used by the operations of this scope, in first-seen order."""
        includes: list[str] = []
        for op in self.operations:
            if op.include and op.include not in includes:
                includes.append(op.include)
        return includes


@dataclass(frozen=True)
class Service:
    """An RPC service. This backend generates nothing for services."""

    name: str
    comment: tuple[str, ...] = ()


@dataclass(frozen=True)
class Schema:
    """One parsed IDL file."""

    name: str
    namespaces: dict[str, str] = field(default_factory=dict)
    includes: dict[str, Include] = field(default_factory=dict)
    scopes: tuple[Scope, ...] = ()
    services: tuple[Service, ...] = ()
    # Include names the parser flattened in from transitively included files.
    extra_referenced_includes: tuple[str, ...] = ()

    def namespace_for_include(self, include: str, lang: str) -> str | None:
        """Return the namespace declared for `lang` by the included schema, if any."""
        inc = self.includes.get(include)
        if inc is None:
            return None
        return inc.namespaces.get(lang)

    def referenced_includes(self) -> list[str]:
        """Distinct include names referenced anywhere in this schema, in first-seen order."""
        includes: list[str] = []
        for scope in self.scopes:
            for include in scope.referenced_includes():
                if include not in includes:
                    includes.append(include)
        for include in self.extra_referenced_includes:
            if include not in includes:
                includes.append(include)
        return includes


def _require(data: dict, key: str, context: str) -> Any:
    if key not in data or data[key] is None:
        raise SchemaLoadError(f"Missing required field '{key}' in {context}")
    return data[key]


def _comment(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.splitlines())
    return tuple(str(line) for line in value)


def _parse_operation(data: dict, context: str) -> Operation:
    name = _require(data, "name", context)
    param = str(_require(data, "param", f"operation '{name}' of {context}"))
    include = data.get("include", "")

    # The raw IDL form `include.Type` carries the include in the parameter itself.
    if not include and "." in param:
        include, param = param.split(".", 1)

    return Operation(name=name, param_type=param, include=include or "", comment=_comment(data.get("comment")))


def _parse_prefix(value: Any, context: str) -> Prefix:
    if value is None:
        return Prefix()

    if isinstance(value, str):
        return Prefix(string=value, variables=tuple(PREFIX_VARIABLE.findall(value)))

    if isinstance(value, dict):
        string = value.get("string", "") or ""
        variables = value.get("variables")
        if variables is None:
            variables = PREFIX_VARIABLE.findall(string)
        return Prefix(string=string, variables=tuple(variables))

    raise SchemaLoadError(f"Invalid prefix in {context}: expected a string or a mapping")


def _parse_scope(data: dict) -> Scope:
    name = _require(data, "name", "scope")
    context = f"scope '{name}'"
    operations = tuple(_parse_operation(op, context) for op in data.get("operations") or [])
    return Scope(
        name=name,
        prefix=_parse_prefix(data.get("prefix"), context),
        operations=operations,
        comment=_comment(data.get("comment")),
    )


def _parse_include(data: Any) -> Include:
    if isinstance(data, str):
        return Include(name=data)
    name = _require(data, "name", "include")
    return Include(name=name, namespaces=dict(data.get("namespaces") or {}))


def parse_schema(data: dict) -> Schema:
    """Build a schema from an already decoded schema document.

    Args:
        data (dict): The decoded document.

    Returns:
        Schema: The schema.

    Raises:
        SchemaLoadError: If required fields are missing or have the wrong shape.
    """
    if not isinstance(data, dict):
        raise SchemaLoadError("Schema document must be a mapping")

    name = _require(data, "name", "schema")
    includes = [_parse_include(inc) for inc in data.get("includes") or []]

    return Schema(
        name=name,
        namespaces=dict(data.get("namespaces") or {}),
        includes={inc.name: inc for inc in includes},
        scopes=tuple(_parse_scope(scope) for scope in data.get("scopes") or []),
        services=tuple(
            Service(name=_require(s, "name", "service"), comment=_comment(s.get("comment")))
            for s in data.get("services") or []
        ),
        extra_referenced_includes=tuple(data.get("referenced_includes") or []),
    )


def load_schema(path: str) -> Schema:
    """Load a schema document from a YAML or JSON file.

    Args:
        path (str): Path to the document.

    Returns:
        Schema: The loaded schema.
    """
    with open(path, encoding="utf8") as f:
        raw = f.read()

    try:
        if os.path.splitext(path)[1] == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SchemaLoadError(f"Invalid schema document '{path}': {e}") from e

    schema = parse_schema(data)
    logger.debug("Loaded schema '%s' with %d scope(s) from %s.", schema.name, len(schema.scopes), path)
    return schema
