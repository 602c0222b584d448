"""Compilation of scope topic prefixes into Dart string interpolations."""

from __future__ import annotations

import re

from dart_scope_generator import helper
from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.errors import TopicTemplateError
from dart_scope_generator.schema import Prefix, Scope

_SLOT = re.compile("%s")


class TopicTemplateCompiler:
    """Turns the prefix of a scope into the body of a Dart string literal."""

    def __init__(self, config: GeneratorConfig = DEFAULT_CONFIG):
        self._delimiter = config.topic_delimiter

    def compile(self, prefix: Prefix) -> str:
        """Compile a prefix into an interpolation template.

        An empty literal yields an empty template. Otherwise the delimiter is appended to the
        literal and slot `i` is replaced by `${variables[i]}`. Slots bind by position only,
        the names written inside the braces of the literal are ignored.

        Args:
            prefix (Prefix): The scope prefix.

        Returns:
            str: The template, e.g. `user.${id}.` for `user.{id}`.

        Raises:
            TopicTemplateError: If the number of placeholders differs from the number of variables.
        """
        if not prefix.string:
            return ""

        if prefix.placeholder_count != len(prefix.variables):
            raise TopicTemplateError(
                f"Prefix '{prefix.string}' has {prefix.placeholder_count} placeholder(s) "
                f"but declares {len(prefix.variables)} variable(s)"
            )

        template = helper.escape_string(prefix.template() + self._delimiter)
        if not prefix.variables:
            return template

        # Slots are filled left to right; the delimiter never contains `%s`.
        variables = iter(prefix.variables)
        return _SLOT.sub(lambda _: f"${{{next(variables)}}}", template)

    def topic_expression(self, scope: Scope) -> str:
        """The body of the Dart string literal that computes the topic of an operation.

        Generated code declares `prefix`, `op` and the `delimiter` constant before using it.
        """
        return f"${{prefix}}{helper.title(scope.name)}${{delimiter}}${{op}}"
