"""Generate Dart publisher and subscriber classes for the scopes of a schema."""

from __future__ import annotations

import logging

from dart_scope_generator import helper
from dart_scope_generator.config import DEFAULT_CONFIG, GeneratorConfig
from dart_scope_generator.errors import ErrorKind
from dart_scope_generator.helper import DartParameter, indent
from dart_scope_generator.namespace import NamespaceResolver
from dart_scope_generator.schema import Operation, Schema, Scope
from dart_scope_generator.topic import TopicTemplateCompiler

logger = logging.getLogger(__name__)

# Dart errors thrown by generated code, per error kind.
DART_ERROR_TYPES = {
    ErrorKind.PROTOCOL_MISMATCH: "thrift.TApplicationErrorType.UNKNOWN_METHOD",
}


class ScopeWriter:
    """A class that renders the Dart source file of a scope, based on the schema that declares it."""

    def __init__(
        self,
        schema: Schema,
        config: GeneratorConfig = DEFAULT_CONFIG,
        resolver: NamespaceResolver | None = None,
        compiler: TopicTemplateCompiler | None = None,
    ):
        """Initialize the writer.

        Args:
            schema (Schema): The schema whose scopes are rendered.
            config (GeneratorConfig): Generator settings.
            resolver (NamespaceResolver | None): Namespace resolver, created from `config` if omitted.
            compiler (TopicTemplateCompiler | None): Topic compiler, created from `config` if omitted.
        """
        self._schema = schema
        self._config = config
        self._resolver = resolver if resolver is not None else NamespaceResolver(config)
        self._compiler = compiler if compiler is not None else TopicTemplateCompiler(config)

    @property
    def docstring(self) -> list[str]:
        """The warning comment every generated file starts with."""
        return [
            f"// Autogenerated by Frugal Compiler ({self._config.compiler_version})",
            "// DO NOT EDIT UNLESS YOU ARE SURE THAT YOU KNOW WHAT YOU ARE DOING",
        ]

    def file_name(self, scope: Scope) -> str:
        """The base name of the scope's file, without extension, e.g. `f_events`."""
        return f"{self._config.file_prefix}{scope.name.lower()}"

    def emit_library(self, scope: Scope) -> str:
        """The `library` directive of the scope's file."""
        return f"library {self._resolver.library_name(self._schema)}.src.{self.file_name(scope)};"

    def emit_imports(self, scope: Scope) -> list[str]:
        """Import lines of the scope's file.

        These are `dart:async`, the runtime libraries, one import per namespace referenced
        through an include, and one import per parameter type defined in this schema.
        """
        lines = ["import 'dart:async';", ""]
        for name in self._config.runtime_dependencies:
            lines.append(f"import 'package:{name}/{name}.dart' as {name};")

        referenced: list[str] = []
        for include in scope.referenced_includes():
            namespace = self._resolver.to_module_name(self._resolver.resolve_include(self._schema, include)).lower()
            line = f"import 'package:{namespace}/{namespace}.dart' as t_{namespace};"
            if line not in referenced:
                referenced.append(line)

        # Parameter types of this schema live in files named after the type.
        for op in scope.operations:
            if op.include:
                continue
            lower_param = op.param_type.lower()
            line = f"import '{lower_param}.dart' as {self._resolver.param_alias(self._schema, op)};"
            if line not in referenced:
                referenced.append(line)

        if referenced:
            lines.append("")
            lines.extend(referenced)

        return lines

    def emit_constants(self) -> str:
        return f"const String delimiter = '{helper.escape_string(self._config.topic_delimiter)}';"

    def _prefix_parameters(self, scope: Scope) -> list[DartParameter]:
        return [DartParameter(variable, "String") for variable in scope.prefix.variables]

    def _topic_lines(self, scope: Scope, op: Operation) -> list[str]:
        return [
            f'var op = "{op.name}";',
            f'var prefix = "{self._compiler.compile(scope.prefix)}";',
            f'var topic = "{self._compiler.topic_expression(scope)}";',
        ]

    def _class_comment(self, scope: Scope) -> list[str]:
        return helper.new_inline_comment(scope.comment)

    def _method_comment(self, op: Operation) -> list[str]:
        return helper.new_inline_comment(op.comment, helper.TAB)

    def emit_publisher(self, scope: Scope) -> str:
        """Render the publisher class of a scope.

        The publisher owns a transport, a protocol and a sequence number. Each operation gets a
        `publish<Op>` method that frames the request as a CALL message and returns the future of
        the final flush.

        Args:
            scope (Scope): The scope.

        Returns:
            str: The class source.
        """
        class_name = f"{helper.title(scope.name)}Publisher"
        lines = self._class_comment(scope)
        lines.append(helper.new_class_declaration(class_name))
        lines.append(indent("frugal.Transport transport;"))
        lines.append(indent("thrift.TProtocol protocol;"))
        lines.append(indent("int seqId;"))
        lines.append("")

        lines.append(indent(helper.new_function(class_name, [DartParameter("provider", "frugal.Provider")])))
        lines.append(indent("var tp = provider.newTransportProtocol();", 2))
        lines.append(indent("transport = tp.transport;", 2))
        lines.append(indent("protocol = tp.protocol;", 2))
        lines.append(indent("seqId = 0;", 2))
        lines.append(indent("}"))

        for op in scope.operations:
            params = self._prefix_parameters(scope)
            params.append(DartParameter("req", self._resolver.qualified_param_name(self._schema, op)))

            lines.append("")
            lines.extend(self._method_comment(op))
            lines.append(indent(helper.new_function(f"publish{op.name}", params, "Future")))
            body = self._topic_lines(scope, op)
            body += [
                "transport.preparePublish(topic);",
                "var oprot = protocol;",
                "seqId++;",
                "var msg = new thrift.TMessage(op, thrift.TMessageType.CALL, seqId);",
                "oprot.writeMessageBegin(msg);",
                "req.write(oprot);",
                "oprot.writeMessageEnd();",
                "return oprot.transport.flush();",
            ]
            lines.extend(indent(line, 2) for line in body)
            lines.append(indent("}"))

        lines.append("}")
        return "\n".join(lines) + "\n"

    def emit_subscriber(self, scope: Scope) -> str:
        """Render the subscriber class of a scope.

        Each operation gets a `subscribe<Op>` method and a private `_recv<Op>` decoder. Decoding
        errors, including messages for another operation, go to the subscription's error
        channel instead of escaping the stream listener.

        Args:
            scope (Scope): The scope.

        Returns:
            str: The class source.
        """
        class_name = f"{helper.title(scope.name)}Subscriber"
        lines = self._class_comment(scope)
        lines.append(helper.new_class_declaration(class_name))
        lines.append(indent("final frugal.Provider provider;"))
        lines.append("")
        lines.append(indent(f"{class_name}(this.provider) {{}}"))

        for op in scope.operations:
            qualified_param = self._resolver.qualified_param_name(self._schema, op)
            callback = f"on{op.param_type}"
            params: list[DartParameter | str] = list(self._prefix_parameters(scope))
            params.append(f"dynamic {callback}({qualified_param} req)")

            lines.append("")
            lines.extend(self._method_comment(op))
            lines.append(
                indent(helper.new_function(f"subscribe{op.name}", params, "Future<frugal.Subscription>", is_async=True))
            )
            body = self._topic_lines(scope, op)
            body += [
                "var tp = provider.newTransportProtocol();",
                "await tp.transport.subscribe(topic);",
                "var sub = new frugal.Subscription(topic, tp.transport);",
                "tp.transport.signalRead.listen((_) {",
                indent("try {"),
                indent(f"{callback}(_recv{op.name}(op, tp.protocol));", 2),
                indent("} catch (e) {"),
                indent("sub.signal(e);", 2),
                indent("}"),
                "});",
                "tp.transport.error.listen((Error e) {",
                indent("sub.signal(e);"),
                "});",
                "return sub;",
            ]
            lines.extend(indent(line, 2) for line in body)
            lines.append(indent("}"))
            lines.append("")
            lines.extend(self._emit_recv(op, qualified_param))

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _emit_recv(self, op: Operation, qualified_param: str) -> list[str]:
        """Render the private decoder of one operation."""
        params = [DartParameter("op", "String"), DartParameter("iprot", "thrift.TProtocol")]
        lines = [indent(helper.new_function(f"_recv{op.name}", params, qualified_param))]
        body = [
            "var tMsg = iprot.readMessageBegin();",
            "if (tMsg.name != op) {",
            indent("thrift.TProtocolUtil.skip(iprot, thrift.TType.STRUCT);"),
            indent("iprot.readMessageEnd();"),
            indent("throw new thrift.TApplicationError("),
            indent(f"{DART_ERROR_TYPES[ErrorKind.PROTOCOL_MISMATCH]}, tMsg.name);", 2),
            "}",
            f"var req = new {qualified_param}();",
            "req.read(iprot);",
            "iprot.readMessageEnd();",
            "return req;",
        ]
        lines.extend(indent(line, 2) for line in body)
        lines.append(indent("}"))
        return lines

    def dumps(self, scope: Scope) -> str:
        """Generates the full source of the scope's file.

        Args:
            scope (Scope): The scope.

        Returns:
            str: The output string.
        """
        logger.debug("Rendering scope '%s' of schema '%s'.", scope.name, self._schema.name)

        out: list[str] = []
        out.extend(self.docstring)
        out.append("")
        out.append(self.emit_library(scope))
        out.append("")
        out.extend(self.emit_imports(scope))
        out.append("")
        out.append(self.emit_constants())
        out.append("")
        out.append(self.emit_publisher(scope))
        out.append(self.emit_subscriber(scope))

        return "\n".join(out)
