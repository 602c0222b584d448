"""Errors raised while generating Dart sources."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """The kinds of failures a caller can tell apart."""

    UNSUPPORTED_FILE_TYPE = "unsupported file type"
    MANIFEST_IO = "manifest write failed"
    FACADE_IO = "facade write failed"
    # Only raised by generated code, when a subscriber reads a message for another operation.
    PROTOCOL_MISMATCH = "unknown method"


class GeneratorError(Exception):
    """Base class for all generation failures. Subclasses set `kind`."""

    kind: ErrorKind | None = None

    def __init__(self, message: str):
        super().__init__(f"frugal: {message}")


class UnsupportedFileTypeError(GeneratorError):
    """Raised when a file type is requested that this backend cannot generate."""

    kind = ErrorKind.UNSUPPORTED_FILE_TYPE


class ManifestWriteError(GeneratorError):
    """Raised when `pubspec.yaml` cannot be serialized or written."""

    kind = ErrorKind.MANIFEST_IO


class FacadeWriteError(GeneratorError):
    """Raised when the library facade file cannot be read or written."""

    kind = ErrorKind.FACADE_IO


class SchemaLoadError(Exception):
    """Raised when a schema document is missing required fields or is malformed."""

    pass


class TopicTemplateError(ValueError):
    """Raised when a topic prefix and its variables do not match up."""

    pass
