"""Configuration values that are shared by all generator components."""

from __future__ import annotations

from dataclasses import dataclass, field

from dart_scope_generator import __version__

LANG = "dart"
DEFAULT_OUTPUT_DIR = "gen-dart"
MINIMUM_DART_VERSION = "1.12.0"
TOPIC_DELIMITER = "."
FILE_PREFIX = "f_"

RUNTIME_DEPENDENCIES = {
    "thrift": "git@github.com:Workiva/thrift-dart.git",
    "frugal": "git@github.com:Workiva/frugal-dart.git",
}


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings handed to every component at construction.

    Attributes:
        compiler_version: Version embedded in the header comment and the manifest.
        min_runtime_version: Minimum Dart SDK version, rendered as a caret constraint.
        topic_delimiter: Delimiter between the parts of a topic.
        runtime_dependencies: Name to git URL of the runtime libraries generated code imports.
        file_prefix: Prefix of every generated scope file.
        language: Namespace language tag that is looked up in schemas.
    """

    compiler_version: str = __version__
    min_runtime_version: str = MINIMUM_DART_VERSION
    topic_delimiter: str = TOPIC_DELIMITER
    runtime_dependencies: dict[str, str] = field(default_factory=lambda: dict(RUNTIME_DEPENDENCIES))
    file_prefix: str = FILE_PREFIX
    language: str = LANG

    @property
    def sdk_constraint(self) -> str:
        """The `environment.sdk` constraint of generated manifests."""
        return f"^{self.min_runtime_version}"


DEFAULT_CONFIG = GeneratorConfig()
