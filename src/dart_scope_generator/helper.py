"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import override

TAB = "  "


def to_library_name(name: str) -> str:
    """Convert a dotted identifier into a token that is safe as a Dart package or file name.

    For example, `com.example.events` becomes `com_example_events`.

    Args:
        name (str): The dotted identifier.

    Returns:
        str: The identifier with dots replaced by underscores.
    """
    return name.replace(".", "_")


def title(name: str) -> str:
    """Capitalize the first letter of a name and leave the rest untouched.

    E.g. `events` becomes `Events`, `userEvents` becomes `UserEvents`.

    Args:
        name (str): The name.

    Returns:
        str: The capitalized name.
    """
    return name[:1].upper() + name[1:]


_DART_STRING_ESCAPES = str.maketrans({"\\": "\\\\", "$": "\\$", '"': '\\"', "'": "\\'"})


def escape_string(value: str) -> str:
    """Escape text for use inside a single or double quoted Dart string literal.

    Backslashes, quotes and `$` are escaped, so the text is never read as an interpolation.

    Args:
        value (str): The raw text.

    Returns:
        str: The escaped text.
    """
    return value.translate(_DART_STRING_ESCAPES)


def indent(line: str, depth: int = 1) -> str:
    """Indent a line of Dart code by `depth` tabs. Empty lines stay empty."""
    if not line:
        return line
    return f"{TAB * depth}{line}"


@dataclass
class DartParameter:
    """A typed Dart parameter, e.g. `String id`."""

    name: str
    type_name: str

    @override
    def __str__(self) -> str:
        return f"{self.type_name} {self.name}"


def join_parameters(parameters: Sequence[DartParameter | str] | None) -> str:
    """Joins parameters by means of ', '.

    Args:
        parameters (Sequence[DartParameter | str] | None): The parameters to join.

    Returns:
        str: The joined parameters.
    """
    if parameters:
        return ", ".join(str(p) for p in parameters if p)

    else:
        return ""


def new_function(
    name: str,
    parameters: Sequence[DartParameter | str] | None = None,
    return_type: str | None = None,
    is_async: bool = False,
) -> str:
    """Create the opening line of a Dart method.

    Args:
        name (str): The method name.
        parameters (Sequence[DartParameter | str] | None, optional): The parameters. Defaults to None.
        return_type (str | None, optional): The return type, omitted for constructors. Defaults to None.
        is_async (bool, optional): Whether the body is `async`. Defaults to False.

    Returns:
        str: The method header, ending with the opening brace.
    """
    header = f"{name}({join_parameters(parameters)})"
    if return_type:
        header = f"{return_type} {header}"
    if is_async:
        header = f"{header} async"
    return f"{header} {{"


def new_class_declaration(name: str) -> str:
    """Creates the opening line of a Dart class.

    Args:
        name (str): The class name.

    Returns:
        str: The class declaration.
    """
    return f"class {name} {{"


def new_inline_comment(comment: Sequence[str], indentation: str = "") -> list[str]:
    """Render comment lines as Dart doc comments.

    Args:
        comment (Sequence[str]): The comment lines.
        indentation (str, optional): Indentation to put in front of every line. Defaults to "".

    Returns:
        list[str]: One `///` line per comment line.
    """
    return [f"{indentation}/// {line}".rstrip() for line in comment]
