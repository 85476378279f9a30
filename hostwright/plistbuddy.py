"""Command builders and value decoding for macOS property list tools.

PlistBuddy, defaults and plutil are driven through command strings. This module
turns a typed value into the PlistBuddy clause that writes it, and turns the
text those tools print back into a typed value.

Example:
    >>> plistbuddy_command("add", "FooEntry", "path/to/file.plist", True)
    '/usr/libexec/PlistBuddy -c \\'Add :"FooEntry" bool\\' "path/to/file.plist"'
    >>> convert_to_data_type_from_string("integer", "950224")
    950224
"""

import logging
import re
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .errors import ConfigurationError, UnsupportedDataTypeError
from .settings import get_settings

logger = logging.getLogger(__name__)

PlistValue = Union[bool, int, float, str, dict[str, Any], list[Any]]

# file(1) mime encodings mapped to plutil output formats
PLUTIL_FORMAT_MAP: dict[str, str] = {
    "us-ascii": "xml1",
    "text/xml": "xml1",
    "utf-8": "xml1",
    "binary": "binary1",
}

_INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+(?:_\d+)*)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:\d+(?:_\d+)*(?:\.\d+(?:_\d+)*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)


class PlistSubcommand(str, Enum):
    """PlistBuddy commands that hostwright issues."""

    ADD = "add"
    SET = "set"
    DELETE = "delete"
    PRINT = "print"


def type_to_commandline_string(value: Any) -> str:
    """Return the PlistBuddy type name for a value.

    Depends only on the shape of the value, never on its content.

    Raises:
        UnsupportedDataTypeError: If the value is not a plist type
    """
    # bool is a subclass of int and must be matched first
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "dict"
    raise UnsupportedDataTypeError(
        f"Unknown or unsupported data type: {value!r} of {type(value).__name__}"
    )


def _parse_integer(raw: Any) -> int:
    if not isinstance(raw, str):
        return 0
    match = _INTEGER_PREFIX.match(raw)
    if match is None:
        return 0
    return int(match.group(1).replace("_", ""))


def _parse_float(raw: Any) -> float:
    if not isinstance(raw, str):
        return 0.0
    match = _FLOAT_PREFIX.match(raw)
    if match is None:
        return 0.0
    return float(match.group(1).replace("_", ""))


def convert_to_data_type_from_string(type_tag: str | None, value: Any) -> Any:
    """Decode a value read back from ``defaults`` into a Python value.

    Numbers are parsed leniently: the leading numeric part of the string is
    used and anything unparseable, a missing value included, becomes 0. A
    boolean is True only when its integer value is exactly 1.

    Args:
        type_tag: Type reported by ``defaults read-type`` (boolean, integer,
            float, string, dictionary) or None when nothing was reported
        value: Raw value as printed by the tool

    Returns:
        The decoded value

    Raises:
        UnsupportedDataTypeError: If the type tag is not recognised
    """
    if type_tag == "boolean":
        return _parse_integer(value) == 1
    if type_tag == "integer":
        return _parse_integer(value)
    if type_tag == "float":
        return _parse_float(value)
    if type_tag in ("string", "dictionary"):
        return value
    if type_tag is None:
        return ""
    raise UnsupportedDataTypeError(f"Unknown or unsupported data type: {type_tag!r}")


def plutil_format(encoding: str) -> str:
    """Map an encoding option to the plutil format that produces it.

    Raises:
        ConfigurationError: If the encoding is not one of PLUTIL_FORMAT_MAP
    """
    try:
        return PLUTIL_FORMAT_MAP[encoding]
    except KeyError:
        raise ConfigurationError(
            f"Option encoding must be equal to one of: {list(PLUTIL_FORMAT_MAP)}! "
            f'You passed "{encoding}".'
        ) from None


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _set_argument(value: Any) -> tuple[str, list[str]]:
    """Separator and value segments for a Set clause."""
    if isinstance(value, dict):
        return ":", [f"{key} {_format_scalar(item)}" for key, item in value.items()]
    if isinstance(value, list):
        return " ", [_format_scalar(item) for item in value]
    if value is None:
        return " ", []
    return " ", [_format_scalar(value)]


@dataclass(frozen=True)
class PlistTools:
    """Locations of the property list executables.

    Every command builder lives here so that the executables can be swapped
    for tests or non-standard installs.
    """

    plistbuddy: str = "/usr/libexec/PlistBuddy"
    defaults: str = "/usr/bin/defaults"
    plutil: str = "/usr/bin/plutil"
    file: str = "/usr/bin/file"

    @classmethod
    def from_settings(cls) -> "PlistTools":
        settings = get_settings()
        return cls(
            plistbuddy=settings.plistbuddy_path,
            defaults=settings.defaults_path,
            plutil=settings.plutil_path,
            file=settings.file_path,
        )

    def plistbuddy_command(
        self,
        subcommand: PlistSubcommand | str,
        entry: str,
        path: str,
        value: Any = None,
    ) -> str:
        """Build a PlistBuddy invocation.

        The entry is wrapped in double quotes so it may contain spaces, the
        whole clause in single quotes, and the file path in double quotes.

        Args:
            subcommand: add, set, delete or print
            entry: Entry path inside the plist
            path: Path to the plist file
            value: Value for add (its type is used) and set (its content is used)

        Returns:
            Command string, e.g.
            ``/usr/libexec/PlistBuddy -c 'Set :"AppleFirstWeekday":gregorian 4' "file.plist"``

        Raises:
            ValueError: If the subcommand is unknown
            UnsupportedDataTypeError: If add is given a value of unknown type
        """
        subcommand = PlistSubcommand(subcommand)

        sep = " "
        segments: list[str] = []
        if subcommand is PlistSubcommand.ADD:
            segments = [type_to_commandline_string(value)]
        elif subcommand is PlistSubcommand.SET:
            sep, segments = _set_argument(value)

        entry_with_arg = sep.join([f'"{entry}"', *segments]).strip()
        clause = f"{subcommand.value.capitalize()} :{entry_with_arg}"
        return " ".join([self.plistbuddy, "-c", f"'{clause}'", f'"{path}"'])

    def nested_add_command(self, entry: str, key: str, value: Any, path: str) -> str:
        """Build ``Add :"<entry>":<key> <type> <value>`` for a key of a dict entry."""
        type_name = type_to_commandline_string(value)
        clause = f'Add :"{entry}":{key} {type_name} {_format_scalar(value)}'
        return " ".join([self.plistbuddy, "-c", f"'{clause}'", f'"{path}"'])

    def defaults_read_type_command(self, path: str, entry: str) -> str:
        return shlex.join([self.defaults, "read-type", path, entry])

    def defaults_read_command(self, path: str, entry: str) -> str:
        return shlex.join([self.defaults, "read", path, entry])

    def plutil_extract_command(self, path: str, entry: str) -> str:
        return shlex.join([self.plutil, "-extract", entry, "xml1", "-o", "-", path])

    def plutil_convert_command(self, path: str, encoding: str) -> str:
        """Command converting the file to the plutil format for ``encoding``."""
        return shlex.join([self.plutil, "-convert", plutil_format(encoding), path])

    def file_encoding_command(self, path: str) -> str:
        return shlex.join(
            [self.file, "--brief", "--mime-encoding", "--preserve-date", path]
        )


def plistbuddy_command(
    subcommand: PlistSubcommand | str,
    entry: str,
    path: str,
    value: Any = None,
) -> str:
    """Build a PlistBuddy invocation with the configured executable.

    See PlistTools.plistbuddy_command.
    """
    return PlistTools.from_settings().plistbuddy_command(subcommand, entry, path, value)
