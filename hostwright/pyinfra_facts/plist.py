"""PyInfra facts for macOS property list files.

These facts read the current state of one plist entry using PlistBuddy,
defaults and plutil, and decode what those tools print.
"""

import plistlib
from typing import Any, Dict, List, Optional
from xml.parsers.expat import ExpatError

from pyinfra.api import FactBase

from ..plistbuddy import PlistSubcommand, PlistTools


class PlistEntryExists(FactBase):
    """Check whether an entry exists in a plist.

    Runs ``PlistBuddy -c 'Print :"<entry>"'`` and reports its exit status.

    Args:
        path: Path to the plist file
        entry: Entry path inside the plist

    Returns:
        True if PlistBuddy exited with status 0

    Example:
        if not host.get_fact(PlistEntryExists, path=path, entry="AppleLocale"):
            ...
    """

    def command(self, path: str, entry: str) -> str:
        print_entry = PlistTools.from_settings().plistbuddy_command(
            PlistSubcommand.PRINT, entry, path
        )
        return f"{print_entry} > /dev/null 2>&1; echo $?"

    def process(self, output: List[str]) -> bool:
        if not output:
            return False
        return output[-1].strip() == "0"

    @staticmethod
    def default() -> bool:
        return False


class PlistEntryType(FactBase):
    """Get the type ``defaults`` reports for an entry.

    ``defaults read-type`` prints e.g. ``Type is boolean``; the last word is
    the type tag.

    Returns:
        Type tag (boolean, integer, float, string, dictionary, array) or None
    """

    def command(self, path: str, entry: str) -> str:
        tools = PlistTools.from_settings()
        return f"{tools.defaults_read_type_command(path, entry)} 2>/dev/null || true"

    def process(self, output: List[str]) -> Optional[str]:
        words = " ".join(output).split()
        return words[-1] if words else None

    @staticmethod
    def default() -> Optional[str]:
        return None


class PlistEntryValue(FactBase):
    """Get the raw value ``defaults read`` prints for an entry."""

    def command(self, path: str, entry: str) -> str:
        tools = PlistTools.from_settings()
        return f"{tools.defaults_read_command(path, entry)} 2>/dev/null || true"

    def process(self, output: List[str]) -> str:
        return "\n".join(output).strip()

    @staticmethod
    def default() -> str:
        return ""


class PlistEntryDict(FactBase):
    """Get a dictionary entry, extracted as XML with plutil and parsed.

    Returns:
        The entry as a dict, or None if it could not be extracted
    """

    def command(self, path: str, entry: str) -> str:
        tools = PlistTools.from_settings()
        return f"{tools.plutil_extract_command(path, entry)} 2>/dev/null || true"

    def process(self, output: List[str]) -> Optional[Dict[str, Any]]:
        document = "\n".join(output).strip()
        if not document:
            return None

        try:
            data = plistlib.loads(document.encode("utf-8"))
        except (plistlib.InvalidFileException, ExpatError, ValueError):
            return None

        return data if isinstance(data, dict) else None

    @staticmethod
    def default() -> Optional[Dict[str, Any]]:
        return None


class PlistFileEncoding(FactBase):
    """Get the mime encoding of a plist file as reported by file(1).

    Binary plists report ``binary``, XML plists ``us-ascii`` or ``utf-8``.
    """

    def command(self, path: str) -> str:
        return PlistTools.from_settings().file_encoding_command(path)

    def process(self, output: List[str]) -> Optional[str]:
        if not output:
            return None
        return output[0].strip() or None

    @staticmethod
    def default() -> Optional[str]:
        return None
