"""PyInfra operations for macOS property list files.

This module provides custom PyInfra operations that converge a single plist
entry, along with the file's encoding and ownership, using PlistBuddy and
plutil.
"""

import logging
import plistlib
from dataclasses import dataclass
from io import StringIO
from typing import Any, Dict, List, Optional

from pyinfra import host
from pyinfra.api import operation
from pyinfra.facts.files import File
from pyinfra.operations import files

from ..plistbuddy import (
    PLUTIL_FORMAT_MAP,
    PlistSubcommand,
    PlistTools,
    convert_to_data_type_from_string,
    plutil_format,
)
from ..pyinfra_facts.plist import (
    PlistEntryDict,
    PlistEntryExists,
    PlistEntryType,
    PlistEntryValue,
    PlistFileEncoding,
)

logger = logging.getLogger(__name__)

EMPTY_PLIST = plistlib.dumps({}).decode("utf-8")


@dataclass
class PlistState:
    """State of one plist entry and the file holding it.

    Describes either what is wanted or what is on disk. ``entry`` is None when
    the entry does not exist.
    """

    path: str
    entry: Optional[str] = None
    value: Any = None
    encoding: Optional[str] = None
    owner: Optional[str] = None
    group: Optional[str] = None


def values_match(current: Any, desired: Any) -> bool:
    """Compare a decoded value with a desired one.

    Booleans only match booleans, so ``True`` and ``1`` are different values
    here even though Python considers them equal. A dict matches when every
    desired key is present with a matching value.
    """
    if isinstance(current, bool) or isinstance(desired, bool):
        return isinstance(current, bool) and isinstance(desired, bool) and current == desired
    if isinstance(current, dict) and isinstance(desired, dict):
        return all(
            key in current and values_match(current[key], item)
            for key, item in desired.items()
        )
    return current == desired


def setting_from_plist(path: str, entry: str, value: Any) -> Dict[str, Any]:
    """Read the type and raw value of an entry.

    Dictionary values are extracted as XML and parsed; anything else is read
    with ``defaults read``.

    Args:
        path: Path to the plist file
        entry: Entry path inside the plist
        value: Desired value, used to pick how the current value is read

    Returns:
        Dict with ``key_type`` and ``key_value``
    """
    data_type = host.get_fact(PlistEntryType, path=path, entry=entry)

    if isinstance(value, dict):
        key_value = host.get_fact(PlistEntryDict, path=path, entry=entry)
    else:
        key_value = host.get_fact(PlistEntryValue, path=path, entry=entry)

    return {"key_type": data_type, "key_value": key_value}


def load_current_state(path: str, entry: Optional[str], value: Any) -> Optional[PlistState]:
    """Gather the current state of a plist entry from the host.

    Returns:
        PlistState, or None if the plist file does not exist
    """
    file_info = host.get_fact(File, path=path)
    if not file_info:
        return None

    current = PlistState(
        path=path,
        encoding=host.get_fact(PlistFileEncoding, path=path),
        owner=file_info.get("user"),
        group=file_info.get("group"),
    )

    if entry is None:
        return current

    if host.get_fact(PlistEntryExists, path=path, entry=entry):
        current.entry = entry
        setting = setting_from_plist(path, entry, value)
        current.value = convert_to_data_type_from_string(
            setting["key_type"], setting["key_value"]
        )

    return current


def plist_converge_commands(
    desired: PlistState,
    current: PlistState,
    tools: Optional[PlistTools] = None,
) -> List[str]:
    """Commands that move an existing plist from ``current`` to ``desired``.

    Steps, each only when it differs: add the entry, set its value and convert
    the file encoding. Ownership is handled by ``ownership_differs`` and
    pyinfra's ``files.file``.

    Raises:
        ConfigurationError: If the desired encoding is not supported
        UnsupportedDataTypeError: If the desired value cannot be written
    """
    tools = tools or PlistTools.from_settings()
    path = desired.path
    commands = []

    if desired.entry is not None:
        if current.entry is None:
            logger.debug(f"Entry {desired.entry} missing from {path}")
            commands.append(
                tools.plistbuddy_command(PlistSubcommand.ADD, desired.entry, path, desired.value)
            )

        if desired.value is not None and (
            current.entry is None or not values_match(current.value, desired.value)
        ):
            commands.extend(_set_value_commands(desired, current, tools))

    if desired.encoding is not None:
        target_format = plutil_format(desired.encoding)
        if PLUTIL_FORMAT_MAP.get(current.encoding or "") != target_format:
            logger.debug(f"Converting {path} from {current.encoding} to {target_format}")
            commands.append(tools.plutil_convert_command(path, desired.encoding))

    return commands


def ownership_differs(desired: PlistState, current: PlistState) -> bool:
    """True when the file's owner or group must change."""
    return bool(
        (desired.owner and desired.owner != current.owner)
        or (desired.group and desired.group != current.group)
    )


def _set_value_commands(
    desired: PlistState, current: PlistState, tools: PlistTools
) -> List[str]:
    if not isinstance(desired.value, dict):
        return [
            tools.plistbuddy_command(PlistSubcommand.SET, desired.entry, desired.path, desired.value)
        ]

    commands = []
    if current.entry is not None and not isinstance(current.value, dict):
        # PlistBuddy can't change an entry's type in place
        logger.debug(f"Replacing non-dict entry {desired.entry} in {desired.path}")
        commands.append(
            tools.plistbuddy_command(PlistSubcommand.DELETE, desired.entry, desired.path)
        )
        commands.append(
            tools.plistbuddy_command(PlistSubcommand.ADD, desired.entry, desired.path, {})
        )

    existing = current.value if isinstance(current.value, dict) else {}
    for key, item in desired.value.items():
        if key not in existing:
            commands.append(tools.nested_add_command(desired.entry, key, item, desired.path))
        elif not values_match(existing[key], item):
            commands.append(
                tools.plistbuddy_command(
                    PlistSubcommand.SET, desired.entry, desired.path, {key: item}
                )
            )
    return commands


@operation()
def plist(
    path: str,
    entry: Optional[str] = None,
    value: Any = None,
    encoding: str = "binary",
    owner: str = "root",
    group: str = "wheel",
    mode: Optional[str] = None,
    **kwargs: Any,
):
    """Set an entry in a plist file.

    Creates the file as an empty plist when it does not exist, then adds the
    entry, sets its value, converts the file to the requested encoding and
    fixes its ownership, skipping every step that is already in place.

    Args:
        path: Path to the plist file
        entry: Entry to set
        value: Value of the entry (bool, int, float, str or dict)
        encoding: File encoding, one of us-ascii, text/xml, utf-8, binary
        owner: File owner (default: root)
        group: File group (default: wheel)
        mode: File mode, only applied when the file is created
        **kwargs: Additional global operation arguments

    Example:
        plist(
            path="/Library/Preferences/.GlobalPreferences.plist",
            entry="AppleFirstWeekday",
            value={"gregorian": 4},
        )
    """
    tools = PlistTools.from_settings()
    desired = PlistState(
        path=path,
        entry=entry,
        value=value,
        encoding=encoding,
        owner=owner,
        group=group,
    )

    current = load_current_state(path, entry, value)
    if current is None:
        logger.debug(f"Creating empty plist {path}")
        yield from files.put._inner(
            src=StringIO(EMPTY_PLIST),
            dest=path,
            user=owner,
            group=group,
            mode=mode,
        )
        current = PlistState(path=path, encoding="us-ascii", owner=owner, group=group)
        created = True
    else:
        created = False

    commands = plist_converge_commands(desired, current, tools)
    fix_ownership = ownership_differs(desired, current)
    if not commands and not fix_ownership and not created:
        host.noop(f"{path.split('/')[-1]}: {entry} is already set")
        return

    for command in commands:
        yield command

    if fix_ownership:
        yield from files.file._inner(path=path, user=owner, group=group)


@operation()
def plist_entry_absent(
    path: str,
    entry: str,
    **kwargs: Any,
):
    """Delete an entry from a plist file.

    Args:
        path: Path to the plist file
        entry: Entry to delete
        **kwargs: Additional global operation arguments

    Example:
        plist_entry_absent(
            path="/Library/Preferences/com.apple.dock.plist",
            entry="autohide",
        )
    """
    if not host.get_fact(File, path=path):
        host.noop(f"{path} does not exist")
        return

    if not host.get_fact(PlistEntryExists, path=path, entry=entry):
        host.noop(f"Entry {entry} is not in {path}")
        return

    yield PlistTools.from_settings().plistbuddy_command(PlistSubcommand.DELETE, entry, path)
