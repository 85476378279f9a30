"""Plist resource for setting entries in macOS property list files."""

from typing import Any, Union

from pydantic import (
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from ..plistbuddy import PLUTIL_FORMAT_MAP
from .base import Resource

PlistEntryValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, dict[str, Any]]


class PlistResource(Resource):
    """Plist resource - sets one entry of a plist file.

    The file is created as an empty plist if needed, the entry is added and
    set, and the file is converted to the requested encoding and ownership.

    Usage:
        PlistResource(
            path="/Library/Preferences/com.apple.dock.plist",
            entry="autohide",
            value=True,
        )

    Dictionary values set individual keys of a dict entry:
        PlistResource(
            path="/Library/Preferences/.GlobalPreferences.plist",
            entry="AppleFirstWeekday",
            value={"gregorian": 4},
        )

    Attributes:
        path: Path to the plist file (defaults to the resource name)
        entry: Entry to set
        value: Value of the entry (bool, int, float, str or dict)
        encoding: File encoding: us-ascii, text/xml, utf-8 or binary (default: binary)
        owner: File owner (default: root)
        group: File group (default: wheel)
        mode: File mode applied when the file is created
    """

    path: str | None = None
    entry: str | None = None
    value: PlistEntryValue | None = None
    encoding: str = Field(
        "binary",
        description="Encoding of the plist file",
        examples=list(PLUTIL_FORMAT_MAP),
    )
    owner: str = "root"
    group: str = "wheel"
    mode: str | int | None = Field(
        None,
        description="Unix file permissions in octal",
        examples=["644", "600"],
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, encoding: str) -> str:
        if encoding not in PLUTIL_FORMAT_MAP:
            raise ValueError(
                f"Option encoding must be equal to one of: {list(PLUTIL_FORMAT_MAP)}! "
                f'You passed "{encoding}".'
            )
        return encoding

    @model_validator(mode="after")
    def default_path_to_name(self):
        """path falls back to name, one of them is required."""
        if self.path is None:
            self.path = self.name
        if not self.path:
            raise ValueError("PlistResource requires 'path' or 'name'")
        return self

    @property
    def file_name(self) -> str:
        return self.path.split("/")[-1]

    def to_pyinfra_operations(self) -> str:
        """Generate the plist.plist operation call.

        Example generated code:
            ```python
            plist.plist(
                name='com.apple.dock.plist: set autohide to True',
                path='/Library/Preferences/com.apple.dock.plist',
                entry='autohide',
                value=True,
                encoding='binary',
                owner='root',
                group='wheel',
                mode=None,
            )
            ```
        """
        if self.entry is None:
            comment = f"Manage plist {self.file_name}"
        else:
            comment = f"{self.file_name}: set {self.entry} to {self.value}"

        return self._render_operation(
            "plist.plist",
            comment,
            path=self.path,
            entry=self.entry,
            value=self.value,
            encoding=self.encoding,
            owner=self.owner,
            group=self.group,
            mode=self.mode,
        )

    def to_pyinfra_destroy_operations(self) -> str:
        """Generate the operation removing the entry. The file itself is kept."""
        if self.entry is None:
            return super().to_pyinfra_destroy_operations()

        return self._render_operation(
            "plist.plist_entry_absent",
            f"{self.file_name}: delete {self.entry}",
            path=self.path,
            entry=self.entry,
        )
