"""PyInfra facts for launchd jobs on macOS."""

import plistlib
import shlex
from typing import Any, Dict, List, Optional
from xml.parsers.expat import ExpatError

from pyinfra.api import FactBase

from ..settings import get_settings


class LaunchdJobLoaded(FactBase):
    """Check whether a job is loaded into launchd.

    Args:
        label: Job label, e.g. com.hostwright.client

    Returns:
        True if ``launchctl list <label>`` succeeds
    """

    def command(self, label: str) -> str:
        launchctl = get_settings().launchctl_path
        return f"{shlex.join([launchctl, 'list', label])} > /dev/null 2>&1; echo $?"

    def process(self, output: List[str]) -> bool:
        if not output:
            return False
        return output[-1].strip() == "0"

    @staticmethod
    def default() -> bool:
        return False


class LaunchdJobDefinition(FactBase):
    """Read a launchd job plist, in either XML or binary form.

    Args:
        path: Path to the job plist

    Returns:
        The job dictionary, or None if the file is missing or unreadable
    """

    def command(self, path: str) -> str:
        plutil = get_settings().plutil_path
        return f"{shlex.join([plutil, '-convert', 'xml1', '-o', '-', path])} 2>/dev/null || true"

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
