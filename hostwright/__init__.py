"""
Hostwright - Declarative host resources converged with pyinfra.

Describe the state you want as Python objects:
- PlistResource sets an entry in a macOS property list
- WindowsPrinterResource sets up a Windows printer and its port
- ClientLaunchdResource runs the converge on a schedule with launchd

Hostwright renders them into pyinfra operations that compare the host with the
description and run PlistBuddy, plutil, launchctl or PowerShell only where
they differ.
"""

from .core import HostwrightCore
from .settings import HostwrightSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "HostwrightCore",
    "HostwrightSettings",
    "get_settings",
    "reload_settings",
]
