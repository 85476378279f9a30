"""
Hostwright Resources - Pydantic models for declarative host resources.
"""

from .base import Resource
from .client_launchd import ClientLaunchdResource
from .plist import PlistResource
from .windows_printer import WindowsPrinterResource

__all__ = [
    "ClientLaunchdResource",
    "PlistResource",
    "Resource",
    "WindowsPrinterResource",
]
