"""PyInfra facts for Windows printers."""

from typing import List

from pyinfra.api import FactBase

from ..windows_printer import powershell_command, printer_exists_script


class PrinterExists(FactBase):
    """Check whether a printer is registered.

    Looks for the printer's key under
    ``HKLM:\\SOFTWARE\\Microsoft\\Windows NT\\CurrentVersion\\Print\\Printers``.

    Args:
        device_id: Printer name

    Returns:
        True if the registry key exists

    Example:
        if host.get_fact(PrinterExists, device_id="HP LaserJet 5th Floor"):
            ...
    """

    def command(self, device_id: str) -> str:
        return powershell_command(printer_exists_script(device_id))

    def process(self, output: List[str]) -> bool:
        return "true" in "".join(output).lower()

    @staticmethod
    def default() -> bool:
        return False
