"""PowerShell scripts for managing Windows printers.

Printers are created through WMI (``Set-WmiInstance -class Win32_Printer``) on
top of a standard TCP/IP port named after the printer's IPv4 address. The
printer driver must already be installed.
"""

import base64
import shlex
from typing import Optional

from .settings import get_settings

PRINTERS_REG_KEY = "HKLM:\\SOFTWARE\\Microsoft\\Windows NT\\CurrentVersion\\Print\\Printers\\"


def ps_quote(value: Optional[str]) -> str:
    """Quote a value as a single-quoted PowerShell string."""
    if value is None:
        value = ""
    return "'" + value.replace("'", "''") + "'"


def ps_bool(value: bool) -> str:
    return "$true" if value else "$false"


def port_name(ipv4_address: str) -> str:
    """Name of the printer port created for an address."""
    return f"IP_{ipv4_address}"


def printer_registry_key(name: str) -> str:
    return PRINTERS_REG_KEY + name


def printer_exists_script(name: str) -> str:
    """Script printing True or False depending on the printer's registry key."""
    return f"Test-Path -Path {ps_quote(printer_registry_key(name))}"


def create_port_script(ipv4_address: str) -> str:
    """Script adding the TCP/IP port for an address unless it already exists."""
    name = ps_quote(port_name(ipv4_address))
    return (
        f"if (-not (Get-PrinterPort -Name {name} -ErrorAction SilentlyContinue)) {{ "
        f"Add-PrinterPort -Name {name} -PrinterHostAddress {ps_quote(ipv4_address)} }}"
    )


def create_printer_script(
    device_id: str,
    driver_name: str,
    ipv4_address: str,
    comment: Optional[str] = None,
    default: bool = False,
    location: Optional[str] = None,
    shared: bool = False,
    share_name: Optional[str] = None,
) -> str:
    """Script creating the printer port and then the printer.

    Example output:
        Set-WmiInstance -class Win32_Printer `
          -EnableAllPrivileges `
          -Argument @{ DeviceID = 'HP LaserJet 5th Floor'; ... }
    """
    arguments = [
        ("DeviceID", ps_quote(device_id)),
        ("Comment", ps_quote(comment)),
        ("Default", ps_bool(default)),
        ("DriverName", ps_quote(driver_name)),
        ("Location", ps_quote(location)),
        ("PortName", ps_quote(port_name(ipv4_address))),
        ("Shared", ps_bool(shared)),
        ("ShareName", ps_quote(share_name)),
    ]
    argument_lines = "\n".join(f"    {key} = {value};" for key, value in arguments)

    return (
        f"{create_port_script(ipv4_address)}\n"
        "Set-WmiInstance -class Win32_Printer `\n"
        "  -EnableAllPrivileges `\n"
        "  -Argument @{\n"
        f"{argument_lines}\n"
        "  }"
    )


def delete_printer_script(device_id: str) -> str:
    return f"Remove-Printer -Name {ps_quote(device_id)}"


def powershell_command(script: str, executable: Optional[str] = None) -> str:
    """Wrap a script into a non-interactive PowerShell invocation.

    The script is passed with -EncodedCommand (base64 of UTF-16LE) so that no
    shell quoting is involved.
    """
    executable = executable or get_settings().powershell_path
    encoded = base64.b64encode(script.encode("utf-16-le")).decode("ascii")
    return shlex.join(
        [executable, "-NoLogo", "-NonInteractive", "-NoProfile", "-EncodedCommand", encoded]
    )
