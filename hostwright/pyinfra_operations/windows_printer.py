"""PyInfra operations for Windows printers.

Printers are created with WMI on a TCP/IP port named ``IP_<address>``. The
printer driver is not installed by these operations.
"""

import logging
from typing import Any, Optional

from pyinfra import host
from pyinfra.api import operation
from pyinfra.api.exceptions import OperationError

from ..pyinfra_facts.windows_printer import PrinterExists
from ..windows_printer import (
    create_printer_script,
    delete_printer_script,
    powershell_command,
    printer_registry_key,
)

logger = logging.getLogger(__name__)


@operation()
def printer_create(
    device_id: str,
    driver_name: Optional[str] = None,
    ipv4_address: Optional[str] = None,
    comment: Optional[str] = None,
    default: bool = False,
    location: Optional[str] = None,
    shared: bool = False,
    share_name: Optional[str] = None,
    **kwargs: Any,
):
    """Create a printer and its port, if the printer doesn't already exist.

    Args:
        device_id: Printer queue name
        driver_name: Exact name of the installed printer driver
        ipv4_address: IPv4 address of the printer
        comment: Descriptor for the printer queue
        default: Make this the system's default printer
        location: Printer location, such as "Fifth floor copy room"
        shared: Share the printer
        share_name: Name used to identify the shared printer
        **kwargs: Additional global operation arguments

    Example:
        printer_create(
            device_id="HP LaserJet 5th Floor",
            driver_name="HP LaserJet 4100 Series PCL6",
            ipv4_address="10.4.64.38",
        )
    """
    logger.debug(f"Checking to see if this reg key exists: '{printer_registry_key(device_id)}'")
    if host.get_fact(PrinterExists, device_id=device_id):
        logger.info(f"Printer {device_id} already exists - nothing to do.")
        host.noop(f"Printer {device_id} already exists")
        return

    if not driver_name:
        raise OperationError(f"driver_name is required to create printer {device_id}")
    if not ipv4_address:
        raise OperationError(f"ipv4_address is required to create printer {device_id}")

    yield powershell_command(
        create_printer_script(
            device_id=device_id,
            driver_name=driver_name,
            ipv4_address=ipv4_address,
            comment=comment,
            default=default,
            location=location,
            shared=shared,
            share_name=share_name,
        )
    )


@operation()
def printer_delete(
    device_id: str,
    **kwargs: Any,
):
    """Delete an existing printer. The printer port is left in place.

    Args:
        device_id: Printer queue name
        **kwargs: Additional global operation arguments
    """
    if not host.get_fact(PrinterExists, device_id=device_id):
        logger.info(f"{device_id} doesn't exist - can't delete.")
        host.noop(f"Printer {device_id} does not exist")
        return

    yield powershell_command(delete_printer_script(device_id))
