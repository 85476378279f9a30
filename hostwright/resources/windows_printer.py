"""Windows printer resource."""

import ipaddress

from pydantic import Field, field_validator, model_validator

from .base import Resource


class WindowsPrinterResource(Resource):
    """Windows printer resource - sets up a printer queue and its TCP/IP port.

    The printer driver is not installed; it must already be on the system.

    Create a printer:
        WindowsPrinterResource(
            name="HP LaserJet 5th Floor",
            driver_name="HP LaserJet 4100 Series PCL6",
            ipv4_address="10.4.64.38",
        )

    Attributes:
        device_id: Printer queue name (defaults to the resource name)
        comment: Descriptor for the printer queue
        default: Make this the system's default printer (default: False)
        driver_name: Exact name of the installed printer driver
        location: Printer location, such as "Fifth floor copy room"
        shared: Share the printer (default: False)
        share_name: Name used to identify the shared printer
        ipv4_address: IPv4 address of the printer, such as 10.4.64.23
        present: Whether the printer should exist (default: True)
    """

    device_id: str | None = None
    comment: str | None = None
    default: bool = False
    driver_name: str | None = None
    location: str | None = None
    shared: bool = False
    share_name: str | None = None
    ipv4_address: str | None = Field(
        None,
        description="IPv4 address of the printer",
        examples=["10.4.64.38"],
    )
    present: bool = True

    @field_validator("ipv4_address")
    @classmethod
    def validate_ipv4_address(cls, address: str | None) -> str | None:
        if address is None:
            return address
        try:
            ipaddress.IPv4Address(address)
        except ValueError:
            raise ValueError(
                "The ipv4_address property must be in the IPv4 format of `WWW.XXX.YYY.ZZZ`"
            ) from None
        return address

    @model_validator(mode="after")
    def default_device_id_to_name(self):
        if self.device_id is None:
            self.device_id = self.name
        if not self.device_id:
            raise ValueError("WindowsPrinterResource requires 'device_id' or 'name'")
        return self

    def to_pyinfra_operations(self) -> str:
        """Generate windows_printer.printer_create, or printer_delete when not present.

        Raises:
            ValueError: If driver_name or ipv4_address is missing for a present printer
        """
        if not self.present:
            return self.to_pyinfra_destroy_operations()

        if self.driver_name is None or self.ipv4_address is None:
            raise ValueError(
                f"Printer {self.device_id} needs driver_name and ipv4_address. "
                f"driver_name={self.driver_name}, ipv4_address={self.ipv4_address}"
            )

        return self._render_operation(
            "windows_printer.printer_create",
            f"Create printer {self.device_id}",
            device_id=self.device_id,
            driver_name=self.driver_name,
            ipv4_address=self.ipv4_address,
            comment=self.comment,
            default=self.default,
            location=self.location,
            shared=self.shared,
            share_name=self.share_name,
        )

    def to_pyinfra_destroy_operations(self) -> str:
        """Generate windows_printer.printer_delete. The printer port is kept."""
        return self._render_operation(
            "windows_printer.printer_delete",
            f"Delete printer {self.device_id}",
            device_id=self.device_id,
        )
