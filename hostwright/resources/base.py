"""Base resource classes for Hostwright."""

import logging
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Resource(BaseModel):
    """Base resource class - all resources inherit from this.

    A resource is a typed description of desired host state. It does not
    touch the host itself: it renders the PyInfra operation calls that
    converge the host, and pyinfra runs them.

    Rendering Flow:
    1. User declares resources in main.py
    2. PyInfraCompiler asks each resource for its operation code
    3. to_pyinfra_operations() renders the calls that converge the resource
    4. to_pyinfra_destroy_operations() renders the calls that undo it

    Attributes:
        name: Optional identifier, used in operation names
        description: Optional human-readable description
    """

    name: str | None = None
    description: str | None = None

    def display_name(self) -> str:
        """Name used in operation descriptions."""
        return self.name or self.__class__.__name__

    @staticmethod
    def _render_operation(call: str, comment: str, /, **params: Any) -> str:
        """Render one PyInfra operation call as Python source.

        Parameter values are rendered with repr(), so anything with a literal
        repr (str, bool, int, float, None, dict, list) round-trips.

        Example:
            >>> print(Resource._render_operation("plist.plist", "Set foo", path="/tmp/a.plist"))

            # Set foo
            plist.plist(
                name='Set foo',
                path='/tmp/a.plist',
            )
        """
        lines = [f"\n# {comment}", f"{call}(", f"    name={comment!r},"]
        for key, value in params.items():
            lines.append(f"    {key}={value!r},")
        lines.append(")\n")
        return "\n".join(lines)

    def to_pyinfra_operations(self) -> str:
        """Generate PyInfra operations code that converges this resource.

        Returns:
            str: PyInfra operation code as a string
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement to_pyinfra_operations()"
        )

    def to_pyinfra_destroy_operations(self) -> str:
        """Generate PyInfra operations code that removes this resource.

        Resources without a meaningful removal return an empty string.

        Returns:
            str: PyInfra operation code as a string
        """
        logger.debug(f"{self.display_name()} has no destroy operations")
        return ""
