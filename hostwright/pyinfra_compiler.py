"""
PyInfra Compiler - renders resources into pyinfra inventory and deploy files.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .resources.base import Resource
from .settings import get_settings

logger = logging.getLogger(__name__)

DEPLOY_HEADER = '''"""{title} - generated by hostwright, do not edit."""

from hostwright.pyinfra_operations import launchd, plist, windows_printer
'''


class PyInfraCompiler:
    """Writes inventory.py, deploy.py and destroy.py for a list of resources."""

    def __init__(self, output_dir: Optional[str] = None, hosts: Optional[List[str]] = None):
        """
        Initialize the compiler.

        Args:
            output_dir: Directory for generated files (default: settings.output_dir)
            hosts: Inventory hosts (default: ["@local"])
        """
        self.output_dir = Path(output_dir or get_settings().output_dir)
        self.hosts = hosts or ["@local"]

    def compile(self, resources: List[Resource]) -> Path:
        """
        Render all files for the resources.

        Args:
            resources: Resources in the order they should converge

        Returns:
            Directory containing the generated files
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        (self.output_dir / "inventory.py").write_text(self._generate_inventory())
        (self.output_dir / "deploy.py").write_text(self._generate_deploy(resources))
        (self.output_dir / "destroy.py").write_text(self._generate_destroy(resources))

        logger.info(f"Compiled {len(resources)} resources to {self.output_dir}")
        return self.output_dir

    def _generate_inventory(self) -> str:
        hosts = ", ".join(f'"{host}"' for host in self.hosts)
        return f'"""Inventory - generated by hostwright."""\n\nhosts = [{hosts}]\n'

    def _generate_deploy(self, resources: List[Resource]) -> str:
        parts = [DEPLOY_HEADER.format(title="Deploy")]
        for resource in resources:
            logger.debug(f"Rendering operations for {resource.display_name()}")
            parts.append(resource.to_pyinfra_operations())
        return "\n".join(parts)

    def _generate_destroy(self, resources: List[Resource]) -> str:
        # Undo in reverse order of creation
        parts = [DEPLOY_HEADER.format(title="Destroy")]
        for resource in reversed(resources):
            operations = resource.to_pyinfra_destroy_operations()
            if operations:
                parts.append(operations)
        return "\n".join(parts)
