"""
Hostwright Core - load resources, compile them for pyinfra and run pyinfra.

Apply Pipeline: Load resources → Compile deploy.py → pyinfra deploy.py
Plan Pipeline: Load resources → Compile deploy.py → pyinfra --dry deploy.py
Destroy Pipeline: Load resources → Compile destroy.py → pyinfra destroy.py
"""

import importlib.util
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import DeploymentError
from .pyinfra_compiler import PyInfraCompiler
from .resources.base import Resource
from .settings import get_settings

logger = logging.getLogger(__name__)


class HostwrightCore:
    """Main coordinator for the Hostwright pipeline."""

    def __init__(
        self,
        output_dir: Optional[str] = None,
        hosts: Optional[List[str]] = None,
        pyinfra_path: Optional[str] = None,
    ):
        """
        Initialize HostwrightCore.

        Args:
            output_dir: Directory for compiled files (overrides settings/.env)
            hosts: Inventory hosts (default: ["@local"])
            pyinfra_path: pyinfra executable (overrides settings/.env)
        """
        settings = get_settings()
        self.pyinfra_path = pyinfra_path or settings.pyinfra_path
        self.compiler = PyInfraCompiler(output_dir=output_dir, hosts=hosts)

        logger.info("HostwrightCore initialized")

    def compile(self, main_file: Path) -> Dict[str, Any]:
        """
        Load resources from main.py and write the pyinfra files.

        Returns:
            Dict with the resource count and output directory
        """
        resources = self._load_resources(main_file)
        logger.info(f"Loaded {len(resources)} resources")

        output_dir = self.compiler.compile(resources)
        return {"resources": len(resources), "output_dir": output_dir}

    def apply(self, main_file: Path, dry_run: bool = False) -> Dict[str, Any]:
        """
        Full pipeline: load → compile → run deploy.py with pyinfra.

        Args:
            main_file: Path to main.py file with resource definitions
            dry_run: If True, pyinfra only reports what it would change

        Returns:
            Dict with execution results

        Raises:
            DeploymentError: If pyinfra exits with a non-zero status
        """
        logger.info(f"Starting Hostwright pipeline for: {main_file}")
        compiled = self.compile(main_file)

        output = self._run_pyinfra(compiled["output_dir"] / "deploy.py", dry_run=dry_run)
        logger.info("Hostwright pipeline complete")

        return {
            "success": True,
            "dry_run": dry_run,
            "resources": compiled["resources"],
            "output": output,
        }

    def plan(self, main_file: Path) -> Dict[str, Any]:
        """Plan mode: compile and run pyinfra with --dry."""
        return self.apply(main_file, dry_run=True)

    def destroy(self, main_file: Path) -> Dict[str, Any]:
        """
        Undo resources by running destroy.py with pyinfra.

        Raises:
            DeploymentError: If pyinfra exits with a non-zero status
        """
        logger.info(f"Starting Hostwright destroy for: {main_file}")
        compiled = self.compile(main_file)

        output = self._run_pyinfra(compiled["output_dir"] / "destroy.py")
        return {"success": True, "resources": compiled["resources"], "output": output}

    def _run_pyinfra(self, deploy_file: Path, dry_run: bool = False) -> str:
        inventory = self.compiler.output_dir / "inventory.py"
        cmd = [self.pyinfra_path, "-y"]
        if dry_run:
            cmd.append("--dry")
        cmd.extend([str(inventory), str(deploy_file)])

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise DeploymentError(f"pyinfra executable not found: {self.pyinfra_path}") from e

        if result.returncode != 0:
            raise DeploymentError(
                f"pyinfra exited with status {result.returncode}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )

        return result.stdout

    def _load_resources(self, main_file: Path) -> List[Resource]:
        """
        Load resources from main.py by executing it.

        Args:
            main_file: Path to main.py

        Returns:
            List of Resource objects, in definition order
        """
        if not main_file.exists():
            raise FileNotFoundError(f"File not found: {main_file}")

        # Load the module dynamically
        spec = importlib.util.spec_from_file_location("user_main", main_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Could not load {main_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        # Collect all Resource instances from module globals
        resources = []
        for name, obj in vars(module).items():
            if isinstance(obj, Resource):
                resources.append(obj)
                logger.debug(f"Found resource: {name} ({type(obj).__name__})")

        if not resources:
            raise ValueError(f"No resources found in {main_file}")

        return resources
