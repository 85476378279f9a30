"""
Hostwright CLI - declarative host resources converged with pyinfra.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from .core import HostwrightCore
from .errors import HostwrightError
from .plistbuddy import convert_to_data_type_from_string, plistbuddy_command
from .settings import get_settings

# Setup
app = typer.Typer(
    name="hostwright",
    help="Declarative plist, printer and launchd resources converged with pyinfra",
    add_completion=False,
)
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


def _get_main_file() -> Path:
    """Check for main.py in current directory and return Path.

    Raises:
        SystemExit: If main.py is not found
    """
    main_file = Path.cwd() / "main.py"
    if not main_file.exists():
        console.print(
            "[bold red]✗ Error:[/bold red] No main.py found in current directory"
        )
        console.print(
            "[dim]Hint: cd into your project directory that contains main.py[/dim]"
        )
        raise typer.Exit(code=1)
    return main_file


def _create_command_panel(title: str, color: str) -> Panel:
    settings = get_settings()
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Directory: {Path.cwd().name}\n"
        f"Output: {settings.output_dir}",
        border_style=color,
    )


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Print a failed command and exit with code 1."""
    console.print(
        f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}"
    )
    raise typer.Exit(code=1)


def _run_command(
    command_name: str,
    panel_title: str,
    panel_color: str,
    core_method: str,
    success_handler,
    output_dir: Optional[str] = None,
):
    """Execute a Hostwright pipeline command with common setup and error handling.

    Args:
        command_name: Command name for error messages (e.g., "apply", "plan")
        panel_title: Title for the command panel
        panel_color: Border color for the panel
        core_method: Name of the HostwrightCore method to call
        success_handler: Callable that takes result dict and prints success output
        output_dir: Optional output directory override
    """
    main_file = _get_main_file()
    console.print(_create_command_panel(panel_title, panel_color))

    try:
        core = HostwrightCore(output_dir=output_dir)
        result = getattr(core, core_method)(main_file)
        success_handler(result)
    except (HostwrightError, FileNotFoundError, ImportError, ValueError) as e:
        _handle_command_error(e, command_name)


def _parse_value(raw: Optional[str]):
    """Parse a --value option as JSON, falling back to the plain string."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command()
def command(
    subcommand: str = typer.Argument(..., help="add, set, delete or print"),
    entry: str = typer.Argument(..., help="Entry path inside the plist"),
    path: str = typer.Argument(..., help="Path to the plist file"),
    value: str = typer.Option(
        None, "--value", help="Value as JSON (true, 4, 1.5, {\"gregorian\": 4}) or plain text"
    ),
):
    """Print the PlistBuddy command for an entry."""
    try:
        cmd = plistbuddy_command(subcommand.lower(), entry, path, _parse_value(value))
    except (HostwrightError, ValueError) as e:
        _handle_command_error(e, "command")

    console.print(cmd, markup=False, highlight=False, soft_wrap=True)


@app.command()
def decode(
    type_tag: str = typer.Argument(..., help="Type reported by defaults read-type"),
    raw: str = typer.Argument(..., help="Value as printed by defaults read"),
):
    """Decode a value read back from defaults."""
    try:
        decoded = convert_to_data_type_from_string(type_tag, raw)
    except HostwrightError as e:
        _handle_command_error(e, "decode")

    console.print(repr(decoded), markup=False, highlight=False)


@app.command(name="compile")
def compile_cmd(
    output_dir: str = typer.Option(
        None, "--output-dir", help="Directory for generated files (overrides .env)"
    ),
):
    """Compile main.py into pyinfra inventory, deploy and destroy files."""

    def _handle_success(result):
        console.print(
            f"\n[bold green]✓ Compiled {result['resources']} resources[/bold green]"
        )
        console.print(f"[dim]Output: {result['output_dir']}[/dim]")

    _run_command(
        command_name="compile",
        panel_title="Hostwright Compile",
        panel_color="cyan",
        core_method="compile",
        success_handler=_handle_success,
        output_dir=output_dir,
    )


@app.command()
def plan(
    output_dir: str = typer.Option(
        None, "--output-dir", help="Directory for generated files (overrides .env)"
    ),
):
    """Show what pyinfra would change without changing anything."""

    def _handle_success(result):
        console.print("\n[bold]Plan Summary:[/bold]")
        console.print(f"  Resources: {result['resources']}")
        if result.get("output"):
            console.print(result["output"], markup=False, highlight=False)
        console.print(
            "\n[dim]Run 'hostwright apply' to converge these resources.[/dim]"
        )

    _run_command(
        command_name="plan",
        panel_title="Hostwright Plan",
        panel_color="cyan",
        core_method="plan",
        success_handler=_handle_success,
        output_dir=output_dir,
    )


@app.command()
def apply(
    output_dir: str = typer.Option(
        None, "--output-dir", help="Directory for generated files (overrides .env)"
    ),
):
    """Apply resources: compile + run pyinfra."""

    def _handle_success(result):
        console.print("\n[bold green]✓ Deployment successful![/bold green]")
        console.print(f"[dim]Resources: {result['resources']}[/dim]")

    _run_command(
        command_name="deployment",
        panel_title="Hostwright Apply",
        panel_color="blue",
        core_method="apply",
        success_handler=_handle_success,
        output_dir=output_dir,
    )


@app.command()
def destroy(
    output_dir: str = typer.Option(
        None, "--output-dir", help="Directory for generated files (overrides .env)"
    ),
):
    """Undo resources: remove plist entries, printers and launchd jobs."""

    def _handle_success(result):
        console.print(
            "\n[bold green]✓ Resources destroyed successfully![/bold green]"
        )

    _run_command(
        command_name="destroy",
        panel_title="Hostwright Destroy",
        panel_color="red",
        core_method="destroy",
        success_handler=_handle_success,
        output_dir=output_dir,
    )


@app.command()
def version():
    """Show Hostwright version."""
    from . import __version__

    console.print(f"Hostwright version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
