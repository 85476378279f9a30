"""Tests for PyInfra compiler."""

from pathlib import Path

from hostwright.pyinfra_compiler import PyInfraCompiler
from hostwright.resources import ClientLaunchdResource, PlistResource, WindowsPrinterResource


def _dock_resources():
    return [
        PlistResource(path="/Library/Preferences/com.apple.dock.plist", entry="autohide", value=True),
        PlistResource(path="/Library/Preferences/com.apple.dock.plist", entry="tilesize", value=48),
        ClientLaunchdResource(name="client", interval=60),
    ]


def test_pyinfra_compiler_initialization():
    """Test PyInfraCompiler initialization."""
    compiler = PyInfraCompiler()
    assert compiler.output_dir == Path(".hostwright/pyinfra")
    assert compiler.hosts == ["@local"]

    custom_compiler = PyInfraCompiler(output_dir="custom/path", hosts=["@winrm/printsrv01"])
    assert custom_compiler.output_dir == Path("custom/path")
    assert custom_compiler.hosts == ["@winrm/printsrv01"]


def test_output_dir_from_settings(monkeypatch):
    """HW_OUTPUT_DIR changes the default output directory."""
    from hostwright.settings import reload_settings

    monkeypatch.setenv("HW_OUTPUT_DIR", "build/pyinfra")
    reload_settings()

    assert PyInfraCompiler().output_dir == Path("build/pyinfra")


def test_inventory_generation():
    """Test inventory file generation."""
    compiler = PyInfraCompiler()
    inventory = compiler._generate_inventory()

    assert 'hosts = ["@local"]' in inventory


def test_deploy_generation():
    """Test deploy.py generation."""
    compiler = PyInfraCompiler()

    deploy = compiler._generate_deploy(_dock_resources())

    assert "from hostwright.pyinfra_operations import launchd, plist, windows_printer" in deploy
    assert deploy.count("plist.plist(") == 2
    assert "launchd.client_launchd_enable(" in deploy
    assert deploy.index("entry='autohide'") < deploy.index("entry='tilesize'")


def test_destroy_generation_is_reversed():
    """Destroy undoes resources in reverse order."""
    compiler = PyInfraCompiler()

    destroy = compiler._generate_destroy(_dock_resources())

    assert destroy.count("plist.plist_entry_absent(") == 2
    assert destroy.index("launchd.client_launchd_disable(") < destroy.index("entry='tilesize'")
    assert destroy.index("entry='tilesize'") < destroy.index("entry='autohide'")


def test_compile_creates_files(tmp_path):
    """Test that compile creates the necessary files."""
    compiler = PyInfraCompiler(output_dir=str(tmp_path))

    result_dir = compiler.compile(
        [
            WindowsPrinterResource(
                name="HP LaserJet 5th Floor",
                driver_name="HP LaserJet 4100 Series PCL6",
                ipv4_address="10.4.64.38",
            )
        ]
    )

    assert result_dir.exists()
    assert (result_dir / "inventory.py").exists()
    assert (result_dir / "deploy.py").exists()
    assert (result_dir / "destroy.py").exists()

    assert "windows_printer.printer_create(" in (result_dir / "deploy.py").read_text()
    assert "windows_printer.printer_delete(" in (result_dir / "destroy.py").read_text()


def test_compile_creates_directory(tmp_path):
    """Test that compile creates output directory if it doesn't exist."""
    output_dir = tmp_path / "nested" / "path" / "pyinfra"
    compiler = PyInfraCompiler(output_dir=str(output_dir))

    assert not output_dir.exists()

    result_dir = compiler.compile(_dock_resources())

    assert output_dir.exists()
    assert result_dir == output_dir


def test_generated_files_are_valid_python(tmp_path):
    """Test that generated files have proper Python structure."""
    compiler = PyInfraCompiler(output_dir=str(tmp_path))

    result_dir = compiler.compile(_dock_resources())

    for name in ["inventory.py", "deploy.py", "destroy.py"]:
        path = result_dir / name
        compile(path.read_text(), str(path), "exec")


def test_deploy_header_imports_operations():
    """The import block of every generated deploy loads all operation modules."""
    from hostwright.pyinfra_compiler import DEPLOY_HEADER

    namespace = {}
    exec(compile(DEPLOY_HEADER.format(title="Deploy"), "deploy.py", "exec"), namespace)

    assert hasattr(namespace["plist"], "plist")
    assert hasattr(namespace["launchd"], "client_launchd_enable")
    assert hasattr(namespace["windows_printer"], "printer_create")
