"""Tests for Hostwright settings."""

from hostwright.settings import HostwrightSettings, get_settings, reload_settings


def test_defaults(monkeypatch):
    for name in ["HW_PLISTBUDDY_PATH", "HW_OUTPUT_DIR", "HW_LOG_LEVEL", "HW_PYINFRA_PATH"]:
        monkeypatch.delenv(name, raising=False)

    settings = HostwrightSettings(_env_file=None)

    assert settings.plistbuddy_path == "/usr/libexec/PlistBuddy"
    assert settings.defaults_path == "/usr/bin/defaults"
    assert settings.plutil_path == "/usr/bin/plutil"
    assert settings.launchctl_path == "/bin/launchctl"
    assert settings.powershell_path == "powershell.exe"
    assert settings.pyinfra_path == "pyinfra"
    assert settings.output_dir == ".hostwright/pyinfra"
    assert settings.log_level == "INFO"


def test_env_override(monkeypatch):
    monkeypatch.setenv("HW_PLISTBUDDY_PATH", "/opt/bin/PlistBuddy")
    monkeypatch.setenv("hw_log_level", "DEBUG")

    settings = HostwrightSettings(_env_file=None)

    assert settings.plistbuddy_path == "/opt/bin/PlistBuddy"
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_reload_settings(monkeypatch):
    before = get_settings()
    monkeypatch.setenv("HW_OUTPUT_DIR", "elsewhere")

    after = reload_settings()

    assert after is not before
    assert after.output_dir == "elsewhere"
    assert get_settings() is after
