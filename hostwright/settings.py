"""
Hostwright Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find project root (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent


class HostwrightSettings(BaseSettings):
    """
    Hostwright configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="HW_",  # All Hostwright env vars must start with HW_
    )

    # macOS property list tools
    plistbuddy_path: str = Field(
        default="/usr/libexec/PlistBuddy",
        description="PlistBuddy executable (env: HW_PLISTBUDDY_PATH)",
    )

    defaults_path: str = Field(
        default="/usr/bin/defaults",
        description="defaults executable (env: HW_DEFAULTS_PATH)",
    )

    plutil_path: str = Field(
        default="/usr/bin/plutil",
        description="plutil executable (env: HW_PLUTIL_PATH)",
    )

    file_path: str = Field(
        default="/usr/bin/file",
        description="file(1) executable used to detect plist encoding (env: HW_FILE_PATH)",
    )

    launchctl_path: str = Field(
        default="/bin/launchctl",
        description="launchctl executable (env: HW_LAUNCHCTL_PATH)",
    )

    # Windows
    powershell_path: str = Field(
        default="powershell.exe",
        description="PowerShell executable (env: HW_POWERSHELL_PATH)",
    )

    # Deployment
    pyinfra_path: str = Field(
        default="pyinfra",
        description="pyinfra executable used to run compiled deploys (env: HW_PYINFRA_PATH)",
    )

    output_dir: str = Field(
        default=".hostwright/pyinfra",
        description="Directory for compiled pyinfra files (env: HW_OUTPUT_DIR)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: HW_LOG_LEVEL)",
    )


# Global settings instance
_settings: HostwrightSettings | None = None


def get_settings() -> HostwrightSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        HostwrightSettings instance
    """
    global _settings
    if _settings is None:
        _settings = HostwrightSettings()
    return _settings


def reload_settings() -> HostwrightSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh HostwrightSettings instance
    """
    global _settings
    _settings = HostwrightSettings()
    return _settings
