"""
Hostwright errors.
"""

class HostwrightError(Exception):
    """Base exception for all Hostwright errors."""
    pass

class UnsupportedDataTypeError(HostwrightError, TypeError):
    """A plist value or type tag that cannot be translated."""
    pass

class ConfigurationError(HostwrightError):
    """Errors in configuration."""
    pass

class DeploymentError(HostwrightError):
    """Errors during deployment."""
    pass
