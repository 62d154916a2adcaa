"""Exceptions for config-lens.

The resolution engine itself never raises; these are surfaced by the I/O
side of the package (scanning roots, persisting session state).
"""


class ConfigError(Exception):
    """Base exception for configuration inspection errors."""

    pass


class ConfigFileError(ConfigError):
    """Error reading or writing a configuration or session file."""

    pass


class ConfigValidationError(ConfigError):
    """Error validating data before it is persisted."""

    pass
