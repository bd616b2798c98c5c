"""Custom exceptions for configuration management."""


class ConfigError(Exception):
    """Raised when configuration data or a retention setting cannot be processed."""
