"""Custom exceptions for mail_auth_inspector."""


class InspectorError(Exception):
    """Base exception for application-level errors."""


class ConfigError(InspectorError):
    """Raised when configuration cannot be loaded or validated."""


class MessageLoadError(InspectorError):
    """Raised when a message file cannot be read or decoded."""
