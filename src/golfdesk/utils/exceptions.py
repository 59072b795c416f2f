"""Custom exceptions for golfdesk."""


class GolfdeskError(Exception):
    """Base exception for all golfdesk errors."""

    pass


class ConfigurationError(GolfdeskError):
    """Error in configuration or settings."""

    pass
