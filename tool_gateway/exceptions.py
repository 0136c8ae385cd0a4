"""Base exceptions shared by every gateway module."""


class GatewayBaseError(Exception):
    """Base exception for all tool gateway errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationError(GatewayBaseError):
    """Raised at startup when required settings are missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIGURATION_ERROR")
