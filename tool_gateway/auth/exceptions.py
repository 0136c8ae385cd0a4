"""Custom exceptions for credential verification."""

from tool_gateway.exceptions import GatewayBaseError


class AuthError(GatewayBaseError):
    """Raised when a caller's credential is rejected."""
    pass


class MissingCredentialError(AuthError):
    """Raised when the Authorization header is absent or empty."""

    def __init__(self, message: str = "Missing Authorization header"):
        super().__init__(message=message, code="MISSING_CREDENTIAL")


class MalformedCredentialError(AuthError):
    """Raised when the Authorization header has no token segment."""

    def __init__(self, message: str = "Malformed Authorization header. Expected: '<scheme> <token>'"):
        super().__init__(message=message, code="MALFORMED_CREDENTIAL")


class InvalidCredentialError(AuthError):
    """Raised when the token signature, expiry or claims do not verify."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, code="INVALID_CREDENTIAL")
