"""Custom exceptions for the tool gateway pipeline."""

from tool_gateway.exceptions import GatewayBaseError


class GatewayError(GatewayBaseError):
    """Base exception for gateway-specific errors."""
    pass


class UnknownToolError(GatewayError):
    """Raised when the requested tool is not in the registry.

    Attributes:
        tool_name: Name of the tool that was not found.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Tool '{tool_name}' is not registered",
            code="UNKNOWN_TOOL"
        )
        self.tool_name = tool_name


class MalformedRequestError(GatewayError):
    """Raised when the inbound body cannot be turned into an envelope."""

    def __init__(self, message: str):
        super().__init__(message=message, code="MALFORMED_REQUEST")


class PayloadTooLargeError(GatewayError):
    """Raised when request payload exceeds the size limit.

    Attributes:
        size_bytes: Actual size of the payload.
        max_bytes: Maximum allowed size.
    """

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            message=f"Payload size {size_bytes} bytes exceeds limit of {max_bytes} bytes",
            code="PAYLOAD_TOO_LARGE"
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class ClientDisconnectedError(GatewayError):
    """Raised when the caller went away before the backend answered."""

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Client disconnected while waiting for tool '{tool_name}'",
            code="CLIENT_DISCONNECTED"
        )
        self.tool_name = tool_name
