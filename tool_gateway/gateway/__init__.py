"""Gateway module - tool call transformation and dispatch."""

from .schemas import (
    InvocationEnvelope,
    RawBody,
    Outcome,
    Success,
    BackendError,
    TransportError,
    MalformedRequest,
)
from .exceptions import (
    GatewayError,
    UnknownToolError,
    MalformedRequestError,
    PayloadTooLargeError,
    ClientDisconnectedError,
)
from .transform import transform, rewrite_path, normalize_args
from .proxy import dispatch
from .service import invoke_tool, outcome_to_response
from .router import router


__all__ = [
    # Schemas
    "InvocationEnvelope",
    "RawBody",
    "Outcome",
    "Success",
    "BackendError",
    "TransportError",
    "MalformedRequest",
    # Exceptions
    "GatewayError",
    "UnknownToolError",
    "MalformedRequestError",
    "PayloadTooLargeError",
    "ClientDisconnectedError",
    # Pipeline
    "transform",
    "rewrite_path",
    "normalize_args",
    "dispatch",
    "invoke_tool",
    "outcome_to_response",
    # Router
    "router",
]
