"""Pydantic schemas for backend envelopes and dispatch outcomes."""

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class InvocationEnvelope(BaseModel):
    """Backend-facing representation of a tool call.

    Attributes:
        tool: Backend invocation name, always ``get_<tool name>``.
        args: Caller body after field normalization.
    """

    tool: str = Field(..., description="Backend invocation name")
    args: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_tool(cls, tool_name: str, args: dict[str, Any]) -> "InvocationEnvelope":
        return cls(tool=f"get_{tool_name}", args=args)

    def to_bytes(self) -> bytes:
        """Serialize deterministically for the outbound request body."""
        return json.dumps(
            {"tool": self.tool, "args": self.args},
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")


class RawBody(BaseModel):
    """Inbound body forwarded unwrapped because it could not be parsed."""

    content: bytes

    model_config = ConfigDict(frozen=True)

    def to_bytes(self) -> bytes:
        return self.content


OutboundPayload = Union[InvocationEnvelope, RawBody]


class Success(BaseModel):
    """Backend answered with a 2xx status."""

    kind: Literal["success"] = "success"
    status_code: int
    body: bytes = b""
    content_type: str | None = None


class BackendError(BaseModel):
    """Backend answered with a non-2xx status; passed through verbatim."""

    kind: Literal["backend_error"] = "backend_error"
    status_code: int
    body: bytes = b""
    content_type: str | None = None


class TransportError(BaseModel):
    """No HTTP response was received from the backend.

    Attributes:
        target: Backend URL that failed.
        detail: Description of the network failure.
        timed_out: Whether the failure was the request timeout.
    """

    kind: Literal["transport_error"] = "transport_error"
    target: str
    detail: str
    timed_out: bool = False

    @property
    def code(self) -> str:
        return "BACKEND_TIMEOUT" if self.timed_out else "BACKEND_UNAVAILABLE"


class MalformedRequest(BaseModel):
    """Inbound body could not be turned into an envelope."""

    kind: Literal["malformed_request"] = "malformed_request"
    detail: str


Outcome = Union[Success, BackendError, TransportError, MalformedRequest]
