"""Pydantic models for caller identity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


ANONYMOUS_SUBJECT = "anonymous"


class Identity(BaseModel):
    """Verified claim set extracted from a caller's credential.

    Attributes:
        subject_id: Unique identifier of the caller.
        role: Caller role, when the token carries one.
        claims: Full decoded token payload.
    """

    subject_id: str = Field(..., description="Unique subject identifier")
    role: str | None = Field(None, description="Caller role")
    claims: dict[str, Any] = Field(default_factory=dict, description="Decoded token payload")

    model_config = ConfigDict(frozen=True)


class PropagatedHeader(BaseModel):
    """Header carrying the caller identity to a backend."""

    name: str
    value: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_identity(cls, name: str, identity: Identity | None) -> "PropagatedHeader":
        """Build the propagation header, using the anonymous marker when no identity is attached."""
        value = identity.subject_id if identity is not None else ANONYMOUS_SUBJECT
        return cls(name=name, value=value)
