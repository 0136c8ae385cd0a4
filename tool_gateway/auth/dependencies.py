"""FastAPI dependencies for authentication."""

from typing import Annotated

from fastapi import Depends, Header

from tool_gateway.config import Settings, get_settings
from .models import Identity
from .verifier import verify


async def get_identity(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Verify the caller's Authorization header.

    Injected into every tool route, so it completes before the registry
    lookup or any backend work.

    Raises:
        MissingCredentialError: If header is missing.
        MalformedCredentialError: If header has no token segment.
        InvalidCredentialError: If token is invalid or expired.
    """
    return verify(authorization, settings)
