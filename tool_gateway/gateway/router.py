"""FastAPI router for the /tool/{name} endpoints."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Header, Request, Response

from tool_gateway.auth.dependencies import get_identity
from tool_gateway.auth.models import Identity
from tool_gateway.config import Settings, get_settings
from tool_gateway.dependencies import get_http_client, get_registry
from tool_gateway.registry import ToolRegistry

from .exceptions import UnknownToolError
from .service import invoke_tool, outcome_to_response, read_body


router = APIRouter(prefix="/tool", tags=["tools"])


async def _handle(
    request: Request,
    name: str,
    inbound_path: str,
    identity: Identity,
    registry: ToolRegistry,
    client: httpx.AsyncClient,
    settings: Settings,
    x_request_id: str | None,
) -> Response:
    # Unknown tools fail before the body is read
    if registry.resolve(name) is None:
        raise UnknownToolError(name)

    body = await read_body(request, settings.MAX_BODY_BYTES)
    outcome = await invoke_tool(
        registry=registry,
        client=client,
        settings=settings,
        tool_name=name,
        inbound_path=inbound_path,
        body=body,
        identity=identity,
        request_id=x_request_id,
        query=request.url.query,
        is_disconnected=request.is_disconnected,
    )
    return outcome_to_response(outcome)


@router.post("/{name}")
async def invoke_tool_endpoint(
    request: Request,
    name: str,
    identity: Annotated[Identity, Depends(get_identity)],
    registry: Annotated[ToolRegistry, Depends(get_registry)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    x_request_id: Annotated[str | None, Header()] = None,
) -> Response:
    """Invoke a registered tool and relay the backend's response.

    Requires: Valid JWT in the Authorization header.
    """
    return await _handle(request, name, "", identity, registry, client, settings, x_request_id)


@router.post("/{name}/{path:path}")
async def invoke_tool_subpath_endpoint(
    request: Request,
    name: str,
    path: str,
    identity: Annotated[Identity, Depends(get_identity)],
    registry: Annotated[ToolRegistry, Depends(get_registry)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    x_request_id: Annotated[str | None, Header()] = None,
) -> Response:
    """Invoke a registered tool with a sub-path, subject to the tool's path rewrite."""
    return await _handle(request, name, f"/{path}", identity, registry, client, settings, x_request_id)
