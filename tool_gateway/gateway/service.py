"""Service layer composing verify → resolve → transform → dispatch."""

import asyncio
import uuid
from typing import Awaitable, Callable, TypeVar

import httpx
import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from tool_gateway.auth.models import Identity
from tool_gateway.config import Settings
from tool_gateway.registry import ToolRegistry

from .exceptions import (
    ClientDisconnectedError,
    MalformedRequestError,
    PayloadTooLargeError,
    UnknownToolError,
)
from .proxy import dispatch
from .schemas import BackendError, MalformedRequest, Outcome, Success, TransportError
from .transform import transform


logger = structlog.get_logger("gateway")

T = TypeVar("T")

# How often an in-flight backend call checks whether the caller is still there
DISCONNECT_POLL_SECONDS = 0.25


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())


async def read_body(request: Request, max_bytes: int) -> bytes:
    """Read the inbound body, stopping as soon as it exceeds ``max_bytes``.

    Raises:
        PayloadTooLargeError: If the declared or actual size exceeds the limit.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLargeError(size_bytes=int(declared), max_bytes=max_bytes)

    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            raise PayloadTooLargeError(size_bytes=size, max_bytes=max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


async def run_until_disconnected(
    call: Awaitable[T],
    is_disconnected: Callable[[], Awaitable[bool]],
    tool_name: str,
    poll_seconds: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Await ``call``, cancelling it if the caller disconnects first.

    Raises:
        ClientDisconnectedError: If the caller went away before ``call`` finished.
    """
    task = asyncio.ensure_future(call)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_seconds)
            if done:
                return task.result()
            if await is_disconnected():
                task.cancel()
                logger.info("client_disconnected", tool_name=tool_name)
                raise ClientDisconnectedError(tool_name)
    finally:
        if not task.done():
            task.cancel()


async def invoke_tool(
    registry: ToolRegistry,
    client: httpx.AsyncClient,
    settings: Settings,
    tool_name: str,
    inbound_path: str,
    body: bytes,
    identity: Identity | None,
    request_id: str | None = None,
    query: str = "",
    is_disconnected: Callable[[], Awaitable[bool]] | None = None,
) -> Outcome:
    """Run one tool call through the gateway pipeline.

    The caller must already have verified the identity. Unknown tools
    fail here, before any backend is contacted.

    Args:
        registry: Loaded tool registry.
        client: HTTP client for backend requests.
        settings: Process settings (timeout, identity header).
        tool_name: Name from the ``/tool/{name}`` route.
        inbound_path: Path below the tool route, ``""`` for the bare route.
        body: Raw inbound body.
        identity: Verified caller.
        request_id: Correlation ID (generated if not provided).
        query: Inbound query string.
        is_disconnected: Probe used to abandon the backend call on disconnect.

    Returns:
        The classified Outcome.

    Raises:
        UnknownToolError: If the tool is not registered.
        ClientDisconnectedError: If the caller disconnected mid-call.
    """
    cfg = registry.resolve(tool_name)
    if cfg is None:
        raise UnknownToolError(tool_name)

    try:
        outbound_path, payload = transform(tool_name, inbound_path, body, cfg)
    except MalformedRequestError as e:
        logger.info("malformed_request", tool_name=tool_name, detail=e.message)
        return MalformedRequest(detail=e.message)

    call = dispatch(
        client=client,
        outbound_path=outbound_path,
        payload=payload,
        identity=identity,
        cfg=cfg,
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
        identity_header=settings.IDENTITY_HEADER,
        request_id=request_id or generate_request_id(),
        query=query,
    )
    if is_disconnected is None:
        return await call
    return await run_until_disconnected(call, is_disconnected, tool_name)


def outcome_to_response(outcome: Outcome) -> Response:
    """Map an Outcome onto the response returned to the caller.

    Backend answers are relayed verbatim; only transport failures and
    malformed requests get a gateway-generated body.
    """
    if isinstance(outcome, (Success, BackendError)):
        return Response(
            content=outcome.body,
            status_code=outcome.status_code,
            media_type=outcome.content_type,
        )
    if isinstance(outcome, TransportError):
        return JSONResponse(
            status_code=502,
            content={"error": outcome.code, "detail": outcome.detail, "target": outcome.target},
        )
    return JSONResponse(
        status_code=400,
        content={"error": "MALFORMED_REQUEST", "detail": outcome.detail},
    )
