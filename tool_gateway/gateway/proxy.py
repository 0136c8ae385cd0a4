"""HTTP dispatcher forwarding tool calls to backend servers."""

import uuid

import httpx
import structlog

from tool_gateway.auth.models import Identity, PropagatedHeader
from tool_gateway.registry import ToolConfig
from .schemas import BackendError, OutboundPayload, Outcome, Success, TransportError


logger = structlog.get_logger("gateway")

# Default timeout for backend requests
DEFAULT_TIMEOUT_SECONDS = 30.0


def build_target_url(target: str, outbound_path: str, query: str = "") -> str:
    """Join the backend base URL with the outbound path and query string."""
    url = target
    if outbound_path:
        if not outbound_path.startswith("/"):
            outbound_path = "/" + outbound_path
        url = target.rstrip("/") + outbound_path
    if query:
        url = f"{url}?{query}"
    return url


def classify_response(response: httpx.Response) -> Success | BackendError:
    """Map any received HTTP response onto Success (2xx) or BackendError."""
    fields = {
        "status_code": response.status_code,
        "body": response.content,
        "content_type": response.headers.get("content-type"),
    }
    if 200 <= response.status_code < 300:
        return Success(**fields)
    return BackendError(**fields)


async def dispatch(
    client: httpx.AsyncClient,
    outbound_path: str,
    payload: OutboundPayload,
    identity: Identity | None,
    cfg: ToolConfig,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    identity_header: str = "x-user-id",
    request_id: str | None = None,
    query: str = "",
) -> Outcome:
    """Forward a tool call to its backend and classify the result.

    Exactly one outbound request is made; nothing is retried.

    Args:
        client: Shared HTTP client.
        outbound_path: Path after rewriting, appended to ``cfg.target``.
        payload: Envelope or raw body to send.
        identity: Verified caller, or None on unauthenticated routes.
        cfg: Resolved tool configuration.
        timeout: Request timeout in seconds, overridden by ``cfg.timeout``.
        identity_header: Name of the identity propagation header.
        request_id: Optional trace ID (generated if not provided).
        query: Inbound query string, forwarded as is.

    Returns:
        Success, BackendError or TransportError.
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    if cfg.timeout is not None:
        timeout = cfg.timeout

    url = build_target_url(cfg.target, outbound_path, query)
    propagated = PropagatedHeader.for_identity(identity_header, identity)
    headers = {
        "Content-Type": "application/json",
        "X-Request-ID": request_id,
        propagated.name: propagated.value,
    }

    logger.info("backend_request", tool_name=cfg.name, url=url, request_id=request_id)
    try:
        response = await client.post(
            url,
            content=payload.to_bytes(),
            headers=headers,
            timeout=timeout,
        )
    except httpx.TimeoutException:
        logger.error("backend_transport_error", tool_name=cfg.name, url=url, error="timeout")
        return TransportError(
            target=cfg.target,
            detail=f"Backend at '{cfg.target}' timed out after {timeout}s",
            timed_out=True,
        )
    except httpx.RequestError as e:
        logger.error("backend_transport_error", tool_name=cfg.name, url=url, error=str(e))
        return TransportError(
            target=cfg.target,
            detail=f"Backend at '{cfg.target}' is unavailable: {str(e) or type(e).__name__}",
        )
    except httpx.InvalidURL as e:
        logger.error("backend_transport_error", tool_name=cfg.name, url=url, error=str(e))
        return TransportError(target=cfg.target, detail=f"Invalid backend URL '{url}': {e}")

    outcome = classify_response(response)
    logger.info(
        "backend_response",
        tool_name=cfg.name,
        status_code=response.status_code,
        outcome=outcome.kind,
        request_id=request_id,
    )
    return outcome
