"""Turns an inbound tool call into the backend's path and envelope."""

import json
from typing import Any

import structlog

from tool_gateway.registry import ToolConfig
from .exceptions import MalformedRequestError
from .schemas import InvocationEnvelope, OutboundPayload, RawBody


logger = structlog.get_logger("gateway")


# Fixed per-tool field renames applied to args before wrapping
FIELD_RENAMES: dict[str, dict[str, str]] = {
    "weather": {"city": "location"},
}


def rewrite_path(inbound_path: str, cfg: ToolConfig) -> str:
    """Apply the tool's first rewrite rule to the inbound path.

    Only the first match is substituted. Without a rule the path is
    returned unchanged.
    """
    compiled = cfg.compiled_rewrite
    if compiled is None:
        return inbound_path

    pattern, replacement = compiled
    outbound_path = pattern.sub(replacement, inbound_path, count=1)
    if outbound_path != inbound_path:
        logger.debug("path_rewritten", tool_name=cfg.name, inbound=inbound_path, outbound=outbound_path)
    return outbound_path


def normalize_args(tool_name: str, args: dict[str, Any]) -> dict[str, Any]:
    """Rename tool-specific fields. Returns a new dict; the input is untouched."""
    renames = FIELD_RENAMES.get(tool_name)
    if not renames:
        return dict(args)

    normalized = dict(args)
    for source, dest in renames.items():
        if source in normalized:
            normalized[dest] = normalized.pop(source)
    return normalized


def parse_body(inbound_body: bytes | str | dict[str, Any] | None) -> dict[str, Any] | None:
    """Parse the inbound body into a JSON object.

    Returns:
        The decoded object, ``{}`` for an empty body, or None when the
        body is not valid JSON.

    Raises:
        MalformedRequestError: If the body is valid JSON but not an object.
    """
    if inbound_body is None:
        return {}
    if isinstance(inbound_body, dict):
        return inbound_body

    if isinstance(inbound_body, bytes):
        try:
            inbound_body = inbound_body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not inbound_body.strip():
        return {}

    try:
        data = json.loads(inbound_body)
    except json.JSONDecodeError:
        return None

    if not isinstance(data, dict):
        raise MalformedRequestError(
            f"Request body must be a JSON object, got {type(data).__name__}"
        )
    return data


def transform(
    tool_name: str,
    inbound_path: str,
    inbound_body: bytes | str | dict[str, Any] | None,
    cfg: ToolConfig,
) -> tuple[str, OutboundPayload]:
    """Build the outbound path and payload for a tool call.

    A body that is not valid JSON is forwarded unwrapped rather than
    rejected.

    Args:
        tool_name: Registered tool name.
        inbound_path: Path below ``/tool/{name}``.
        inbound_body: Raw or already decoded request body.
        cfg: Resolved tool configuration.

    Returns:
        Tuple of outbound path and the payload to send.

    Raises:
        MalformedRequestError: If the body is JSON but not an object.
    """
    outbound_path = rewrite_path(inbound_path, cfg)

    args = parse_body(inbound_body)
    if args is None:
        raw = inbound_body.encode("utf-8") if isinstance(inbound_body, str) else inbound_body
        logger.warning("body_transform_degraded", tool_name=tool_name, size_bytes=len(raw))
        return outbound_path, RawBody(content=raw)

    return outbound_path, InvocationEnvelope.for_tool(tool_name, normalize_args(tool_name, args))
