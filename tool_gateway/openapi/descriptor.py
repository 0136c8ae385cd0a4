"""OpenAPI document synthesized from the tool registry."""

import copy
from typing import Any

from tool_gateway.registry import ToolRegistry


OPENAPI_VERSION = "3.0.3"

# Every tool route documents the same status vocabulary
RESPONSES: dict[str, dict[str, str]] = {
    "200": {"description": "Successful response"},
    "400": {"description": "Bad request"},
    "401": {"description": "Unauthorized"},
    "500": {"description": "Internal error"},
}

DEFAULT_REQUEST_SCHEMA: dict[str, Any] = {"type": "object"}


def describe_tool(name: str, description: str | None, schema: dict[str, Any] | None) -> dict[str, Any]:
    """Build the path item for one tool route."""
    return {
        "post": {
            "summary": description or f"Tool {name}",
            "operationId": f"invoke_{name}",
            "tags": ["tools"],
            "security": [{"bearerAuth": []}],
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {
                        "schema": copy.deepcopy(schema or DEFAULT_REQUEST_SCHEMA),
                    },
                },
            },
            "responses": {code: dict(body) for code, body in RESPONSES.items()},
        },
    }


def synthesize(registry: ToolRegistry, title: str, version: str) -> dict[str, Any]:
    """Describe every registered tool as an OpenAPI document.

    Recomputed on each call; the output depends only on the registry
    contents and the given title and version.
    """
    paths = {
        f"/tool/{name}": describe_tool(name, tool.description, tool.request_schema)
        for name, tool in registry.all()
    }
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "paths": paths,
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
            },
        },
    }
