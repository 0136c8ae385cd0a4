"""OpenAPI module - API description derived from the tool registry."""

from .descriptor import synthesize, describe_tool, RESPONSES
from .router import router


__all__ = [
    "synthesize",
    "describe_tool",
    "RESPONSES",
    "router",
]
