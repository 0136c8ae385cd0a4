"""Registry module - Tool definitions loaded at startup."""

from .config import ToolConfig, RegistryConfigError, load_tool_configs, parse_tool_configs
from .registry import ToolRegistry, load_tool_registry


__all__ = [
    "ToolConfig",
    "RegistryConfigError",
    "load_tool_configs",
    "parse_tool_configs",
    "ToolRegistry",
    "load_tool_registry",
]
