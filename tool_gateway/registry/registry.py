"""Immutable tool registry snapshot."""

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

import structlog

from .config import ToolConfig, load_tool_configs


logger = structlog.get_logger("registry")


class ToolRegistry:
    """Read-only mapping from tool name to ToolConfig.

    Built once at startup and shared by every request without locking.
    """

    def __init__(self, tools: Iterable[ToolConfig]):
        entries: dict[str, ToolConfig] = {}
        for tool in tools:
            if tool.name in entries:
                raise ValueError(f"duplicate tool name in config: {tool.name}")
            entries[tool.name] = tool
        self._tools = MappingProxyType(entries)

    def resolve(self, name: str) -> ToolConfig | None:
        """Exact, case-sensitive lookup."""
        return self._tools.get(name)

    def all(self) -> Iterator[tuple[str, ToolConfig]]:
        """Iterate (name, config) pairs in configuration order.

        Each call returns a fresh iterator.
        """
        return iter(self._tools.items())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def load_tool_registry(config_path: str | Path) -> ToolRegistry:
    """Load the registry snapshot from the tools configuration file.

    Raises:
        RegistryConfigError: If the configuration is malformed.
    """
    registry = ToolRegistry(load_tool_configs(config_path))
    for name, tool in registry.all():
        logger.info("tool_registered", tool_name=name, route=f"/tool/{name}", target=tool.target)
    return registry
