"""Static tool registry config loader."""

import json
import re
from functools import cached_property
from pathlib import Path
from typing import Any

import structlog
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from tool_gateway.exceptions import GatewayBaseError


logger = structlog.get_logger("registry")

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class RegistryConfigError(GatewayBaseError):
    """Raised when the tool configuration cannot be loaded."""

    def __init__(self, message: str):
        super().__init__(message=message, code="REGISTRY_CONFIG_ERROR")


class ToolConfig(BaseModel):
    """Tool definition loaded from static config."""

    name: str
    target: str = Field(..., min_length=1)
    path_rewrite: dict[str, str] = Field(default_factory=dict, alias="pathRewrite")
    description: str | None = None
    request_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    timeout: float | None = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @field_validator("target")
    @classmethod
    def _check_target(cls, value: str) -> str:
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise ValueError(f"target must be an absolute http(s) URL, got {value!r}") from None
        return value

    @property
    def rewrite_rule(self) -> tuple[str, str] | None:
        """First declared rewrite rule; later rules are never applied."""
        return next(iter(self.path_rewrite.items()), None)

    def compile_rewrite(self) -> tuple[re.Pattern[str], str] | None:
        """Compile the rewrite rule into a pattern and a Python replacement template.

        Raises:
            re.error: If the pattern does not compile.
            ValueError: If the replacement references a group the pattern lacks.
        """
        rule = self.rewrite_rule
        if rule is None:
            return None
        pattern = re.compile(rule[0])
        return pattern, translate_replacement(rule[1], pattern)

    @cached_property
    def compiled_rewrite(self) -> tuple[re.Pattern[str], str] | None:
        """The compiled rewrite rule, built on first use and reused afterwards."""
        return self.compile_rewrite()


# $$, $&, $1..$99 and $<name>, as written in JavaScript-style configs
_JS_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|\d{1,2}|<[^>]+>)")


def translate_replacement(replacement: str, pattern: re.Pattern[str]) -> str:
    """Translate ``$n`` style group references into a ``re.sub`` template."""

    def _token(match: re.Match[str]) -> str:
        token = match.group(1)
        if token == "$":
            return "$"
        if token == "&":
            return r"\g<0>"
        if token.startswith("<"):
            name = token[1:-1]
            if name not in pattern.groupindex:
                raise ValueError(f"unknown group name {name!r} in replacement")
            return rf"\g<{name}>"
        if int(token) > pattern.groups:
            raise ValueError(f"invalid group reference ${token} in replacement")
        return rf"\g<{int(token)}>"

    return _JS_REPLACEMENT_TOKEN.sub(_token, replacement.replace("\\", "\\\\"))


def _read_document(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as e:
        raise RegistryConfigError(f"Failed to read {config_path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise RegistryConfigError(f"Failed to parse {config_path}: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, dict):
        raise RegistryConfigError(f"{config_path} must contain a JSON object keyed by tool name")
    return data


def parse_tool_configs(data: dict[str, Any]) -> list[ToolConfig]:
    """Validate a tool-name → config mapping.

    Args:
        data: Decoded configuration document.

    Returns:
        ToolConfig entries in document order.

    Raises:
        RegistryConfigError: If an entry is invalid or a rewrite pattern does not compile.
    """
    tools: list[ToolConfig] = []
    for name, raw in data.items():
        if not isinstance(raw, dict):
            raise RegistryConfigError(f"Tool '{name}' must be a JSON object")
        try:
            tool = ToolConfig(name=name, **{k: v for k, v in raw.items() if k != "name"})
        except ValidationError as e:
            raise RegistryConfigError(f"Invalid configuration for tool '{name}': {e}") from e

        rule = tool.rewrite_rule
        try:
            tool.compiled_rewrite
        except (re.error, ValueError) as e:
            raise RegistryConfigError(
                f"Invalid pathRewrite rule for tool '{name}': {rule[0]!r} ({e})"
            ) from e
        if len(tool.path_rewrite) > 1:
            logger.warning(
                "path_rewrite_extra_rules_ignored",
                tool_name=name,
                applied=rule[0],
                ignored=list(tool.path_rewrite)[1:],
            )
        tools.append(tool)
    return tools


def load_tool_configs(config_path: str | Path) -> list[ToolConfig]:
    """Load tool definitions from a JSON document.

    Args:
        config_path: Path to the tools configuration file.

    Raises:
        RegistryConfigError: If the file is missing, unparsable or invalid.
    """
    return parse_tool_configs(_read_document(Path(config_path)))
