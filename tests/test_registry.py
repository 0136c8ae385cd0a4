"""Unit tests for the tool registry module."""

import json
import re
from unittest.mock import patch

import pytest

from tool_gateway.registry import (
    RegistryConfigError,
    ToolConfig,
    ToolRegistry,
    load_tool_configs,
    load_tool_registry,
    parse_tool_configs,
)


def _write_config(tmp_path, data) -> str:
    path = tmp_path / "tools.config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return str(path)


class TestToolConfig:
    """Tests for the ToolConfig model."""

    def test_aliases(self):
        tool = ToolConfig(
            name="legacy",
            target="http://legacy:9000",
            pathRewrite={"^/old": "/new"},
            schema={"type": "object"},
        )

        assert tool.path_rewrite == {"^/old": "/new"}
        assert tool.request_schema == {"type": "object"}
        assert tool.rewrite_rule == ("^/old", "/new")

    def test_no_rewrite_rule(self):
        tool = ToolConfig(name="weather", target="http://backend/weather")

        assert tool.rewrite_rule is None
        assert tool.compile_rewrite() is None

    def test_only_first_rule_compiled(self):
        tool = ToolConfig(
            name="multi",
            target="http://multi",
            pathRewrite={"^/a": "/b", "^/c": "/d"},
        )
        pattern, replacement = tool.compile_rewrite()

        assert pattern.pattern == "^/a"
        assert replacement == "/b"

    def test_js_group_references_translated(self):
        tool = ToolConfig(
            name="calendar",
            target="http://calendar",
            pathRewrite={r"^/events/(?P<id>\d+)/(\w+)": "/v1/$<id>/$2/$$"},
        )
        pattern, replacement = tool.compile_rewrite()

        assert pattern.sub(replacement, "/events/7/list", count=1) == "/v1/7/list/$"

    def test_compiled_rewrite_is_reused(self):
        tool = ToolConfig(name="legacy", target="http://legacy:9000", pathRewrite={"^/old": "/new"})

        with patch("tool_gateway.registry.config.re.compile", wraps=re.compile) as mock_compile:
            first = tool.compiled_rewrite
            second = tool.compiled_rewrite

        assert first is second
        assert mock_compile.call_count == 1

    def test_frozen(self):
        tool = ToolConfig(name="weather", target="http://backend/weather")

        with pytest.raises(Exception):
            tool.target = "http://elsewhere"


class TestParseToolConfigs:
    """Tests for configuration validation."""

    def test_names_come_from_keys(self):
        tools = parse_tool_configs({
            "weather": {"target": "http://backend/weather", "description": "Weather"},
            "legacy": {"target": "http://legacy:9000"},
        })

        assert [t.name for t in tools] == ["weather", "legacy"]
        assert tools[0].description == "Weather"

    def test_missing_target_is_error(self):
        with pytest.raises(RegistryConfigError, match="weather"):
            parse_tool_configs({"weather": {"description": "no target"}})

    @pytest.mark.parametrize("target", ["backend:8080", "not a url at all", "/relative/path", "ftp://files/x"])
    def test_target_must_be_http_url(self, target):
        with pytest.raises(RegistryConfigError, match="weather"):
            parse_tool_configs({"weather": {"target": target}})

    def test_unknown_key_is_error(self):
        with pytest.raises(RegistryConfigError, match="pathrewrite"):
            parse_tool_configs({"legacy": {"target": "http://legacy:9000", "pathrewrite": {"^/old": "/new"}}})

    def test_non_object_entry_is_error(self):
        with pytest.raises(RegistryConfigError):
            parse_tool_configs({"weather": "http://backend/weather"})

    def test_bad_pattern_is_error(self):
        with pytest.raises(RegistryConfigError, match="pathRewrite"):
            parse_tool_configs({"bad": {"target": "http://x", "pathRewrite": {"^/(unclosed": "/"}}})

    def test_bad_group_reference_is_error(self):
        with pytest.raises(RegistryConfigError):
            parse_tool_configs({"bad": {"target": "http://x", "pathRewrite": {"^/a": "/$3"}}})

    def test_extra_rewrite_rules_warn(self):
        with patch("tool_gateway.registry.config.logger") as mock_logger:
            tools = parse_tool_configs({
                "multi": {"target": "http://multi", "pathRewrite": {"^/a": "/b", "^/c": "/d"}},
            })

        assert tools[0].rewrite_rule == ("^/a", "/b")
        mock_logger.warning.assert_called_once()
        args, kwargs = mock_logger.warning.call_args
        assert args[0] == "path_rewrite_extra_rules_ignored"
        assert kwargs["ignored"] == ["^/c"]

    def test_single_rule_does_not_warn(self):
        with patch("tool_gateway.registry.config.logger") as mock_logger:
            parse_tool_configs({"legacy": {"target": "http://x", "pathRewrite": {"^/old": "/new"}}})

        mock_logger.warning.assert_not_called()


class TestLoadToolConfigs:
    """Tests for reading the JSON document from disk."""

    def test_missing_file_is_error(self, tmp_path):
        with pytest.raises(RegistryConfigError, match="Failed to read"):
            load_tool_configs(tmp_path / "absent.json")

    def test_invalid_json_is_error(self, tmp_path):
        path = _write_config(tmp_path, "{ not json")

        with pytest.raises(RegistryConfigError, match="Failed to parse"):
            load_tool_configs(path)

    def test_array_root_is_error(self, tmp_path):
        path = _write_config(tmp_path, [{"target": "http://x"}])

        with pytest.raises(RegistryConfigError, match="JSON object"):
            load_tool_configs(path)

    def test_fixture_config_loads(self, tools_config_path):
        tools = load_tool_configs(tools_config_path)

        assert {t.name for t in tools} == {"weather", "legacy", "calendar"}


class TestToolRegistry:
    """Tests for the immutable registry snapshot."""

    @pytest.fixture
    def registry(self, tools_config_path) -> ToolRegistry:
        return load_tool_registry(tools_config_path)

    def test_resolve_registered(self, registry):
        tool = registry.resolve("weather")

        assert tool is not None
        assert tool.target == "http://backend/weather"

    @pytest.mark.parametrize("name", ["unknown", "Weather", "weather ", ""])
    def test_resolve_unknown_is_none(self, registry, name):
        assert registry.resolve(name) is None

    def test_all_is_restartable(self, registry):
        first = list(registry.all())
        second = list(registry.all())

        assert first == second
        assert [name for name, _ in first] == ["weather", "legacy", "calendar"]
        assert all(name == tool.name for name, tool in first)

    def test_snapshot_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._tools["new"] = ToolConfig(name="new", target="http://new")

    def test_duplicate_names_rejected(self):
        tool = ToolConfig(name="weather", target="http://a")

        with pytest.raises(ValueError, match="duplicate"):
            ToolRegistry([tool, tool])

    def test_len_and_contains(self, registry):
        assert len(registry) == 3
        assert "legacy" in registry
        assert "missing" not in registry
