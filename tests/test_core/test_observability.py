"""
Tests for observability helpers.
"""
from __future__ import annotations

import asyncio

import pytest

from mcp_server_oss.core.observability import (
    _sanitize_params,
    check_observability_health,
    init_tracing,
    observe_tool,
)


class TestSanitizeParams:
    """Tests for parameter sanitizing before logging."""

    def test_masks_credentials(self):
        result = _sanitize_params({"access_key_secret": "s3cr3t", "directory": "images"})

        assert result["access_key_secret"] == "[REDACTED]"
        assert result["directory"] == "images"

    def test_shortens_long_values(self):
        result = _sanitize_params({"url": "x" * 300, "rename_rules": list(range(25))})

        assert result["url"].endswith("...")
        assert len(result["url"]) == 103
        assert result["rename_rules"] == "[25 items]"


class TestObserveTool:
    """Tests for observe_tool."""

    def test_yields_context(self):
        async def run():
            async with observe_tool("list_oss_files", "storage", {"directory": "a"}) as ctx:
                ctx.summary = {"count": 3}
            return ctx

        ctx = asyncio.run(run())

        assert ctx.tool_name == "list_oss_files"
        assert ctx.summary == {"count": 3}
        assert ctx.duration_ms >= 0

    def test_reraises(self):
        async def run():
            async with observe_tool("upload_to_oss", "storage"):
                raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            asyncio.run(run())


def test_tracing_off_when_disabled(monkeypatch):
    monkeypatch.setenv("OTEL_SDK_DISABLED", "true")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")

    assert init_tracing() is None
    assert asyncio.run(check_observability_health())["tracing"] == "disabled"
