"""
Tests for server assembly and health.
"""
from __future__ import annotations

import asyncio
import json

from fastmcp import Client

from mcp_server_oss.config import AppConfig, ServerConfig
from mcp_server_oss.server import build_health_status, create_server

EXPECTED_TOOLS = {
    "oss_ping",
    "upload_to_oss",
    "list_oss_configs",
    "list_oss_files",
    "batch_rename_files",
    "list_directory_files",
    "download_file",
}


def _config(store_config, **server) -> AppConfig:
    return AppConfig(server=ServerConfig(**server), stores={"default": store_config})


class TestCreateServer:
    """Tests for create_server."""

    def test_registers_all_tools(self, store_config, registry):
        mcp = create_server(_config(store_config), registry)

        async def list_names():
            async with Client(mcp) as client:
                return {tool.name for tool in await client.list_tools()}

        assert asyncio.run(list_names()) == EXPECTED_TOOLS

    def test_ping_and_rename_roundtrip(self, store_config, registry, fake_client):
        mcp = create_server(_config(store_config), registry)

        async def run():
            async with Client(mcp) as client:
                ping = await client.call_tool("oss_ping", {})
                rename = await client.call_tool("batch_rename_files", {"params": {
                    "directory": "images",
                    "rename_rules": [{"old_name": "a.png", "new_name": "z.png"}],
                    "response_format": "json",
                }})
                return ping.content[0].text, rename.content[0].text

        ping_text, rename_text = asyncio.run(run())

        assert json.loads(ping_text)["healthy"] is True
        assert json.loads(rename_text)["succeeded"] == 1
        assert "images/z.png" in fake_client.objects


class TestHealthStatus:
    """Tests for build_health_status."""

    def test_healthy(self, store_config, registry):
        registry.get_client("default")
        status = asyncio.run(build_health_status(_config(store_config), registry))

        assert status.healthy is True
        assert status.configs == ["default"]
        assert status.cached_clients == ["default"]
        assert status.mutations_allowed is True

    def test_unhealthy_without_configs(self, registry):
        status = asyncio.run(build_health_status(AppConfig(), registry))

        assert status.healthy is False
        assert status.details["missing"]
