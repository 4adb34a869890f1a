"""
OSS MCP Server - Main Entry Point

FastMCP server implementation with:
- Lifespan management for observability and the store client registry
- Object-store tools (upload, list, batch rename)
- Local filesystem tools (directory listing, download)
- Health endpoint

Environment Variables:
- OSS_MCP_NAME: Server name (default: oss-mcp)
- OSS_MCP_TRANSPORT: Transport mode (stdio, streamable_http, sse)
- OSS_MCP_HOST / OSS_MCP_PORT: Bind address for HTTP transports
- OSS_MCP_LOG_LEVEL: Logging level
- See config.py for store configuration variables
"""
from __future__ import annotations

import argparse
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from mcp_server_oss.config import (
    AppConfig,
    TransportType,
    get_config,
    parse_store_configs,
    set_config,
)
from mcp_server_oss.core import (
    HealthStatus,
    StoreClientRegistry,
    check_observability_health,
    get_logger,
    init_observability,
)
from mcp_server_oss.tools import register_local_tools, register_storage_tools

logger = get_logger("oss-mcp.server")

INSTRUCTIONS = """Object storage MCP server.

Use `list_oss_configs` to see which store configurations exist.
Use `list_oss_files` or `list_directory_files` to see current file names.
Use `batch_rename_files` with dry_run=true to preview renames before running them.
Use `oss_ping` to verify server health.
"""


async def build_health_status(config: AppConfig, registry: StoreClientRegistry) -> HealthStatus:
    """Collect server, registry and observability health."""
    missing = config.validate_required()
    obs_health = await check_observability_health()

    return HealthStatus(
        healthy=not missing,
        server_name=config.server.name,
        version=config.server.version,
        configs=registry.config_names(),
        cached_clients=registry.cached_names(),
        mutations_allowed=config.server.allow_mutations,
        details={
            "default_config": config.server.default_config,
            "missing": missing,
            "observability": obs_health,
        },
    )


def create_server(
    config: AppConfig | None = None,
    registry: StoreClientRegistry | None = None,
) -> FastMCP:
    """Build the FastMCP app with every tool registered.

    The registry is created once here and handed to the tools; it owns the
    only cross-call state (one store client per configuration name).
    """
    config = config or get_config()
    registry = registry or StoreClientRegistry(config.stores)

    @asynccontextmanager
    async def app_lifespan(server: FastMCP) -> AsyncGenerator[dict[str, Any], None]:
        """Log startup state, expose the registry, drop clients on shutdown."""
        logger.info(
            "Starting OSS MCP Server",
            version=config.server.version,
            configs=registry.config_names(),
            mutations_allowed=config.server.allow_mutations
        )
        for problem in config.validate_required():
            logger.warning(problem)

        yield {"config": config, "registry": registry}

        logger.info("Shutting down OSS MCP Server")
        registry.clear()

    mcp = FastMCP(
        name=config.server.name,
        instructions=INSTRUCTIONS,
        lifespan=app_lifespan,
    )

    @mcp.tool(
        name="oss_ping",
        annotations={
            "title": "OSS Server Health Check",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        }
    )
    async def oss_ping() -> str:
        """
        Simple health check to verify the MCP server is responsive.

        Returns server status, version, configured stores and which of
        them already have a connected client.
        """
        status = await build_health_status(config, registry)
        return status.model_dump_json(indent=2)

    register_storage_tools(mcp, registry, config.server)
    register_local_tools(mcp, config.server)

    return mcp


# =============================================================================
# Main Entrypoint
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oss-mcp",
        description="MCP server exposing object storage tools",
    )
    parser.add_argument(
        "--oss-config",
        help="JSON object of store configs: {name: {region, accessKeyId, accessKeySecret, bucket, endpoint}}",
    )
    parser.add_argument(
        "--transport",
        choices=[t.value for t in TransportType],
        help="Transport (default: stdio)",
    )
    parser.add_argument("--host", help="Bind host for HTTP transports")
    parser.add_argument("--port", type=int, help="Port for HTTP transports")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    return parser


def apply_cli_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Overlay command-line options on the environment configuration."""
    updates: dict[str, Any] = {}
    if args.transport:
        updates["transport"] = TransportType(args.transport)
    if args.host:
        updates["host"] = args.host
    if args.port:
        updates["port"] = args.port
    if args.log_level:
        updates["log_level"] = args.log_level.upper()

    stores = dict(config.stores)
    if args.oss_config:
        stores.update(parse_store_configs(args.oss_config))

    return AppConfig(server=config.server.model_copy(update=updates), stores=stores)


def main(argv: list[str] | None = None) -> None:
    """Entry point supporting multiple transports."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_cli_overrides(get_config(), args)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)
    set_config(config)

    init_observability(
        service_name=config.server.name,
        service_version=config.server.version,
        log_level=config.server.log_level,
        json_logs=config.server.json_logs,
    )

    mcp = create_server(config)

    if config.server.transport == TransportType.STREAMABLE_HTTP:
        logger.info(f"Starting HTTP server on {config.server.host}:{config.server.port}")
        mcp.run(transport="streamable-http", host=config.server.host, port=config.server.port)
    elif config.server.transport == TransportType.SSE:
        logger.info(f"Starting SSE server on {config.server.host}:{config.server.port}")
        mcp.run(transport="sse", host=config.server.host, port=config.server.port)
    else:
        logger.info("Starting stdio server")
        mcp.run()


if __name__ == "__main__":
    main()
