"""
Local filesystem tool implementations.
"""
from __future__ import annotations

import asyncio

from fastmcp import Context, FastMCP

from mcp_server_oss.config import ServerConfig
from mcp_server_oss.core.errors import format_error_response, handle_store_error
from mcp_server_oss.core.formatters import format_response
from mcp_server_oss.core.observability import observe_tool

from .download import download_file
from .formatters import LocalFormatter
from .listing import list_local_files
from .models import DownloadFileInput, ListLocalFilesInput


async def handle_list_directory(params: ListLocalFilesInput) -> str:
    """List a local directory, optionally filtered by a wildcard pattern."""
    try:
        async with observe_tool("list_directory_files", "local", params.model_dump()) as ctx:
            entries = await asyncio.to_thread(list_local_files, params.directory, params.pattern)
            ctx.summary = {"count": len(entries)}

    except Exception as e:
        error = handle_store_error(e, "listing directory")
        return format_error_response(error, params.response_format.value)

    data = {
        "directory": params.directory,
        "pattern": params.pattern,
        "count": len(entries),
        "entries": [e.model_dump() for e in entries],
    }
    return format_response(data, params.response_format, LocalFormatter.directory_markdown)


async def handle_download(params: DownloadFileInput, settings: ServerConfig) -> str:
    """Download a URL into a local directory."""
    try:
        async with observe_tool("download_file", "local", params.model_dump()) as ctx:
            result = await asyncio.to_thread(
                download_file,
                params.url,
                params.target_dir,
                params.file_name,
                settings.download_timeout,
            )
            ctx.summary = {"size": result.size}

    except Exception as e:
        error = handle_store_error(e, "downloading file")
        return format_error_response(error, params.response_format.value)

    data = result.model_dump()
    return format_response(data, params.response_format, LocalFormatter.download_markdown)


def register_local_tools(mcp: FastMCP, settings: ServerConfig) -> None:
    """Register local filesystem tools with the MCP server."""

    @mcp.tool(
        name="list_directory_files",
        annotations={
            "title": "List Local Directory",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False
        }
    )
    async def list_directory_files(params: ListLocalFilesInput) -> str:
        """List the files in a local directory.

        Use this to see current file names before planning renames.
        Hidden files are skipped; directories are listed first.

        Args:
            params: ListLocalFilesInput with directory and optional pattern
                   ('*.png', 'icon_*')

        Returns:
            Directory entries with type and size
        """
        return await handle_list_directory(params)

    @mcp.tool(
        name="download_file",
        annotations={
            "title": "Download File from URL",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True
        }
    )
    async def download_file_tool(params: DownloadFileInput, ctx: Context) -> str:
        """Download a file from an HTTP/HTTPS URL into a local directory.

        The directory is created if needed. The file name defaults to the
        last segment of the URL path. Existing files are never overwritten.
        One redirect is followed.

        Args:
            params: DownloadFileInput with url, target_dir and optional file_name

        Returns:
            Saved path and size, or an error
        """
        await ctx.info(f"Downloading {params.url} to {params.target_dir}")
        return await handle_download(params, settings)
