"""
Object-store domain tool implementations.

Uses FastMCP patterns with Pydantic models and proper error handling.
Blocking SDK calls run in a worker thread.
"""
from __future__ import annotations

import asyncio

from fastmcp import Context, FastMCP

from mcp_server_oss.config import ServerConfig
from mcp_server_oss.core.client import StoreClientRegistry
from mcp_server_oss.core.errors import (
    MutationsDisabledError,
    format_error_response,
    handle_store_error,
)
from mcp_server_oss.core.formatters import format_response
from mcp_server_oss.core.observability import observe_tool

from .formatters import StorageFormatter
from .listing import list_store_files
from .models import (
    BatchRenameInput,
    ListConfigsInput,
    ListStoreFilesInput,
    UploadFileInput,
)
from .rename import batch_rename
from .upload import upload_file


async def handle_upload(
    params: UploadFileInput,
    registry: StoreClientRegistry,
    settings: ServerConfig,
) -> str:
    """Upload a local file and report the object URL."""
    response_format = params.response_format.value
    config_name = params.config_name or settings.default_config

    try:
        if not settings.allow_mutations:
            raise MutationsDisabledError()

        async with observe_tool("upload_to_oss", "storage", params.model_dump()) as ctx:
            result = await asyncio.to_thread(
                upload_file,
                registry,
                params.file_path,
                params.target_dir,
                params.file_name,
                config_name,
            )
            ctx.summary = {"key": result.key}

    except Exception as e:
        error = handle_store_error(e, "uploading file")
        error.details.setdefault("config_name", config_name)
        return format_error_response(error, response_format)

    data = result.model_dump()
    return format_response(data, params.response_format, StorageFormatter.upload_markdown)


async def handle_list_configs(
    params: ListConfigsInput,
    registry: StoreClientRegistry,
    settings: ServerConfig,
) -> str:
    """List configured store names with their bucket and region."""
    configs = []
    for name in registry.config_names():
        store = registry.get_config(name)
        configs.append({
            "name": name,
            "bucket": store.bucket,
            "region": store.region,
            "default": name == settings.default_config,
        })

    return format_response(
        {"configs": configs},
        params.response_format,
        StorageFormatter.configs_markdown,
    )


async def handle_list_files(
    params: ListStoreFilesInput,
    registry: StoreClientRegistry,
    settings: ServerConfig,
) -> str:
    """List files directly under a store directory."""
    config_name = params.config_name or settings.default_config

    try:
        async with observe_tool("list_oss_files", "storage", params.model_dump()) as ctx:
            files = await asyncio.to_thread(
                list_store_files,
                registry,
                params.directory,
                params.pattern,
                config_name,
            )
            ctx.summary = {"count": len(files)}

    except Exception as e:
        error = handle_store_error(e, "listing store files")
        return format_error_response(error, params.response_format.value)

    data = {
        "config_name": config_name,
        "directory": params.directory,
        "pattern": params.pattern,
        "count": len(files),
        "files": [f.model_dump() for f in files],
    }
    return format_response(data, params.response_format, StorageFormatter.files_markdown)


async def handle_batch_rename(
    params: BatchRenameInput,
    registry: StoreClientRegistry,
    settings: ServerConfig,
) -> str:
    """Rename store files by copy + delete, or preview the renames."""
    config_name = params.config_name or settings.default_config

    try:
        if not params.dry_run and not settings.allow_mutations:
            raise MutationsDisabledError()

        async with observe_tool("batch_rename_files", "storage", params.model_dump()) as ctx:
            results = await asyncio.to_thread(
                batch_rename,
                registry,
                params.rename_rules,
                params.directory,
                config_name,
                params.dry_run,
            )
            ctx.summary = {
                "rules": len(results),
                "failed": sum(1 for r in results if not r.success),
                "dry_run": params.dry_run,
            }

    except Exception as e:
        error = handle_store_error(e, "renaming files")
        return format_error_response(error, params.response_format.value)

    succeeded = sum(1 for r in results if r.success)
    data = {
        "config_name": config_name,
        "directory": params.directory,
        "dry_run": params.dry_run,
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
        "results": [r.model_dump() for r in results],
    }
    return format_response(data, params.response_format, StorageFormatter.rename_markdown)


def register_storage_tools(
    mcp: FastMCP,
    registry: StoreClientRegistry,
    settings: ServerConfig,
) -> None:
    """Register all object-store tools with the MCP server."""
    config_hint = ", ".join(registry.config_names()) or "none"

    @mcp.tool(
        name="upload_to_oss",
        annotations={
            "title": "Upload File to Object Storage",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True
        }
    )
    async def upload_to_oss(params: UploadFileInput, ctx: Context) -> str:
        """Upload a local file to the object store.

        The object key is target_dir/file_name; file_name defaults to the
        local file name. Requires ALLOW_MUTATIONS to be enabled.

        Args:
            params: UploadFileInput with file_path, target_dir, file_name,
                   config_name and response_format

        Returns:
            Object key and URL, or an error

        Example:
            {"file_path": "/tmp/logo.png", "target_dir": "images/brand"}
        """
        await ctx.info(f"Uploading {params.file_path} to {params.target_dir or '(root)'}")
        return await handle_upload(params, registry, settings)

    @mcp.tool(
        name="list_oss_configs",
        annotations={
            "title": "List Store Configurations",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False
        }
    )
    async def list_oss_configs(params: ListConfigsInput) -> str:
        """List the available object-store configurations.

        Use a returned name as config_name in the other storage tools.

        Returns:
            Configuration names with bucket and region
        """
        return await handle_list_configs(params, registry, settings)

    @mcp.tool(
        name="list_oss_files",
        description=(
            "List the files directly under a directory of the object store, "
            "optionally filtered by a wildcard pattern such as '*.png'. "
            f"Available configs: {config_hint}."
        ),
        annotations={
            "title": "List Store Files",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True
        }
    )
    async def list_oss_files(params: ListStoreFilesInput, ctx: Context) -> str:
        await ctx.info(f"Listing {params.directory or '(root)'}")
        return await handle_list_files(params, registry, settings)

    @mcp.tool(
        name="batch_rename_files",
        description=(
            "Rename one or more files in an object-store directory. Each rename "
            "is a copy followed by a delete of the original. An existing target "
            "is never overwritten. Set dry_run to preview without changes. "
            f"Available configs: {config_hint}."
        ),
        annotations={
            "title": "Batch Rename Store Files",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": False,
            "openWorldHint": True
        }
    )
    async def batch_rename_files(params: BatchRenameInput, ctx: Context) -> str:
        await ctx.info(
            f"Renaming {len(params.rename_rules)} file(s) in "
            f"{params.directory or '(root)'} (dry_run={params.dry_run})"
        )
        return await handle_batch_rename(params, registry, settings)
