"""
Tool domains for OSS MCP Server.

- storage: object-store tools (upload, configs, listing, batch rename)
- local: local filesystem tools (directory listing, HTTP download)
"""
from .local import register_local_tools
from .storage import register_storage_tools

__all__ = ["register_storage_tools", "register_local_tools"]
