"""
OSS MCP Server - object storage tools for AI agents.

Exposes upload, listing, batch rename and download operations over the
Model Context Protocol.
"""

__version__ = "1.0.0"
