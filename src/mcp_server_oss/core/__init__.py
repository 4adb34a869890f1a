"""
Core infrastructure modules for OSS MCP Server.

This package contains:
- client: store client wrapper and per-configuration registry
- errors: Structured error handling
- formatters: Response formatting utilities
- models: Base Pydantic models
- observability: structlog logging and optional tracing
- patterns: wildcard file-name matching
"""

from .client import ObjectEntry, StoreClient, StoreClientRegistry
from .errors import (
    ClientConstructionError,
    ConfigNotFoundError,
    DestinationExistsError,
    DownloadError,
    DownloadTimeoutError,
    ErrorCategory,
    InvalidPathError,
    LocalFileNotFoundError,
    MutationsDisabledError,
    RemoteOperationError,
    SourceNotFoundError,
    StoreOperationError,
    ToolError,
    format_error_response,
    handle_store_error,
)
from .formatters import JSONFormatter, MarkdownFormatter, ResponseFormat, format_response
from .models import BaseToolInput, HealthStatus, StoreContextInput
from .observability import (
    check_observability_health,
    get_logger,
    init_observability,
    observe_tool,
)
from .patterns import compile_pattern, filter_names, glob_to_regex

__all__ = [
    # Client
    "ObjectEntry",
    "StoreClient",
    "StoreClientRegistry",
    # Errors
    "ErrorCategory",
    "StoreOperationError",
    "ConfigNotFoundError",
    "ClientConstructionError",
    "SourceNotFoundError",
    "DestinationExistsError",
    "LocalFileNotFoundError",
    "DownloadError",
    "DownloadTimeoutError",
    "InvalidPathError",
    "RemoteOperationError",
    "MutationsDisabledError",
    "ToolError",
    "handle_store_error",
    "format_error_response",
    # Formatters
    "ResponseFormat",
    "MarkdownFormatter",
    "JSONFormatter",
    "format_response",
    # Models
    "BaseToolInput",
    "StoreContextInput",
    "HealthStatus",
    # Observability
    "get_logger",
    "init_observability",
    "observe_tool",
    "check_observability_health",
    # Patterns
    "glob_to_regex",
    "compile_pattern",
    "filter_names",
]
