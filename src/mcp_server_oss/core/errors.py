"""
Error handling for object-store MCP operations.

Provides an exception hierarchy for the operations themselves and structured
tool errors with actionable suggestions for users.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import requests
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError


class ErrorCategory(str, Enum):
    """Failure kinds reported to MCP clients."""
    CONFIG_NOT_FOUND = "config_not_found"
    CLIENT_UNAVAILABLE = "client_unavailable"
    SOURCE_NOT_FOUND = "source_not_found"
    DESTINATION_EXISTS = "destination_exists"
    FILE_NOT_FOUND = "file_not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    NETWORK = "network"
    TIMEOUT = "timeout"
    REMOTE_OPERATION = "remote_operation"
    UNKNOWN = "unknown"


SUGGESTIONS: dict[ErrorCategory, str] = {
    ErrorCategory.CONFIG_NOT_FOUND: "Call list_oss_configs to see the configured names.",
    ErrorCategory.CLIENT_UNAVAILABLE: "Check the region, endpoint and credentials of this configuration.",
    ErrorCategory.SOURCE_NOT_FOUND: "List the directory with list_oss_files and check the file name.",
    ErrorCategory.DESTINATION_EXISTS: "Choose a different target name or remove the existing file first.",
    ErrorCategory.FILE_NOT_FOUND: "Check the local path exists and is readable by the server.",
    ErrorCategory.AUTHENTICATION: "Verify the access key id and secret are valid.",
    ErrorCategory.AUTHORIZATION: "Ensure the access key has permission for this bucket and operation.",
    ErrorCategory.VALIDATION: "Check the input parameters match the expected format.",
    ErrorCategory.NETWORK: "Check network connectivity and that the endpoint or URL is reachable.",
    ErrorCategory.TIMEOUT: "The operation took too long. Retry later or with a smaller file.",
    ErrorCategory.REMOTE_OPERATION: "The store rejected the operation. Check the details and retry.",
    ErrorCategory.UNKNOWN: "Check the error details. If the issue persists, report it.",
}


class StoreOperationError(Exception):
    """Base class for failures raised by store and file operations."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigNotFoundError(StoreOperationError):
    category = ErrorCategory.CONFIG_NOT_FOUND

    def __init__(self, config_name: str) -> None:
        super().__init__(f"Store config not found: {config_name}", config_name=config_name)
        self.config_name = config_name


class ClientConstructionError(StoreOperationError):
    category = ErrorCategory.CLIENT_UNAVAILABLE

    def __init__(self, config_name: str, cause: Exception) -> None:
        super().__init__(
            f"Failed to create store client for '{config_name}': {cause}",
            config_name=config_name,
        )
        self.config_name = config_name


class SourceNotFoundError(StoreOperationError):
    category = ErrorCategory.SOURCE_NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(f"Source file does not exist: {key}", key=key)


class DestinationExistsError(StoreOperationError):
    category = ErrorCategory.DESTINATION_EXISTS

    def __init__(self, key: str) -> None:
        super().__init__(f"Target file already exists: {key}", key=key)


class LocalFileNotFoundError(StoreOperationError):
    category = ErrorCategory.FILE_NOT_FOUND

    def __init__(self, path: str, what: str = "File") -> None:
        super().__init__(f"{what} not found: {path}", path=path)


class InvalidPathError(StoreOperationError):
    category = ErrorCategory.VALIDATION


class DownloadError(StoreOperationError):
    category = ErrorCategory.NETWORK


class DownloadTimeoutError(DownloadError):
    category = ErrorCategory.TIMEOUT


class RemoteOperationError(StoreOperationError):
    category = ErrorCategory.REMOTE_OPERATION


class MutationsDisabledError(StoreOperationError):
    category = ErrorCategory.AUTHORIZATION

    def __init__(self) -> None:
        super().__init__("Mutations not allowed. Set ALLOW_MUTATIONS=true to enable.")


@dataclass
class ToolError:
    """What a tool returns instead of a result when its operation failed."""

    category: ErrorCategory
    message: str
    suggestion: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "category": self.category.value,
            "suggestion": self.suggestion,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str, ensure_ascii=False)

    def to_markdown(self) -> str:
        lines = [
            f"## ❌ Error: {self.category.value}",
            "",
            self.message,
            "",
            f"> {self.suggestion}",
        ]
        if self.details:
            lines.append("")
            lines.extend(f"- **{key}:** {value}" for key, value in self.details.items())
        return "\n".join(lines) + "\n"


# Error mapping table: status_code -> (category, base_message)
ERROR_MAP: dict[int, tuple[ErrorCategory, str]] = {
    400: (ErrorCategory.VALIDATION, "Invalid request parameters"),
    401: (ErrorCategory.AUTHENTICATION, "Authentication failed"),
    403: (ErrorCategory.AUTHORIZATION, "Permission denied"),
    404: (ErrorCategory.SOURCE_NOT_FOUND, "Object or bucket not found"),
    409: (ErrorCategory.REMOTE_OPERATION, "Conflicting operation"),
    429: (ErrorCategory.REMOTE_OPERATION, "Rate limit exceeded"),
    500: (ErrorCategory.REMOTE_OPERATION, "Store service error"),
    503: (ErrorCategory.REMOTE_OPERATION, "Store service temporarily unavailable"),
}


def _with_context(message: str, context: str | None) -> str:
    return f"{message} while {context}" if context else message


def describe_client_error(e: ClientError) -> tuple[int | None, str, str]:
    """Return (http status, error code, message) from a botocore ClientError."""
    response = getattr(e, "response", None) or {}
    error = response.get("Error", {})
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status, str(error.get("Code", "")), str(error.get("Message", "") or e)


def handle_store_error(e: Exception, context: str | None = None) -> ToolError:
    """Map an exception from a store, file or HTTP operation to a ToolError.

    ``context`` names the operation (e.g. "renaming files") and is folded
    into the message.
    """
    if isinstance(e, StoreOperationError):
        return ToolError(
            category=e.category,
            message=f"{e.message} (while {context})" if context else e.message,
            suggestion=SUGGESTIONS[e.category],
            details=dict(e.details),
        )

    if isinstance(e, ClientError):
        status, code, detail = describe_client_error(e)
        category, base_message = ERROR_MAP.get(
            status or 0,
            (ErrorCategory.REMOTE_OPERATION, f"Unexpected store error (status {status})")
        )
        return ToolError(
            category=category,
            message=f"{_with_context(base_message, context)}: {detail}",
            suggestion=SUGGESTIONS[category],
            details={"status": status, "code": code},
        )

    if isinstance(e, EndpointConnectionError):
        return ToolError(
            category=ErrorCategory.NETWORK,
            message=f"{_with_context('Cannot reach store endpoint', context)}: {e}",
            suggestion=SUGGESTIONS[ErrorCategory.NETWORK],
        )

    if isinstance(e, requests.Timeout):
        return ToolError(
            category=ErrorCategory.TIMEOUT,
            message=_with_context("Request timeout", context),
            suggestion=SUGGESTIONS[ErrorCategory.TIMEOUT],
        )

    if isinstance(e, requests.RequestException):
        return ToolError(
            category=ErrorCategory.NETWORK,
            message=f"{_with_context('Network error', context)}: {e}",
            suggestion=SUGGESTIONS[ErrorCategory.NETWORK],
        )

    if isinstance(e, BotoCoreError):
        return ToolError(
            category=ErrorCategory.REMOTE_OPERATION,
            message=f"{_with_context('Store SDK error', context)}: {e}",
            suggestion=SUGGESTIONS[ErrorCategory.REMOTE_OPERATION],
        )

    if isinstance(e, FileNotFoundError):
        return ToolError(
            category=ErrorCategory.FILE_NOT_FOUND,
            message=f"{_with_context('File not found', context)}: {e}",
            suggestion=SUGGESTIONS[ErrorCategory.FILE_NOT_FOUND],
        )

    return ToolError(
        category=ErrorCategory.UNKNOWN,
        message=f"{_with_context('Unexpected error', context)}: {e}",
        suggestion=SUGGESTIONS[ErrorCategory.UNKNOWN],
    )


def format_error_response(error: ToolError | str, response_format: str = "markdown") -> str:
    """Render an error as the tool response; a bare string is a validation error."""
    if isinstance(error, str):
        error = ToolError(
            category=ErrorCategory.VALIDATION,
            message=error,
            suggestion=SUGGESTIONS[ErrorCategory.VALIDATION],
        )
    if response_format.lower() == "json":
        return error.to_json()
    return error.to_markdown()
