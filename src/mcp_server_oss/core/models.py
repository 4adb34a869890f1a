"""
Shared pydantic models: the base every tool input extends, and the health
report returned by oss_ping.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .formatters import ResponseFormat

__all__ = [
    "ResponseFormat",
    "BaseToolInput",
    "StoreContextInput",
    "HealthStatus",
]


class BaseToolInput(BaseModel):
    """Strict input model: unknown fields are rejected, strings are stripped."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='forbid',
    )

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable"
    )


class StoreContextInput(BaseToolInput):
    """Base model for tools that talk to a configured object store."""

    config_name: str | None = Field(
        default=None,
        description="Store configuration name (defaults to the server's default config)"
    )


class HealthStatus(BaseModel):
    """Server health status."""
    healthy: bool = Field(..., description="Overall health status")
    server_name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    configs: list[str] = Field(default_factory=list, description="Configured store names")
    cached_clients: list[str] = Field(
        default_factory=list,
        description="Store configurations with a connected client"
    )
    mutations_allowed: bool = Field(default=True, description="Upload and rename enabled")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional details")
