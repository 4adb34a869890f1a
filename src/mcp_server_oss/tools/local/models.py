"""
Pydantic models for local filesystem tools.
"""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from mcp_server_oss.core.models import BaseToolInput


class ListLocalFilesInput(BaseToolInput):
    """Input for listing a local directory."""

    directory: str = Field(..., min_length=1, description="Local directory to list")
    pattern: str | None = Field(
        default=None,
        description="Wildcard filter, e.g. '*.png' or 'icon_*'"
    )


class DownloadFileInput(BaseToolInput):
    """Input for downloading a URL into a local directory."""

    url: str = Field(..., description="HTTP or HTTPS URL to download")
    target_dir: str = Field(..., min_length=1, description="Local directory to save into")
    file_name: str | None = Field(
        default=None,
        description="File name to save as (defaults to the last URL path segment)"
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("Only http:// and https:// URLs are supported")
        return v


class LocalFileEntry(BaseModel):
    """A local directory entry."""
    name: str
    is_directory: bool
    size: int


class DownloadResult(BaseModel):
    """A completed download."""
    url: str
    final_url: str
    path: str
    size: int
