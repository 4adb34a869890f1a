"""
Pydantic models for object-store domain tools.

All models use Pydantic v2 with ConfigDict for validation.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mcp_server_oss.core.errors import ErrorCategory
from mcp_server_oss.core.models import BaseToolInput, StoreContextInput


# =============================================================================
# Input Models
# =============================================================================

class RenameRule(BaseModel):
    """One rename inside a directory: old file name -> new file name."""
    model_config = ConfigDict(extra='forbid')

    old_name: str = Field(..., min_length=1, description="Current file name")
    new_name: str = Field(..., min_length=1, description="New file name")


class BatchRenameInput(StoreContextInput):
    """Input for renaming store files (copy + delete)."""

    directory: str = Field(
        ...,
        description="Directory in the bucket (e.g. 'images/icons'; '' for the root)"
    )
    rename_rules: list[RenameRule] = Field(
        ...,
        description="Rename rules, each with old_name and new_name"
    )
    dry_run: bool = Field(
        default=False,
        description="Preview only: report the renames without touching the store"
    )


class ListStoreFilesInput(StoreContextInput):
    """Input for listing files in a store directory."""

    directory: str = Field(
        ...,
        description="Directory in the bucket ('' for the root)"
    )
    pattern: str | None = Field(
        default=None,
        description="Wildcard filter, e.g. '*.png' or 'icon_?.svg'"
    )


class UploadFileInput(StoreContextInput):
    """Input for uploading a local file."""

    file_path: str = Field(..., min_length=1, description="Local file to upload")
    target_dir: str = Field(default="", description="Target directory in the bucket")
    file_name: str | None = Field(
        default=None,
        description="Object name (defaults to the local file name)"
    )


class ListConfigsInput(BaseToolInput):
    """Input for listing store configurations."""


# =============================================================================
# Output Models
# =============================================================================

class RenameResult(BaseModel):
    """Outcome of one rename rule."""
    old_name: str
    new_name: str
    success: bool
    error: str | None = None
    error_category: ErrorCategory | None = None


class StoreFileEntry(BaseModel):
    """A file directly under a store directory."""
    name: str
    size: int
    last_modified: datetime | None = None


class UploadResult(BaseModel):
    """Result of an upload."""
    success: bool
    url: str | None = None
    key: str | None = None
    error: str | None = None
    config_name: str
