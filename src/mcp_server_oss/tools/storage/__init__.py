"""
Object-store domain tools.

Provides upload, configuration listing, directory listing and batch rename
(copy + delete with dry-run preview).
"""
from __future__ import annotations

from .formatters import StorageFormatter
from .listing import list_store_files
from .models import (
    BatchRenameInput,
    ListConfigsInput,
    ListStoreFilesInput,
    RenameResult,
    RenameRule,
    StoreFileEntry,
    UploadFileInput,
    UploadResult,
)
from .rename import RenameOutcome, batch_rename, preview_rename, rename_object
from .tools import register_storage_tools
from .upload import upload_file

__all__ = [
    # Registration function
    "register_storage_tools",

    # Operations
    "batch_rename",
    "preview_rename",
    "rename_object",
    "list_store_files",
    "upload_file",

    # Input models
    "BatchRenameInput",
    "ListConfigsInput",
    "ListStoreFilesInput",
    "UploadFileInput",
    "RenameRule",

    # Output models
    "RenameOutcome",
    "RenameResult",
    "StoreFileEntry",
    "UploadResult",

    # Formatter
    "StorageFormatter",
]
