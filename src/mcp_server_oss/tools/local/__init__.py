"""
Local filesystem tools.

Provides directory listing (to pick rename targets) and HTTP download.
"""
from __future__ import annotations

from .download import download_file, file_name_from_url
from .formatters import LocalFormatter
from .listing import list_local_files
from .models import DownloadFileInput, DownloadResult, ListLocalFilesInput, LocalFileEntry
from .tools import register_local_tools

__all__ = [
    "register_local_tools",
    "download_file",
    "file_name_from_url",
    "list_local_files",
    "DownloadFileInput",
    "ListLocalFilesInput",
    "DownloadResult",
    "LocalFileEntry",
    "LocalFormatter",
]
