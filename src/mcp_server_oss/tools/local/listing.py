from __future__ import annotations

from pathlib import Path

from mcp_server_oss.core.errors import InvalidPathError, LocalFileNotFoundError
from mcp_server_oss.core.patterns import compile_pattern

from .models import LocalFileEntry


def list_local_files(directory: str, pattern: str | None = None) -> list[LocalFileEntry]:
    """
    List a local directory for choosing rename targets.

    Hidden entries are skipped. Directories come first, then files, each
    group ordered by name.

    Raises:
        LocalFileNotFoundError: the directory does not exist
        InvalidPathError: the path is not a directory
    """
    root = Path(directory).expanduser()
    if not root.exists():
        raise LocalFileNotFoundError(directory, what="Directory")
    if not root.is_dir():
        raise InvalidPathError(f"Path is not a directory: {directory}", path=directory)

    matches = compile_pattern(pattern)
    entries = []
    for child in root.iterdir():
        if child.name.startswith(".") or not matches(child.name):
            continue
        is_dir = child.is_dir()
        entries.append(
            LocalFileEntry(
                name=child.name,
                is_directory=is_dir,
                size=child.stat().st_size,
            )
        )

    entries.sort(key=lambda e: (not e.is_directory, e.name.lower(), e.name))
    return entries
