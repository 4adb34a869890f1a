from __future__ import annotations

from mcp_server_oss.config import DEFAULT_CONFIG_NAME
from mcp_server_oss.core.client import StoreClientRegistry
from mcp_server_oss.core.patterns import compile_pattern

from .keys import directory_prefix
from .models import StoreFileEntry


def list_store_files(
    registry: StoreClientRegistry,
    directory: str,
    pattern: str | None = None,
    config_name: str = DEFAULT_CONFIG_NAME,
) -> list[StoreFileEntry]:
    """
    List the files directly under a store directory.

    Sub-directories are skipped, names are relative to the directory and
    the result is sorted by name.

    Args:
        registry: Client registry to resolve ``config_name`` with
        directory: Directory in the bucket ('' for the root)
        pattern: Optional wildcard filter ('*.png', 'icon_?.svg')
        config_name: Store configuration to use
    """
    prefix = directory_prefix(directory)
    client = registry.get_client(config_name)
    matches = compile_pattern(pattern)

    files = []
    for obj in client.list_objects(prefix, delimiter="/"):
        name = obj.key[len(prefix):]
        # Empty name is the directory placeholder object itself
        if not name or name.endswith("/"):
            continue
        if not matches(name):
            continue
        files.append(StoreFileEntry(name=name, size=obj.size, last_modified=obj.last_modified))

    files.sort(key=lambda entry: entry.name)
    return files
