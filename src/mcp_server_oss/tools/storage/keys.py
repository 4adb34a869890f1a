"""Object key helpers. Keys are flat and '/'-delimited, never filesystem paths."""
from __future__ import annotations


def normalize_key(key: str) -> str:
    """Strip leading separators from a key."""
    return key.lstrip("/")


def directory_prefix(directory: str | None) -> str:
    """Turn a directory into a listing prefix: 'a/b/' for '/a/b/', '' for root."""
    normalized = (directory or "").strip("/")
    return f"{normalized}/" if normalized else ""


def join_key(directory: str | None, name: str) -> str:
    """Compose ``directory/name`` as a normalized key."""
    return directory_prefix(directory) + normalize_key(name)
