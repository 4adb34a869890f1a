"""
Batch rename for object stores.

Stores have no rename primitive, so each rename is a server-side copy
followed by a delete of the original. Rules run one after another in input
order and every rule yields its own result; a failing rule never stops or
rolls back the others.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mcp_server_oss.config import DEFAULT_CONFIG_NAME
from mcp_server_oss.core.client import StoreClientRegistry
from mcp_server_oss.core.errors import (
    DestinationExistsError,
    ErrorCategory,
    SourceNotFoundError,
    handle_store_error,
)
from mcp_server_oss.core.observability import get_logger

from .keys import directory_prefix, normalize_key
from .models import RenameResult, RenameRule

logger = get_logger("oss-mcp.storage.rename")


@dataclass(frozen=True)
class RenameOutcome:
    """Success flag plus error for a single key rename."""
    success: bool
    error: str | None = None
    category: ErrorCategory | None = None

    @classmethod
    def failed(cls, exc: Exception) -> RenameOutcome:
        error = handle_store_error(exc)
        return cls(success=False, error=error.message, category=error.category)


def rename_object(
    registry: StoreClientRegistry,
    old_key: str,
    new_key: str,
    config_name: str = DEFAULT_CONFIG_NAME,
) -> RenameOutcome:
    """Rename one object by copy + delete.

    The source must exist and the destination must not. Renaming a key onto
    itself succeeds without touching the store. If the copy succeeds and the
    delete fails, both keys exist and the error says so. A retry of the same
    rule then stops at the destination check, so the original must be
    removed by hand.
    """
    old_key = normalize_key(old_key)
    new_key = normalize_key(new_key)

    try:
        client = registry.get_client(config_name)

        if not client.exists(old_key):
            raise SourceNotFoundError(old_key)

        if old_key == new_key:
            logger.debug("Rename onto itself, nothing to do", key=old_key)
            return RenameOutcome(success=True)

        if client.exists(new_key):
            raise DestinationExistsError(new_key)

        client.copy(new_key, old_key)
    except Exception as e:
        return RenameOutcome.failed(e)

    try:
        client.delete(old_key)
    except Exception as e:
        logger.warning(
            "Copied but original not deleted",
            old_key=old_key,
            new_key=new_key,
            error=str(e)
        )
        return RenameOutcome(
            success=False,
            error=(
                f"Copied to {new_key} but failed to delete original {old_key}: "
                f"{handle_store_error(e).message}"
            ),
            category=ErrorCategory.REMOTE_OPERATION,
        )

    logger.info("Renamed object", old_key=old_key, new_key=new_key, config_name=config_name)
    return RenameOutcome(success=True)


def preview_rename(rules: Iterable[RenameRule]) -> list[RenameResult]:
    """Dry-run results: every rule reported as it would be attempted."""
    return [
        RenameResult(old_name=rule.old_name, new_name=rule.new_name, success=True)
        for rule in rules
    ]


def batch_rename(
    registry: StoreClientRegistry,
    rules: Iterable[RenameRule],
    directory: str = "",
    config_name: str = DEFAULT_CONFIG_NAME,
    dry_run: bool = False,
) -> list[RenameResult]:
    """Rename every rule inside ``directory``; one result per rule, in order.

    With ``dry_run`` no client is resolved and nothing is sent to the store.
    """
    if dry_run:
        return preview_rename(rules)

    prefix = directory_prefix(directory)
    results: list[RenameResult] = []

    for rule in rules:
        outcome = rename_object(
            registry,
            f"{prefix}{rule.old_name}",
            f"{prefix}{rule.new_name}",
            config_name,
        )
        results.append(
            RenameResult(
                old_name=rule.old_name,
                new_name=rule.new_name,
                success=outcome.success,
                error=outcome.error,
                error_category=outcome.category,
            )
        )

    return results
