from __future__ import annotations

from pathlib import Path

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from mcp_server_oss.config import DEFAULT_CONFIG_NAME
from mcp_server_oss.core.client import StoreClientRegistry
from mcp_server_oss.core.errors import LocalFileNotFoundError, RemoteOperationError

from .keys import join_key
from .models import UploadResult


def upload_file(
    registry: StoreClientRegistry,
    file_path: str,
    target_dir: str = "",
    file_name: str | None = None,
    config_name: str = DEFAULT_CONFIG_NAME,
) -> UploadResult:
    """Upload a local file to ``target_dir/file_name`` and return its URL.

    Raises:
        LocalFileNotFoundError: the local path is missing or not a file
        ConfigNotFoundError, ClientConstructionError: no usable client
        RemoteOperationError: the store rejected the upload
    """
    path = Path(file_path).expanduser()
    if not path.is_file():
        raise LocalFileNotFoundError(file_path)

    key = join_key(target_dir, file_name or path.name)
    client = registry.get_client(config_name)

    try:
        url = client.put_file(key, str(path))
    except (ClientError, BotoCoreError, Boto3Error) as e:
        raise RemoteOperationError(f"Upload failed: {e}", key=key) from e

    return UploadResult(success=True, url=url, key=key, config_name=config_name)
