"""
Object-store client wrapper and per-configuration client registry.

Provides:
- StoreClient: a boto3 S3 client bound to one bucket, speaking to any
  S3-compatible endpoint (Aliyun OSS, AWS S3, MinIO)
- StoreClientRegistry: lazily creates and caches one StoreClient per
  configuration name for the registry's lifetime
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import quote, urlsplit

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from mcp_server_oss.config import StoreConfig

from .errors import ClientConstructionError, ConfigNotFoundError
from .observability import get_logger

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class ObjectEntry:
    """One object returned by a listing."""
    key: str
    size: int
    last_modified: datetime | None = None


class StoreClient:
    """Authenticated handle for a single bucket.

    Example:
        client = StoreClient.from_config(config)
        if client.exists("images/a.png"):
            client.copy("images/b.png", "images/a.png")
    """

    def __init__(self, s3_client: Any, bucket: str, endpoint_url: str) -> None:
        self._s3 = s3_client
        self.bucket = bucket
        self.endpoint_url = endpoint_url

    @classmethod
    def from_config(cls, config: StoreConfig) -> StoreClient:
        """Build a client from a StoreConfig (virtual-hosted addressing, SigV4)."""
        s3 = boto3.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.access_key_secret,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "virtual"},
                retries={"max_attempts": 3, "mode": "standard"},
            ),
        )
        return cls(s3, config.bucket, config.endpoint_url)

    def exists(self, key: str) -> bool:
        """Probe a key with a HEAD request.

        Raises:
            botocore.exceptions.ClientError: for anything but a missing key
        """
        try:
            self._s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            error = e.response.get("Error", {})
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if status == 404 or str(error.get("Code")) in _MISSING_CODES:
                return False
            raise
        return True

    def copy(self, destination: str, source: str) -> None:
        """Server-side copy of ``source`` onto ``destination``."""
        self._s3.copy_object(
            Bucket=self.bucket,
            Key=destination,
            CopySource={"Bucket": self.bucket, "Key": source},
        )

    def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key succeeds."""
        self._s3.delete_object(Bucket=self.bucket, Key=key)

    def list_objects(self, prefix: str = "", delimiter: str | None = "/") -> list[ObjectEntry]:
        """List objects directly under ``prefix`` (one level when delimited)."""
        kwargs: dict[str, Any] = {"Bucket": self.bucket, "Prefix": prefix}
        if delimiter:
            kwargs["Delimiter"] = delimiter

        entries: list[ObjectEntry] = []
        paginator = self._s3.get_paginator("list_objects_v2")
        for page in paginator.paginate(**kwargs):
            for obj in page.get("Contents", []):
                entries.append(
                    ObjectEntry(
                        key=obj["Key"],
                        size=obj.get("Size", 0),
                        last_modified=obj.get("LastModified"),
                    )
                )
        return entries

    def put_file(self, key: str, file_path: str) -> str:
        """Upload a local file and return its object URL."""
        self._s3.upload_file(file_path, self.bucket, key)
        return self.object_url(key)

    def object_url(self, key: str) -> str:
        """Virtual-hosted URL of an object: scheme://bucket.host/key."""
        parts = urlsplit(self.endpoint_url)
        return f"{parts.scheme}://{self.bucket}.{parts.netloc}/{quote(key)}"


ClientFactory = Callable[[StoreConfig], StoreClient]


class StoreClientRegistry:
    """Resolves configuration names to cached store clients.

    One client is created per configuration name on first use and reused
    for every later call. Entries are never evicted.
    """

    def __init__(
        self,
        configs: Mapping[str, StoreConfig],
        client_factory: ClientFactory = StoreClient.from_config,
    ) -> None:
        self._configs = dict(configs)
        self._factory = client_factory
        self._clients: dict[str, StoreClient] = {}
        self._lock = threading.Lock()
        self._logger = get_logger("oss-mcp.client")

    def config_names(self) -> list[str]:
        """Configured names, in the order they were loaded."""
        return list(self._configs)

    def has_config(self, config_name: str) -> bool:
        return config_name in self._configs

    def get_config(self, config_name: str) -> StoreConfig:
        try:
            return self._configs[config_name]
        except KeyError:
            raise ConfigNotFoundError(config_name) from None

    def cached_names(self) -> list[str]:
        """Names with an already constructed client."""
        with self._lock:
            return list(self._clients)

    def get_client(self, config_name: str) -> StoreClient:
        """Return the cached client for ``config_name``, creating it once.

        Raises:
            ConfigNotFoundError: no configuration with this name
            ClientConstructionError: the SDK refused to build the client
        """
        with self._lock:
            client = self._clients.get(config_name)
            if client is not None:
                return client

            config = self.get_config(config_name)
            try:
                client = self._factory(config)
            except Exception as e:
                self._logger.error(
                    "Failed to create store client",
                    config_name=config_name,
                    error=str(e)
                )
                raise ClientConstructionError(config_name, e) from e

            self._clients[config_name] = client
            self._logger.info(
                "Store client created",
                config_name=config_name,
                bucket=config.bucket,
                region=config.region
            )
            return client

    def clear(self) -> None:
        """Drop every cached client."""
        with self._lock:
            self._clients.clear()
