"""
Pytest configuration and shared fixtures for OSS MCP Server tests.
"""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any

import pytest

from mcp_server_oss.config import StoreConfig
from mcp_server_oss.core.client import ObjectEntry, StoreClientRegistry

# Ensure test environment never picks up real credentials
os.environ.setdefault("OTEL_SDK_DISABLED", "true")


class FakeStoreClient:
    """In-memory stand-in for StoreClient that records every call."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects: dict[str, bytes] = dict(objects or {})
        self.calls: list[tuple[str, ...]] = []
        self.fail_on: dict[str, Exception] = {}
        self.bucket = "test-bucket"

    def _record(self, op: str, *args: str) -> None:
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise self.fail_on[op]

    def exists(self, key: str) -> bool:
        self._record("exists", key)
        return key in self.objects

    def copy(self, destination: str, source: str) -> None:
        self._record("copy", destination, source)
        self.objects[destination] = self.objects[source]

    def delete(self, key: str) -> None:
        self._record("delete", key)
        self.objects.pop(key, None)

    def list_objects(self, prefix: str = "", delimiter: str | None = "/") -> list[ObjectEntry]:
        self._record("list_objects", prefix)
        entries = []
        for key, body in self.objects.items():
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest.rstrip(delimiter):
                continue
            entries.append(
                ObjectEntry(
                    key=key,
                    size=len(body),
                    last_modified=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
                )
            )
        # Deliberately unsorted, like some stores return
        return list(reversed(entries))

    def put_file(self, key: str, file_path: str) -> str:
        self._record("put_file", key, file_path)
        with open(file_path, "rb") as fh:
            self.objects[key] = fh.read()
        return self.object_url(key)

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.oss-cn-hangzhou.aliyuncs.com/{key}"

    def mutating_calls(self) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] in ("copy", "delete", "put_file")]


@pytest.fixture
def store_config() -> StoreConfig:
    """Store configuration with dummy credentials."""
    return StoreConfig(
        region="oss-cn-hangzhou",
        access_key_id="LTAI-test-key",
        access_key_secret="test-secret",
        bucket="test-bucket",
        endpoint="oss-cn-hangzhou.aliyuncs.com",
    )


@pytest.fixture
def fake_client() -> FakeStoreClient:
    """Fake store pre-populated with a small image directory."""
    return FakeStoreClient({
        "images/a.png": b"png-a",
        "images/b.jpg": b"jpeg-b",
        "images/a.json": b"{}",
        "images/icons/x.svg": b"<svg/>",
        "images/": b"",
        "readme.txt": b"hello",
    })


@pytest.fixture
def registry(store_config: StoreConfig, fake_client: FakeStoreClient) -> StoreClientRegistry:
    """Registry whose 'default' config resolves to the fake client."""
    return StoreClientRegistry(
        {"default": store_config},
        client_factory=lambda config: fake_client,
    )


@pytest.fixture
def store_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Environment with one flat config and one JSON config."""
    env = {
        "OSS_REGION": "oss-cn-hangzhou",
        "OSS_ACCESS_KEY_ID": "LTAI-default",
        "OSS_ACCESS_KEY_SECRET": "default-secret",
        "OSS_BUCKET": "default-bucket",
        "OSS_CONFIGS": (
            '{"backup": {"region": "oss-cn-beijing", "accessKeyId": "LTAI-b", '
            '"accessKeySecret": "b-secret", "bucket": "backup-bucket"}}'
        ),
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


# Markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (require store access)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
