"""
Tests for the object-store tool handlers.
"""
from __future__ import annotations

import asyncio
import json

import pytest

from mcp_server_oss.config import ServerConfig
from mcp_server_oss.tools.storage.models import (
    BatchRenameInput,
    ListConfigsInput,
    ListStoreFilesInput,
    UploadFileInput,
)
from mcp_server_oss.tools.storage.tools import (
    handle_batch_rename,
    handle_list_configs,
    handle_list_files,
    handle_upload,
)


@pytest.fixture
def settings():
    return ServerConfig()


@pytest.fixture
def read_only():
    return ServerConfig(allow_mutations=False)


def _rename_input(**overrides):
    values = {
        "directory": "images",
        "rename_rules": [{"old_name": "a.png", "new_name": "c.png"}],
        "response_format": "json",
    }
    values.update(overrides)
    return BatchRenameInput.model_validate(values)


class TestBatchRenameTool:
    """Tests for handle_batch_rename."""

    def test_json_result(self, registry, fake_client, settings):
        data = json.loads(asyncio.run(handle_batch_rename(_rename_input(), registry, settings)))

        assert data["succeeded"] == 1
        assert data["failed"] == 0
        assert data["results"][0]["old_name"] == "a.png"
        assert data["config_name"] == "default"
        assert "images/c.png" in fake_client.objects

    def test_failed_rule_reported(self, registry, settings):
        params = _rename_input(rename_rules=[{"old_name": "a.png", "new_name": "b.jpg"}])
        data = json.loads(asyncio.run(handle_batch_rename(params, registry, settings)))

        assert data["failed"] == 1
        assert data["results"][0]["error_category"] == "destination_exists"

    def test_markdown_result(self, registry, settings):
        params = _rename_input(response_format="markdown")
        md = asyncio.run(handle_batch_rename(params, registry, settings))

        assert "Batch Rename Complete" in md
        assert "a.png → c.png" in md

    def test_dry_run_allowed_when_read_only(self, registry, fake_client, read_only):
        params = _rename_input(dry_run=True, response_format="markdown")
        md = asyncio.run(handle_batch_rename(params, registry, read_only))

        assert "dry run" in md
        assert fake_client.calls == []

    def test_mutations_disabled(self, registry, fake_client, read_only):
        data = json.loads(asyncio.run(handle_batch_rename(_rename_input(), registry, read_only)))

        assert data["success"] is False
        assert data["category"] == "authorization"
        assert fake_client.calls == []


class TestListFilesTool:
    """Tests for handle_list_files."""

    def test_json_listing(self, registry, settings):
        params = ListStoreFilesInput(directory="images", pattern="*.png", response_format="json")
        data = json.loads(asyncio.run(handle_list_files(params, registry, settings)))

        assert data["count"] == 1
        assert data["files"][0]["name"] == "a.png"
        assert data["files"][0]["last_modified"].startswith("2024-01-15")

    def test_markdown_listing(self, registry, settings):
        md = asyncio.run(handle_list_files(ListStoreFilesInput(directory="images"), registry, settings))

        assert "Files in images" in md
        assert "| b.jpg |" in md

    def test_unknown_config(self, registry, settings):
        params = ListStoreFilesInput(directory="images", config_name="other", response_format="json")
        data = json.loads(asyncio.run(handle_list_files(params, registry, settings)))

        assert data["category"] == "config_not_found"


class TestListConfigsTool:
    """Tests for handle_list_configs."""

    def test_lists_default(self, registry, settings):
        params = ListConfigsInput(response_format="json")
        data = json.loads(asyncio.run(handle_list_configs(params, registry, settings)))

        assert data["configs"] == [
            {"name": "default", "bucket": "test-bucket", "region": "oss-cn-hangzhou", "default": True}
        ]

    def test_never_exposes_secrets(self, registry, settings):
        for fmt in ("json", "markdown"):
            out = asyncio.run(
                handle_list_configs(ListConfigsInput(response_format=fmt), registry, settings)
            )
            assert "test-secret" not in out
            assert "LTAI-test-key" not in out


class TestUploadTool:
    """Tests for handle_upload."""

    def test_upload(self, registry, fake_client, settings, tmp_path):
        local = tmp_path / "logo.png"
        local.write_bytes(b"logo")
        params = UploadFileInput(file_path=str(local), target_dir="brand", response_format="json")

        data = json.loads(asyncio.run(handle_upload(params, registry, settings)))

        assert data["success"] is True
        assert data["key"] == "brand/logo.png"
        assert fake_client.objects["brand/logo.png"] == b"logo"

    def test_missing_file(self, registry, settings, tmp_path):
        params = UploadFileInput(file_path=str(tmp_path / "nope"), response_format="json")
        data = json.loads(asyncio.run(handle_upload(params, registry, settings)))

        assert data["category"] == "file_not_found"
        assert data["details"]["config_name"] == "default"

    def test_mutations_disabled(self, registry, fake_client, read_only, tmp_path):
        local = tmp_path / "logo.png"
        local.write_bytes(b"logo")
        params = UploadFileInput(file_path=str(local), response_format="json")

        data = json.loads(asyncio.run(handle_upload(params, registry, read_only)))

        assert data["category"] == "authorization"
        assert fake_client.calls == []
