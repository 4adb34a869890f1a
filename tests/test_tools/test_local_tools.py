"""
Tests for the local filesystem tool handlers.
"""
from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock, patch

from mcp_server_oss.config import ServerConfig
from mcp_server_oss.tools.local.models import (
    DownloadFileInput,
    DownloadResult,
    ListLocalFilesInput,
)
from mcp_server_oss.tools.local.tools import handle_download, handle_list_directory


class TestListDirectoryTool:
    """Tests for handle_list_directory."""

    def test_markdown(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.png").write_bytes(b"x" * 2048)

        md = asyncio.run(handle_list_directory(ListLocalFilesInput(directory=str(tmp_path))))

        assert "📁 sub/" in md
        assert "📄 a.png (2.0KB)" in md

    def test_missing_directory_json(self, tmp_path):
        params = ListLocalFilesInput(directory=str(tmp_path / "nope"), response_format="json")
        data = json.loads(asyncio.run(handle_list_directory(params)))

        assert data["success"] is False
        assert data["category"] == "file_not_found"


class TestDownloadTool:
    """Tests for handle_download."""

    def test_passes_configured_timeout(self, tmp_path):
        params = DownloadFileInput(
            url="https://example.com/a.png", target_dir=str(tmp_path), response_format="json"
        )
        result = DownloadResult(
            url=params.url, final_url=params.url, path=str(tmp_path / "a.png"), size=3
        )

        with patch(
            "mcp_server_oss.tools.local.tools.download_file", MagicMock(return_value=result)
        ) as mock_download:
            data = json.loads(asyncio.run(handle_download(params, ServerConfig(download_timeout=5))))

        mock_download.assert_called_once_with(params.url, str(tmp_path), None, 5.0)
        assert data["size"] == 3

    def test_existing_file_error(self, tmp_path):
        (tmp_path / "a.png").write_bytes(b"x")
        params = DownloadFileInput(url="https://example.com/a.png", target_dir=str(tmp_path))

        md = asyncio.run(handle_download(params, ServerConfig()))

        assert "destination_exists" in md
