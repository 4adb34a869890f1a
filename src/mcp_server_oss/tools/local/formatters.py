"""
Local filesystem formatters.
"""
from __future__ import annotations

from mcp_server_oss.core.formatters import MarkdownFormatter


class LocalFormatter:
    """Local filesystem formatting utilities."""

    @staticmethod
    def directory_markdown(data: dict) -> str:
        """Format a local directory listing as markdown."""
        entries = data.get("entries", [])
        pattern = data.get("pattern")

        md = MarkdownFormatter.header(f"Directory: {data['directory']}", 1)
        if pattern:
            md += MarkdownFormatter.key_value("Filter", MarkdownFormatter.code(pattern))

        if not entries:
            return md + "\nNo matching files found.\n"

        md += MarkdownFormatter.key_value("Items", len(entries)) + "\n"
        lines = []
        for entry in entries:
            if entry["is_directory"]:
                lines.append(f"📁 {entry['name']}/")
            else:
                lines.append(f"📄 {entry['name']} ({MarkdownFormatter.format_bytes(entry['size'])})")
        md += MarkdownFormatter.bullet_list(lines)
        return md

    @staticmethod
    def download_markdown(data: dict) -> str:
        """Format a completed download as markdown."""
        md = MarkdownFormatter.header("✅ Download Complete", 2)
        md += MarkdownFormatter.key_value("Source URL", data["url"])
        if data.get("final_url") and data["final_url"] != data["url"]:
            md += MarkdownFormatter.key_value("Redirected To", data["final_url"])
        md += MarkdownFormatter.key_value("Saved To", MarkdownFormatter.code(data["path"]))
        md += MarkdownFormatter.key_value("Size", MarkdownFormatter.format_bytes(data["size"]))
        return md
