"""
Markdown views of object-store tool results. JSON output needs no
domain-specific formatting.
"""
from __future__ import annotations

from mcp_server_oss.core.formatters import MarkdownFormatter


class StorageFormatter:
    """Markdown for upload, configuration, listing and rename results."""

    @staticmethod
    def upload_markdown(data: dict) -> str:
        """Format an upload result as markdown."""
        md = MarkdownFormatter.header("✅ Upload Succeeded", 2)
        md += MarkdownFormatter.key_value("Key", MarkdownFormatter.code(data["key"]))
        md += MarkdownFormatter.key_value("URL", data["url"])
        md += MarkdownFormatter.key_value("Config", data["config_name"])
        return md

    @staticmethod
    def configs_markdown(data: dict) -> str:
        """Format available store configurations as markdown."""
        configs = data.get("configs", [])
        if not configs:
            return (
                "# Store Configurations\n\n"
                "No store configuration found. Set OSS_CONFIGS or the OSS_* "
                "environment variables."
            )

        md = MarkdownFormatter.header("Store Configurations", 1)
        headers = ["Name", "Bucket", "Region", "Default"]
        rows = [
            [c["name"], c["bucket"], c["region"], "✓" if c.get("default") else ""]
            for c in configs
        ]
        md += MarkdownFormatter.table(headers, rows)
        return md

    @staticmethod
    def files_markdown(data: dict) -> str:
        """Format a store directory listing as markdown."""
        directory = data.get("directory") or "(root)"
        files = data.get("files", [])
        pattern = data.get("pattern")

        md = MarkdownFormatter.header(f"Files in {directory}", 1)
        md += MarkdownFormatter.key_value("Config", data.get("config_name"))
        if pattern:
            md += MarkdownFormatter.key_value("Filter", MarkdownFormatter.code(pattern))

        if not files:
            return md + "\nNo matching files found.\n"

        md += MarkdownFormatter.key_value("Total", len(files)) + "\n"
        rows = [
            [
                f["name"],
                MarkdownFormatter.format_bytes(f["size"]),
                MarkdownFormatter.format_datetime(f.get("last_modified")),
            ]
            for f in files
        ]
        md += MarkdownFormatter.table(["Name", "Size", "Last Modified"], rows)
        return md

    @staticmethod
    def rename_markdown(data: dict) -> str:
        """Format batch rename results as markdown."""
        results = data.get("results", [])
        succeeded = sum(1 for r in results if r["success"])
        failed = len(results) - succeeded

        if data.get("dry_run"):
            md = MarkdownFormatter.header("Rename Preview (dry run)", 1)
            md += "The following renames would be attempted:\n\n"
        else:
            md = MarkdownFormatter.header("Batch Rename Complete", 1)

        md += MarkdownFormatter.key_value("Config", data.get("config_name"))
        md += MarkdownFormatter.key_value("Directory", data.get("directory") or "(root)")
        md += f"**Succeeded:** {succeeded} | **Failed:** {failed}\n"

        if results:
            md += "\n## Details\n\n"
            for r in results:
                if r["success"]:
                    md += f"- ✅ {r['old_name']} → {r['new_name']}\n"
                else:
                    md += f"- ❌ {r['old_name']} → {r['new_name']} ({r['error']})\n"

        return md
