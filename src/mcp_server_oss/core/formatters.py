"""
Response formatting shared by all tools.

Every tool answers either in markdown for people or in JSON for programs;
the domain formatters build on the helpers here.
"""
from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

_SIZE_UNITS = ("KB", "MB", "GB", "TB", "PB")


class ResponseFormat(str, Enum):
    """Output format options for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


class Formatter:
    """Value formatting common to markdown and JSON output."""

    @staticmethod
    def format_datetime(dt: datetime | str | None) -> str:
        """Render a timestamp as 'YYYY-MM-DD HH:MM:SS'; strings are parsed as ISO 8601."""
        if dt is None:
            return "—"
        if isinstance(dt, str):
            try:
                dt = datetime.fromisoformat(dt.replace('Z', '+00:00'))
            except ValueError:
                return dt
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def format_bytes(size: int) -> str:
        """512B, 1.5KB, 2.0MB ..."""
        if size < 1024:
            return f"{size}B"
        value = size / 1024
        for unit in _SIZE_UNITS[:-1]:
            if value < 1024:
                return f"{value:.1f}{unit}"
            value /= 1024
        return f"{value:.1f}{_SIZE_UNITS[-1]}"


class MarkdownFormatter(Formatter):
    """Markdown building blocks."""

    @staticmethod
    def header(text: str, level: int = 1) -> str:
        return f"{'#' * level} {text}\n\n"

    @staticmethod
    def code(text: str) -> str:
        return f"`{text}`"

    @staticmethod
    def key_value(key: str, value: Any) -> str:
        return f"**{key}:** {value}\n"

    @staticmethod
    def bullet_list(items: list[str]) -> str:
        return "".join(f"- {item}\n" for item in items)

    @staticmethod
    def table(headers: list[str], rows: list[list[Any]]) -> str:
        """Pipe table; None cells render empty. Returns '' when there is nothing to show."""
        if not headers or not rows:
            return ""

        def line(cells: list[Any]) -> str:
            return "| " + " | ".join("" if c is None else str(c) for c in cells) + " |"

        lines = [line(headers), line(["---"] * len(headers))]
        lines.extend(line(row) for row in rows)
        return "\n".join(lines) + "\n"


class JSONFormatter(Formatter):
    """JSON output that tolerates datetimes, enums, paths and pydantic models."""

    @staticmethod
    def _default(obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        return str(obj)

    @classmethod
    def format(cls, data: Any, indent: int = 2) -> str:
        # Object keys are often non-ASCII file names
        return json.dumps(data, indent=indent, default=cls._default, ensure_ascii=False)


def format_response(
    data: Any,
    response_format: ResponseFormat | str,
    markdown_template: Callable[[Any], str] | None = None
) -> str:
    """
    Render tool output in the requested format.

    Args:
        data: Plain data (dicts, lists, models)
        response_format: 'markdown' or 'json'
        markdown_template: Builds the markdown view; without one lists become
            bullets and anything else is str()'d

    Returns:
        Formatted string response
    """
    if ResponseFormat(response_format) == ResponseFormat.JSON:
        return JSONFormatter.format(data)

    if markdown_template:
        return markdown_template(data)

    if isinstance(data, list):
        return MarkdownFormatter.bullet_list([str(item) for item in data])
    return str(data)
