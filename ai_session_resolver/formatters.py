"""
Output formatters with multiple output types.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
from abc import ABC, abstractmethod
from typing import Any, List

from rich.console import Console
from rich.table import Table

from .models import ContentResolution, EventPathRow, PathResolution


class ResultFormatter(ABC):
    """Base formatter protocol."""

    @abstractmethod
    def format(self, data: Any) -> str:
        """Format data for output."""
        pass

    @abstractmethod
    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        pass


class TableFormatter(ResultFormatter):
    """Format results as a Rich table (or aligned fields for a single item)."""

    def __init__(self, title: str = "Results"):
        """Initialize with title."""
        self.title = title

    def format(self, data: Any) -> str:
        """Format single result."""
        if isinstance(data, PathResolution):
            lines = [
                f"Path:       {data.path}",
                f"Source:     {data.source.value}",
                f"Confidence: {data.confidence.value}",
                f"Event:      {'' if data.event_index is None else data.event_index}",
            ]
            return "\n".join(lines)
        if isinstance(data, ContentResolution):
            lines = [
                f"File:       {data.file_path}",
                f"Event:      {data.event_index}",
                f"Timestamp:  {data.timestamp}",
                f"Lines:      {data.line_count}",
                "",
                data.content,
            ]
            return "\n".join(lines)
        return str(data)

    def format_many(self, items: List[EventPathRow]) -> str:
        """Format per-event path rows as table."""
        table = Table(title=self.title)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Role", style="green")
        table.add_column("Path", style="cyan")
        table.add_column("Source", style="yellow")
        table.add_column("Confidence", style="magenta")

        for row in items:
            res = row.resolution
            table.add_row(
                str(row.index),
                row.role.value,
                res.path if res else "",
                res.source.value if res else "",
                res.confidence.value if res else "",
            )

        console = Console(width=120)
        with console.capture() as capture:
            console.print(table)
        return capture.get()


class JsonFormatter(ResultFormatter):
    """Format results as JSON."""

    def format(self, data: Any) -> str:
        """Format single result."""
        return json.dumps(data.to_dict(), indent=2)

    def format_many(self, items: List[Any]) -> str:
        """Format multiple results as JSON array."""
        return json.dumps([item.to_dict() for item in items], indent=2)


class PlainFormatter(ResultFormatter):
    """Simple plain text formatter."""

    def format(self, data: Any) -> str:
        """Format single item."""
        if isinstance(data, PathResolution):
            return data.path
        if isinstance(data, ContentResolution):
            return data.content
        if isinstance(data, EventPathRow):
            res = data.resolution
            if res is None:
                return f"{data.index}\t{data.role.value}\t-"
            return f"{data.index}\t{data.role.value}\t{res.path}\t{res.source.value}\t{res.confidence.value}"
        return str(data)

    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        return "\n".join(self.format(item) for item in items)


def get_formatter(format_type: str, title: str = "Results") -> ResultFormatter:
    """Factory function to get formatter by type."""
    formatters = {
        "table": TableFormatter,
        "json": JsonFormatter,
        "plain": PlainFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(f"Unknown format: {format_type}")

    if formatter_class is TableFormatter:
        return formatter_class(title)
    return formatter_class()
