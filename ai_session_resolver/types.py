"""
Type protocols for composable, extensible architecture.

Protocols allow new evidence strategies and output formats to be plugged in
without touching the resolvers.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from typing import Any, List, Protocol, Sequence, runtime_checkable

from .models import Event

#: An ordered, read-only session log. Index = position in the story.
EventLog = Sequence[Event]


@runtime_checkable
class PathEvidence(Protocol):
    """Protocol for one evidence strategy: candidate paths found in a single event."""

    def __call__(self, event: Event) -> List[str]:
        """Return valid candidate paths in content order (empty when none)."""
        ...


@runtime_checkable
class Formatter(Protocol):
    """Protocol for output formatting."""

    def format(self, data: Any) -> str:
        """Format data for output."""
        ...

    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        ...
