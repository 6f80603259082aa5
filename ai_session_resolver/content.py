"""
Content resolution: what did a file contain at a given point in the session?

The answer comes from the nearest file-mutating tool call (or a tool result
associated with the file) touching the target path, searched backward from
the pivot first and forward only when nothing precedes it.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import datetime
import logging
import re
from typing import Optional, Tuple

from .models import ContentResolution, Event, FileEdit, FileWrite, ToolInvocationBlock, ToolResultBlock
from .paths import normalize_path
from .timeline import backward_indices, forward_indices
from .types import EventLog

logger = logging.getLogger("ai_session_resolver.content")

#: Echoed-source prefix such as "  42→" or "7|".
_LINE_NUMBER_PREFIX = re.compile(r"^\s*\d+[→|]")

#: Share of non-blank lines that must carry a prefix before any is stripped.
LINE_PREFIX_THRESHOLD = 0.5


def has_line_number_prefixes(text: str) -> bool:
    """Return True if at least half of the non-blank lines start with a line-number prefix."""
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return False
    prefixed = sum(1 for line in lines if _LINE_NUMBER_PREFIX.match(line))
    return prefixed / len(lines) >= LINE_PREFIX_THRESHOLD


def strip_line_number_prefixes(text: str) -> str:
    """Remove ``  42→``-style prefixes from tool output that echoes a file.

    Nothing is touched unless ``has_line_number_prefixes`` holds, so content
    whose lines merely begin with a digit survives. Lines without a prefix
    are kept as they are.
    """
    if not text or not has_line_number_prefixes(text):
        return text
    return "\n".join(_LINE_NUMBER_PREFIX.sub("", line, count=1) for line in text.split("\n"))


def parse_timestamp_ms(timestamp: str) -> int:
    """Convert an ISO-8601 timestamp to epoch milliseconds.

    A trailing ``Z`` is accepted and naive timestamps are read as UTC.
    Returns 0 when the value cannot be parsed.
    """
    if not timestamp:
        return 0
    value = timestamp.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return int(parsed.timestamp() * 1000)


def event_file_content(event: Event, target: str) -> Optional[Tuple[str, str]]:
    """Return ``(content, path_as_written)`` if ``event`` holds content for ``target``.

    ``target`` must already be normalized. Blocks are checked in order and the
    first match wins:

    - file_write tool call with non-empty ``content``
    - file_edit tool call with non-empty ``new_string`` (else ``old_string``)
    - non-error tool result whose associated file matches, with non-empty
      output (line-number prefixes stripped)

    User events never match.
    """
    if not event.is_assistant:
        return None

    for block in event.blocks:
        if isinstance(block, ToolInvocationBlock):
            tool = block.standard_tool
            if isinstance(tool, FileWrite) and normalize_path(tool.path) == target:
                if tool.content:
                    return tool.content, tool.path
            elif isinstance(tool, FileEdit) and normalize_path(tool.path) == target:
                content = tool.new_string or tool.old_string
                if content:
                    return content, tool.path
        elif isinstance(block, ToolResultBlock):
            path = block.associated_file_path
            if not path or block.is_error or normalize_path(path) != target:
                continue
            if block.output:
                return strip_line_number_prefixes(block.output), path
    return None


def _resolution_at(events: EventLog, index: int, match: Tuple[str, str]) -> ContentResolution:
    content, path = match
    return ContentResolution(
        content=content,
        file_path=path,
        event_index=index,
        timestamp=parse_timestamp_ms(events[index].timestamp),
    )


def scan_content_backward(events: EventLog, target_path: str, pivot: int) -> Optional[ContentResolution]:
    """Nearest content for ``target_path`` at or before ``pivot``."""
    target = normalize_path(target_path)
    for i in backward_indices(events, pivot):
        match = event_file_content(events[i], target)
        if match:
            return _resolution_at(events, i, match)
    return None


def scan_content_forward(events: EventLog, target_path: str, pivot: int) -> Optional[ContentResolution]:
    """Nearest content for ``target_path`` strictly after ``pivot``."""
    target = normalize_path(target_path)
    for i in forward_indices(events, pivot):
        match = event_file_content(events[i], target)
        if match:
            return _resolution_at(events, i, match)
    return None


def resolve_content_near(events: EventLog, target_path: str, pivot_index: int) -> Optional[ContentResolution]:
    """Recover the content of ``target_path`` as of ``pivot_index``.

    Searches backward from the pivot (inclusive) to the start of the log,
    then forward to the end. A backward match always wins, even when a
    forward match is closer: it is the latest known state of the file at
    that point of the session.

    Args:
        events: Ordered session log.
        target_path: File to look for; compared via ``normalize_path``.
        pivot_index: Event currently in view.

    Returns:
        ContentResolution, or None for an empty log, an empty target path,
        or no match in either direction.
    """
    if not events or not target_path:
        return None

    result = scan_content_backward(events, target_path, pivot_index)
    if result is None:
        result = scan_content_forward(events, target_path, pivot_index)

    if result is None:
        logger.debug("no content for %r around index %d", target_path, pivot_index)
    else:
        logger.debug("content for %r found at index %d (pivot %d)", target_path, result.event_index, pivot_index)
    return result
