"""
Read serialized event logs from disk.

Accepts the resolver's own schema (already-normalized events), either as a
JSON document or as JSONL with one event per line. Field names may be
snake_case or camelCase.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import orjson

from .models import (
    STANDARD_TOOL_TYPES,
    CodeDiffBlock,
    ContentBlock,
    ContentSearch,
    Event,
    FileEdit,
    FileRead,
    FileSearch,
    FileWrite,
    ImageBlock,
    OtherTool,
    ReferenceBlock,
    Role,
    ShellExec,
    SkillInvoke,
    StandardTool,
    TextBlock,
    ThinkingBlock,
    ToolInvocationBlock,
    ToolResultBlock,
)

logger = logging.getLogger("ai_session_resolver.loader")


def _get(data: Mapping, *keys: str, default: Any = None) -> Any:
    """First present key among ``keys`` (snake_case and camelCase spellings)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _str(data: Mapping, *keys: str, default: str = "") -> str:
    value = _get(data, *keys)
    return value if isinstance(value, str) else default


def _opt_str(data: Mapping, *keys: str) -> Optional[str]:
    value = _get(data, *keys)
    return value if isinstance(value, str) else None


def _opt_int(data: Mapping, *keys: str) -> Optional[int]:
    value = _get(data, *keys)
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def standard_tool_from_dict(data: Any) -> Optional[StandardTool]:
    """Build a Standard Tool from its tagged dict; unknown tags become OtherTool."""
    if not isinstance(data, Mapping):
        return None
    tag = data.get("type")
    cls = STANDARD_TOOL_TYPES.get(tag)

    if cls is ShellExec:
        return ShellExec(command=_str(data, "command"), cwd=_opt_str(data, "cwd"))
    if cls is FileRead:
        return FileRead(
            path=_str(data, "path"),
            start_line=_opt_int(data, "start_line", "startLine"),
            end_line=_opt_int(data, "end_line", "endLine"),
        )
    if cls is FileWrite:
        return FileWrite(path=_str(data, "path"), content=_str(data, "content"))
    if cls is FileEdit:
        return FileEdit(
            path=_str(data, "path"),
            old_string=_opt_str(data, "old_string", "oldString"),
            new_string=_opt_str(data, "new_string", "newString"),
        )
    if cls is ContentSearch:
        return ContentSearch(pattern=_str(data, "pattern"), path=_opt_str(data, "path"))
    if cls is FileSearch:
        return FileSearch(pattern=_str(data, "pattern"), path=_opt_str(data, "path"))
    if cls is SkillInvoke:
        return SkillInvoke(skill=_str(data, "skill"), args=_opt_str(data, "args"))

    raw_input = _get(data, "input", default={})
    return OtherTool(
        name=_str(data, "name", default=str(tag or "unknown")),
        input=raw_input if isinstance(raw_input, dict) else {},
    )


def block_from_dict(data: Any) -> Optional[ContentBlock]:
    """Build a content block from its dict form; None for unknown or malformed blocks."""
    if not isinstance(data, Mapping):
        return None
    kind = data.get("type") or data.get("kind")

    if kind == "text":
        return TextBlock(text=_str(data, "text", "content"))
    if kind == "thinking":
        return ThinkingBlock(thinking=_str(data, "thinking", "content"))
    if kind == "reference":
        return ReferenceBlock(text=_str(data, "text", "content"), file_path=_opt_str(data, "file_path", "filePath"))
    if kind in ("tool_invocation", "tool_use"):
        raw_input = _get(data, "input", "tool_input", "toolInput", default={})
        return ToolInvocationBlock(
            name=_str(data, "name", "tool_name", "toolName"),
            input=raw_input if isinstance(raw_input, dict) else {},
            standard_tool=standard_tool_from_dict(_get(data, "standard_tool", "standardTool")),
            id=_str(data, "id", "tool_use_id", "toolUseId"),
        )
    if kind == "tool_result":
        return ToolResultBlock(
            output=_str(data, "output", "content"),
            is_error=bool(_get(data, "is_error", "isError", default=False)),
            associated_file_path=_opt_str(data, "associated_file_path", "associatedFilePath"),
            tool_use_id=_str(data, "tool_use_id", "toolUseId"),
        )
    if kind == "code_diff":
        return CodeDiffBlock(diff=_str(data, "diff", "content"), file_path=_str(data, "file_path", "filePath"))
    if kind == "image":
        return ImageBlock(media_type=_str(data, "media_type", "mediaType"), data=_str(data, "data", "source"))

    logger.warning("skipping block of unknown kind %r", kind)
    return None


def event_from_dict(data: Any) -> Optional[Event]:
    """Build an Event from its dict form; None when the record is not an event."""
    if not isinstance(data, Mapping):
        return None
    try:
        role = Role(data.get("role"))
    except ValueError:
        logger.warning("skipping event %r with role %r", data.get("id"), data.get("role"))
        return None

    raw_blocks = _get(data, "blocks", "content", default=[])
    if isinstance(raw_blocks, str):
        raw_blocks = [{"type": "text", "text": raw_blocks}]
    if not isinstance(raw_blocks, list):
        raw_blocks = []

    blocks = tuple(b for b in (block_from_dict(item) for item in raw_blocks) if b is not None)
    return Event(
        id=str(_get(data, "id", default="")),
        role=role,
        timestamp=_str(data, "timestamp"),
        blocks=blocks,
    )


def _iter_jsonl(path: Path) -> Iterator[Dict]:
    """Yield parsed dicts from a JSONL file, skipping malformed lines."""
    with open(path, "rb") as f:
        for line_no, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError:
                logger.warning("%s:%d: skipping malformed line", path, line_no)
                continue
            if isinstance(data, dict):
                yield data


def load_events(path: Path) -> List[Event]:
    """Load an ordered event log from ``path``.

    ``.jsonl`` files hold one event per line; anything else is parsed as one
    JSON document holding a list of events or ``{"events": [...]}``.

    Raises:
        ValueError: If the file cannot be read or is not an event log.
    """
    path = Path(path).expanduser()
    try:
        if path.suffix.lower() == ".jsonl":
            records = list(_iter_jsonl(path))
        else:
            document = orjson.loads(path.read_bytes())
            if isinstance(document, dict):
                document = document.get("events")
            if not isinstance(document, list):
                raise ValueError(f"Not an event log (expected a list of events): {path}")
            records = document
    except OSError as exc:
        raise ValueError(f"Cannot read event log {path}: {exc}") from exc
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in event log {path}: {exc}") from exc

    events = []
    for record in records:
        event = event_from_dict(record)
        if event is not None:
            events.append(event)
    logger.debug("loaded %d events from %s", len(events), path)
    return events
