"""
Canonical copy/export body of an event.

Every block contributes its meaningful payload: text as written, the command
of a shell call, the path of a file operation, the pattern of a search, and
so on. Blocks with nothing meaningful (images, todo lists) contribute nothing.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple, Type

from .models import (
    BlockKind,
    CodeDiffBlock,
    ContentBlock,
    ContentSearch,
    Event,
    FileEdit,
    FileRead,
    FileSearch,
    FileWrite,
    OtherTool,
    ReferenceBlock,
    ShellExec,
    SkillInvoke,
    StandardTool,
    TextBlock,
    ThinkingBlock,
    ToolInvocationBlock,
    ToolResultBlock,
)

#: Raw-input keys holding the payload of skills and unclassified tools, in order.
GENERIC_PAYLOAD_FIELDS: Tuple[str, ...] = ("url", "query", "description", "content", "message", "text")

#: Raw-input keys tried when no Standard Tool is attached, in order.
RAW_PAYLOAD_FIELDS: Tuple[str, ...] = (
    "command", "file_path", "filePath", "pattern", "path",
) + GENERIC_PAYLOAD_FIELDS

#: Block kinds that can yield copyable text.
COPIABLE_KINDS = frozenset({
    BlockKind.TEXT,
    BlockKind.THINKING,
    BlockKind.TOOL_INVOCATION,
    BlockKind.TOOL_RESULT,
    BlockKind.CODE_DIFF,
    BlockKind.REFERENCE,
})

BLOCK_SEPARATOR = "\n\n"


def first_string_field(raw: Any, keys: Tuple[str, ...]) -> str:
    """Return the first non-empty string value among ``keys`` in ``raw``, else ``""``."""
    if not isinstance(raw, Mapping):
        return ""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _generic_payload(tool: StandardTool, raw: Mapping) -> str:
    return first_string_field(raw, GENERIC_PAYLOAD_FIELDS)


#: Standard Tool class -> payload extractor. Covers every variant of the union.
_TOOL_PAYLOAD: Dict[Type, Callable[[Any, Mapping], str]] = {
    ShellExec: lambda tool, raw: tool.command,
    FileRead: lambda tool, raw: tool.path,
    FileWrite: lambda tool, raw: tool.path,
    FileEdit: lambda tool, raw: tool.path,
    ContentSearch: lambda tool, raw: tool.pattern,
    FileSearch: lambda tool, raw: tool.pattern,
    SkillInvoke: _generic_payload,
    OtherTool: _generic_payload,
}


def tool_invocation_payload(block: ToolInvocationBlock) -> str:
    """Meaningful payload of a tool call (may be empty).

    Dispatches on the Standard Tool variant; without one, falls back to the
    first populated ``RAW_PAYLOAD_FIELDS`` key of the raw input. An OtherTool
    carrying its own input map stands in for an empty raw input.
    """
    raw = block.input if isinstance(block.input, Mapping) else {}
    tool = block.standard_tool
    if not raw and isinstance(tool, OtherTool):
        raw = tool.input
    if tool is None:
        return first_string_field(raw, RAW_PAYLOAD_FIELDS)
    extract = _TOOL_PAYLOAD.get(type(tool))
    if extract is None:
        return ""
    return extract(tool, raw) or ""


def block_copy_text(block: ContentBlock) -> str:
    """Copyable text of one block; empty string when it has none."""
    if isinstance(block, TextBlock):
        return block.text.strip() if block.text else ""
    if isinstance(block, ThinkingBlock):
        return block.thinking.strip() if block.thinking else ""
    if isinstance(block, ReferenceBlock):
        return block.text.strip() if block.text else ""
    if isinstance(block, ToolInvocationBlock):
        return tool_invocation_payload(block)
    if isinstance(block, ToolResultBlock):
        return block.output or ""
    if isinstance(block, CodeDiffBlock):
        return block.diff or ""
    return ""


def extract_copyable_body(event: Event) -> str:
    """Join the copyable text of all blocks, in order, with a blank line between them.

    Example:
        [text "Let me read the file.", file_read /app.ts, result "const app = 1;"]
        -> "Let me read the file.\\n\\n/app.ts\\n\\nconst app = 1;"
    """
    parts = [block_copy_text(block) for block in event.blocks]
    return BLOCK_SEPARATOR.join(part for part in parts if part)


def has_copiable_content(event: Event) -> bool:
    """Return True if any block is of a copyable kind (its text may still be empty)."""
    return any(getattr(block, "kind", None) in COPIABLE_KINDS for block in event.blocks)


def copy_body_or_none(event: Event) -> Optional[str]:
    """``extract_copyable_body``, with None in place of an empty body."""
    return extract_copyable_body(event) or None
