"""
AI Session Resolver - resolve file paths and file contents from recorded AI coding-agent sessions.

Pure functions over an ordered, immutable event log answer two questions
about the event currently in view: which file is it about, and what did
that file contain at that point of the session. A thin CLI wraps them.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0

Example usage as library:
    from ai_session_resolver import load_events, resolve_path_near, resolve_content_near

    events = load_events(Path("session.json"))
    found = resolve_path_near(events, 12)
    if found:
        snapshot = resolve_content_near(events, found.path, 12)
"""

try:
    from importlib.metadata import version
    __version__ = version("ai_session_resolver")
except Exception:
    __version__ = "1.0.0"

__author__ = "Andrew Hundt"

from .body import block_copy_text, extract_copyable_body, has_copiable_content
from .content import (
    has_line_number_prefixes,
    parse_timestamp_ms,
    resolve_content_near,
    scan_content_backward,
    scan_content_forward,
    strip_line_number_prefixes,
)
from .extractors import (
    EVIDENCE_EXTRACTORS,
    EvidenceExtractor,
    extract_text_references,
    parse_code_block_annotations,
    parse_comment_annotations,
)
from .formatters import JsonFormatter, PlainFormatter, ResultFormatter, TableFormatter, get_formatter
from .loader import block_from_dict, event_from_dict, load_events, standard_tool_from_dict
from .models import (
    BlockKind,
    CodeDiffBlock,
    Confidence,
    ContentResolution,
    ContentSearch,
    Event,
    EventPathRow,
    FileEdit,
    FileRead,
    FileSearch,
    FileWrite,
    ImageBlock,
    OtherTool,
    PathResolution,
    PathSource,
    ReferenceBlock,
    Role,
    ShellExec,
    SkillInvoke,
    TextBlock,
    ThinkingBlock,
    ToolInvocationBlock,
    ToolResultBlock,
)
from .paths import is_common_word, is_valid_file_path, normalize_path, paths_match, to_relative_path
from .resolver import (
    resolve_path_around,
    resolve_path_for_event,
    resolve_path_near,
    scan_event_paths,
    scan_path_backward,
    scan_path_forward,
)
from .types import EventLog, Formatter, PathEvidence

__all__ = [
    "BlockKind",
    "CodeDiffBlock",
    "Confidence",
    "ContentResolution",
    "ContentSearch",
    "EVIDENCE_EXTRACTORS",
    "Event",
    "EventLog",
    "EventPathRow",
    "EvidenceExtractor",
    "FileEdit",
    "FileRead",
    "FileSearch",
    "FileWrite",
    "Formatter",
    "ImageBlock",
    "JsonFormatter",
    "OtherTool",
    "PathEvidence",
    "PathResolution",
    "PathSource",
    "PlainFormatter",
    "ReferenceBlock",
    "ResultFormatter",
    "Role",
    "ShellExec",
    "SkillInvoke",
    "TableFormatter",
    "TextBlock",
    "ThinkingBlock",
    "ToolInvocationBlock",
    "ToolResultBlock",
    "block_copy_text",
    "block_from_dict",
    "event_from_dict",
    "extract_copyable_body",
    "extract_text_references",
    "get_formatter",
    "has_copiable_content",
    "has_line_number_prefixes",
    "is_common_word",
    "is_valid_file_path",
    "load_events",
    "normalize_path",
    "parse_code_block_annotations",
    "parse_comment_annotations",
    "parse_timestamp_ms",
    "paths_match",
    "resolve_content_near",
    "resolve_path_around",
    "resolve_path_for_event",
    "resolve_path_near",
    "scan_content_backward",
    "scan_content_forward",
    "scan_event_paths",
    "scan_path_backward",
    "scan_path_forward",
    "standard_tool_from_dict",
    "strip_line_number_prefixes",
    "to_relative_path",
]
