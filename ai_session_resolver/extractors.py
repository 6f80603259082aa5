"""
Evidence extraction strategies: pull candidate file paths out of one event.

Strategies are independent pure functions collected, highest priority first,
in ``EVIDENCE_EXTRACTORS``. The resolver walks that tuple; adding or
reordering a strategy never touches the others.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .models import (
    Confidence,
    ContentSearch,
    Event,
    FileEdit,
    FileRead,
    FileSearch,
    FileWrite,
    PathSource,
    StandardTool,
    TextBlock,
    ToolInvocationBlock,
    ToolResultBlock,
)
from .paths import is_common_word, is_valid_file_path
from .types import PathEvidence

#: Raw-input keys that may hold a path, per tool name.
TOOL_PATH_FIELDS: Dict[str, Tuple[str, ...]] = {
    "Read": ("file_path", "filePath", "path"),
    "Write": ("file_path", "filePath", "path"),
    "Edit": ("file_path", "filePath", "path"),
    "Glob": ("path", "pattern"),
    "Grep": ("path",),
}

#: Keys tried for tool names not in TOOL_PATH_FIELDS.
DEFAULT_PATH_FIELDS: Tuple[str, ...] = ("file_path", "filePath", "path", "filename")

#: Standard Tool variants that carry a ``path`` field.
_PATH_BEARING_TOOLS = (FileRead, FileWrite, FileEdit, ContentSearch, FileSearch)

# ```typescript:src/components/Button.tsx
_CODE_BLOCK_ANNOTATION = re.compile(r"```\w+:([^\s`]+)")

_COMMENT_ANNOTATIONS = (
    re.compile(r"//\s*filepath:\s*(\S+)", re.IGNORECASE),
    re.compile(r"//\s*file:\s*(\S+)", re.IGNORECASE),
    re.compile(r"/\*\s*filepath:\s*([^\s*]+)", re.IGNORECASE),
    re.compile(r"#\s*filepath:\s*(\S+)", re.IGNORECASE),
    re.compile(r"<!--\s*filepath:\s*(\S+?)(?=\s|-->|$)", re.IGNORECASE),
)

_TEXT_REFERENCES = (
    # ./rel, ../rel, /abs
    re.compile(r"(?:^|(?<=[\s'\"`]))(\.{0,2}/[\w\-./]+\.\w{1,10})(?=[\s'\"`:]|$)", re.MULTILINE),
    re.compile(r"(?:^|(?<=[\s'\"`]))(/[\w\-./]+\.\w{1,10})(?=[\s'\"`:]|$)", re.MULTILINE),
    # 'quoted.ext', "quoted.ext", `ticked.ext`
    re.compile(r"['\"`]([\w\-./]+\.\w{1,10})['\"`]"),
    re.compile(r"`([\w\-./]+\.\w{1,10})`"),
)


def _ordered_matches(text: str, patterns) -> List[str]:
    """Group-1 matches of all patterns, ordered by position in ``text``."""
    found = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            found.append((match.start(1), match.group(1).strip()))
    found.sort(key=lambda item: item[0])
    return [path for _pos, path in found]


# ── Text-level parsers ────────────────────────────────────────────────────────


def parse_code_block_annotations(text: str) -> List[str]:
    """Return paths from ```` ```lang:path ```` fences, in order."""
    paths = []
    for match in _CODE_BLOCK_ANNOTATION.finditer(text):
        path = match.group(1).strip()
        if is_valid_file_path(path):
            paths.append(path)
    return paths


def parse_comment_annotations(text: str) -> List[str]:
    """Return paths from ``// filepath:``-style comments, in order.

    Recognizes ``// filepath:``, ``// file:``, ``/* filepath:``, ``# filepath:``
    and ``<!-- filepath:`` (case-insensitive).
    """
    return [p for p in _ordered_matches(text, _COMMENT_ANNOTATIONS) if is_valid_file_path(p)]


def extract_text_references(text: str) -> List[str]:
    """Return de-duplicated path-shaped tokens from free text, first occurrence first.

    Covers ./relative, ../relative and /absolute tokens plus quoted or
    back-ticked names ending in a 1-10 character extension. Tokens on the
    common-word deny-list (``e.g``, ``1.0``, ...) are dropped.
    """
    seen = set()
    paths = []
    for path in _ordered_matches(text, _TEXT_REFERENCES):
        if path in seen or not is_valid_file_path(path) or is_common_word(path):
            continue
        seen.add(path)
        paths.append(path)
    return paths


# ── Block-level helpers ───────────────────────────────────────────────────────


def _text_bodies(event: Event) -> Iterator[str]:
    for block in event.blocks:
        if isinstance(block, TextBlock) and block.text and block.text.strip():
            yield block.text


def standard_tool_path(tool: Optional[StandardTool]) -> Optional[str]:
    """Return the ``path`` field of a Standard Tool, if its variant has one."""
    if isinstance(tool, _PATH_BEARING_TOOLS):
        return tool.path
    return None


def tool_invocation_path(block: ToolInvocationBlock) -> Optional[str]:
    """First valid path for one tool invocation.

    The Standard Tool's own path is tried first; then the raw input keys
    allowed for the tool's name (``DEFAULT_PATH_FIELDS`` for unknown names).
    """
    path = standard_tool_path(block.standard_tool)
    if is_valid_file_path(path):
        return path

    raw = block.input if isinstance(block.input, Mapping) else {}
    for key in TOOL_PATH_FIELDS.get(block.name or "", DEFAULT_PATH_FIELDS):
        value = raw.get(key)
        if isinstance(value, str) and is_valid_file_path(value):
            return value
    return None


# ── Event-level strategies ────────────────────────────────────────────────────


def from_tool_invocations(event: Event) -> List[str]:
    """Paths named by tool-call parameters."""
    paths = []
    for block in event.blocks:
        if isinstance(block, ToolInvocationBlock):
            path = tool_invocation_path(block)
            if path:
                paths.append(path)
    return paths


def from_tool_results(event: Event) -> List[str]:
    """Paths the session store associated with tool results."""
    return [
        block.associated_file_path
        for block in event.blocks
        if isinstance(block, ToolResultBlock) and is_valid_file_path(block.associated_file_path)
    ]


def from_code_block_annotations(event: Event) -> List[str]:
    paths = []
    for text in _text_bodies(event):
        paths.extend(parse_code_block_annotations(text))
    return paths


def from_comment_annotations(event: Event) -> List[str]:
    paths = []
    for text in _text_bodies(event):
        paths.extend(parse_comment_annotations(text))
    return paths


def from_text_references(event: Event) -> List[str]:
    paths = []
    for text in _text_bodies(event):
        for path in extract_text_references(text):
            if path not in paths:
                paths.append(path)
    return paths


@dataclass(frozen=True)
class EvidenceExtractor:
    """One evidence strategy tagged with the source and confidence it reports."""

    source: PathSource
    confidence: Confidence
    extract: PathEvidence


#: Highest priority first.
EVIDENCE_EXTRACTORS: Tuple[EvidenceExtractor, ...] = (
    EvidenceExtractor(PathSource.TOOL_INVOCATION, Confidence.HIGH, from_tool_invocations),
    EvidenceExtractor(PathSource.TOOL_RESULT, Confidence.HIGH, from_tool_results),
    EvidenceExtractor(PathSource.CODE_BLOCK_ANNOTATION, Confidence.MEDIUM, from_code_block_annotations),
    EvidenceExtractor(PathSource.COMMENT_ANNOTATION, Confidence.MEDIUM, from_comment_annotations),
    EvidenceExtractor(PathSource.TEXT_MATCH, Confidence.LOW, from_text_references),
)
