"""
Data models for session content resolution - immutable event log records and results.

Includes dataclasses, enums, and the closed Standard Tool union.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, Union


class Role(str, Enum):
    """Event author."""

    USER = "user"
    ASSISTANT = "assistant"


class BlockKind(str, Enum):
    """Content block kinds."""

    TEXT = "text"
    THINKING = "thinking"
    TOOL_INVOCATION = "tool_invocation"
    TOOL_RESULT = "tool_result"
    CODE_DIFF = "code_diff"
    REFERENCE = "reference"
    IMAGE = "image"


# ── Standard Tool union ───────────────────────────────────────────────────────
# Produced by the session store; consumed here only when present.


@dataclass(frozen=True)
class ShellExec:
    """Shell command execution."""

    type: ClassVar[str] = "shell_exec"

    command: str
    cwd: Optional[str] = None


@dataclass(frozen=True)
class FileRead:
    """Read of a file, optionally a line range."""

    type: ClassVar[str] = "file_read"

    path: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None


@dataclass(frozen=True)
class FileWrite:
    """Full write (create or overwrite) of a file."""

    type: ClassVar[str] = "file_write"

    path: str
    content: str = ""


@dataclass(frozen=True)
class FileEdit:
    """In-place replacement inside a file."""

    type: ClassVar[str] = "file_edit"

    path: str
    old_string: Optional[str] = None
    new_string: Optional[str] = None


@dataclass(frozen=True)
class ContentSearch:
    """Text search over file contents (grep-like)."""

    type: ClassVar[str] = "content_search"

    pattern: str
    path: Optional[str] = None


@dataclass(frozen=True)
class FileSearch:
    """File name search (glob-like)."""

    type: ClassVar[str] = "file_search"

    pattern: str
    path: Optional[str] = None


@dataclass(frozen=True)
class SkillInvoke:
    """Invocation of a named skill."""

    type: ClassVar[str] = "skill_invoke"

    skill: str
    args: Optional[str] = None


@dataclass(frozen=True)
class OtherTool:
    """Catch-all for tools with no dedicated variant (web fetch, todo lists, ...)."""

    type: ClassVar[str] = "other"

    name: str
    input: Mapping[str, Any] = field(default_factory=dict)


StandardTool = Union[ShellExec, FileRead, FileWrite, FileEdit, ContentSearch, FileSearch, SkillInvoke, OtherTool]

#: Tag -> variant class, for every member of the StandardTool union.
STANDARD_TOOL_TYPES: Dict[str, Type] = {
    cls.type: cls
    for cls in (ShellExec, FileRead, FileWrite, FileEdit, ContentSearch, FileSearch, SkillInvoke, OtherTool)
}


# ── Content blocks ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextBlock:
    """Plain assistant or user text."""

    kind: ClassVar[BlockKind] = BlockKind.TEXT

    text: str


@dataclass(frozen=True)
class ThinkingBlock:
    """Reasoning text."""

    kind: ClassVar[BlockKind] = BlockKind.THINKING

    thinking: str


@dataclass(frozen=True)
class ReferenceBlock:
    """Code reference (snippet or symbol) with its rendered text."""

    kind: ClassVar[BlockKind] = BlockKind.REFERENCE

    text: str
    file_path: Optional[str] = None


@dataclass(frozen=True)
class ToolInvocationBlock:
    """Tool call: free tool name, untyped raw input, optional normalized tool."""

    kind: ClassVar[BlockKind] = BlockKind.TOOL_INVOCATION

    name: str
    input: Mapping[str, Any] = field(default_factory=dict)
    standard_tool: Optional[StandardTool] = None
    id: str = ""


@dataclass(frozen=True)
class ToolResultBlock:
    """Tool output text.

    Attributes:
        output: Output text exactly as the tool returned it
        is_error: True when the tool reported a failure
        associated_file_path: File the result pertains to, when the session
            store could correlate it with the invocation that produced it
        tool_use_id: Id of the invocation this result answers
    """

    kind: ClassVar[BlockKind] = BlockKind.TOOL_RESULT

    output: str
    is_error: bool = False
    associated_file_path: Optional[str] = None
    tool_use_id: str = ""


@dataclass(frozen=True)
class CodeDiffBlock:
    """Diff text."""

    kind: ClassVar[BlockKind] = BlockKind.CODE_DIFF

    diff: str
    file_path: str = ""


@dataclass(frozen=True)
class ImageBlock:
    """Non-textual block; never yields text or path evidence."""

    kind: ClassVar[BlockKind] = BlockKind.IMAGE

    media_type: str = ""
    data: str = ""


ContentBlock = Union[
    TextBlock, ThinkingBlock, ReferenceBlock, ToolInvocationBlock, ToolResultBlock, CodeDiffBlock, ImageBlock
]


@dataclass(frozen=True)
class Event:
    """One turn of a session log.

    Events are identified by their position in the log; ``id`` is carried
    through for callers but never used for ordering.
    """

    id: str
    role: Role
    timestamp: str
    blocks: Tuple[ContentBlock, ...] = ()

    @property
    def is_assistant(self) -> bool:
        """Return True for assistant-authored events."""
        return self.role == Role.ASSISTANT


# ── Resolution results ────────────────────────────────────────────────────────


class Confidence(str, Enum):
    """Reliability rank of a path resolution. Ordered high > medium > low."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank >= other.rank


_CONFIDENCE_RANK = {Confidence.LOW: 0, Confidence.MEDIUM: 1, Confidence.HIGH: 2}


class PathSource(str, Enum):
    """Where a resolved path came from."""

    TOOL_INVOCATION = "tool_invocation"
    TOOL_RESULT = "tool_result"
    CODE_BLOCK_ANNOTATION = "code_block_annotation"
    COMMENT_ANNOTATION = "comment_annotation"
    TEXT_MATCH = "text_match"
    HISTORY = "history"  # found at an index other than the pivot


@dataclass(frozen=True)
class PathResolution:
    """A file path resolved from event evidence.

    Attributes:
        path: Path exactly as it appeared in the evidence (always passes
              ``is_valid_file_path``)
        source: Extractor that produced it, or HISTORY for off-pivot hits
        confidence: Confidence of the extractor that produced it
        event_index: Log index the evidence came from (None for single-event resolution)
    """

    path: str
    source: PathSource
    confidence: Confidence
    event_index: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "source": self.source.value,
            "confidence": self.confidence.value,
            "event_index": self.event_index,
        }


@dataclass(frozen=True)
class ContentResolution:
    """File content recovered from the event log.

    Attributes:
        content: File content (line-number prefixes already stripped for tool results)
        file_path: Path as written in the matching event
        event_index: Log index of the matching event
        timestamp: Matching event's timestamp in epoch milliseconds (0 if unparseable)
    """

    content: str
    file_path: str
    event_index: int
    timestamp: int

    @property
    def line_count(self) -> int:
        """Number of lines in the recovered content."""
        if not self.content:
            return 0
        return self.content.count("\n") + (0 if self.content.endswith("\n") else 1)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "content": self.content,
            "file_path": self.file_path,
            "event_index": self.event_index,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class EventPathRow:
    """One row of a whole-log scan: an event and the path resolved for it alone."""

    index: int
    event_id: str
    role: Role
    resolution: Optional[PathResolution] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "event_id": self.event_id,
            "role": self.role.value,
            "path": self.resolution.path if self.resolution else None,
            "source": self.resolution.source.value if self.resolution else None,
            "confidence": self.resolution.confidence.value if self.resolution else None,
        }
