"""
Path validation and normalization shared by every resolver.

Two paths name the same file iff their ``normalize_path`` forms are equal;
nothing in this package compares raw path strings.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import re
from typing import Any, FrozenSet

#: Longest string still considered a path.
MAX_PATH_LENGTH = 500

#: Characters that never appear in a path we want to report (Windows-invalid set).
_INVALID_PATH_CHARS = re.compile(r"[<>:|?*]")

#: Abbreviations and version numbers that look like "name.ext" to the text matchers.
COMMON_WORDS: FrozenSet[str] = frozenset({"e.g", "i.e", "etc.", "vs.", "v.s.", "1.0", "2.0", "3.0"})


def is_valid_file_path(path: Any) -> bool:
    """Return True if ``path`` is a plausible file path.

    Rejects non-strings, empty or over-long strings, strings without an
    extension dot, http(s) URLs, strings containing ``< > : | ? *``, and
    deny-listed tokens such as ``e.g`` or ``1.0``.
    """
    if not isinstance(path, str) or len(path) < 2 or len(path) > MAX_PATH_LENGTH:
        return False
    if "." not in path:
        return False
    if path.startswith(("http://", "https://")):
        return False
    if _INVALID_PATH_CHARS.search(path) or is_common_word(path):
        return False
    return True


def is_common_word(token: str) -> bool:
    """Return True for deny-listed tokens such as ``e.g`` or ``1.0``."""
    return token.lower() in COMMON_WORDS


def normalize_path(path: str) -> str:
    """Canonical form for equality: one leading ``./`` and one leading ``/`` removed, lower-cased."""
    if path.startswith("./"):
        path = path[2:]
    if path.startswith("/"):
        path = path[1:]
    return path.lower()


def paths_match(a: str, b: str) -> bool:
    """Return True if ``a`` and ``b`` name the same file."""
    return normalize_path(a) == normalize_path(b)


def to_relative_path(absolute_path: str, repo_root: str) -> str:
    """Convert an absolute path to one relative to ``repo_root``.

    Backslashes are treated as separators. Relative input is returned as-is;
    absolute paths outside ``repo_root`` only lose their leading slash.

    Examples:
        to_relative_path("/home/a/proj/src/x.py", "/home/a/proj")  # "src/x.py"
        to_relative_path("src/x.py", "/home/a/proj")               # "src/x.py"
    """
    normalized = absolute_path.replace("\\", "/")
    root = repo_root.replace("\\", "/").rstrip("/")

    if not normalized.startswith("/") and not re.match(r"^[A-Za-z]:", normalized):
        return normalized

    if root and normalized.startswith(root + "/"):
        return normalized[len(root) + 1:]

    return normalized[1:] if normalized.startswith("/") else normalized
