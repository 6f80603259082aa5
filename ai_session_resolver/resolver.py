"""
Path resolution: which file is an event, or the story around it, about?

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import dataclasses
import logging
from typing import List, Optional, Sequence, Tuple

from .extractors import EVIDENCE_EXTRACTORS, EvidenceExtractor
from .models import Event, EventPathRow, PathResolution, PathSource
from .timeline import backward_indices, forward_indices
from .types import EventLog

logger = logging.getLogger("ai_session_resolver.resolver")


def resolve_path_for_event(
    event: Event,
    extractors: Sequence[EvidenceExtractor] = EVIDENCE_EXTRACTORS,
) -> Optional[PathResolution]:
    """Resolve the file path a single event is about.

    Runs ``extractors`` in priority order; the first one that yields at least
    one valid path wins, and its first path (content order) is returned.

    Args:
        event: Event to inspect.
        extractors: Strategies to try, highest priority first.

    Returns:
        PathResolution tagged with the winning strategy's source and
        confidence, or None when no strategy finds anything.
    """
    for extractor in extractors:
        paths = extractor.extract(event)
        if paths:
            return PathResolution(path=paths[0], source=extractor.source, confidence=extractor.confidence)
    return None


def _tag_at(resolution: PathResolution, index: int, pivot: int) -> PathResolution:
    source = resolution.source if index == pivot else PathSource.HISTORY
    return dataclasses.replace(resolution, source=source, event_index=index)


def scan_path_backward(events: EventLog, pivot: int) -> Optional[Tuple[int, PathResolution]]:
    """Return ``(index, resolution)`` for the nearest hit at or before ``pivot``."""
    for i in backward_indices(events, pivot):
        resolution = resolve_path_for_event(events[i])
        if resolution:
            return i, resolution
    return None


def scan_path_forward(events: EventLog, pivot: int) -> Optional[Tuple[int, PathResolution]]:
    """Return ``(index, resolution)`` for the nearest hit strictly after ``pivot``."""
    for i in forward_indices(events, pivot):
        resolution = resolve_path_for_event(events[i])
        if resolution:
            return i, resolution
    return None


def resolve_path_near(events: EventLog, pivot_index: int) -> Optional[PathResolution]:
    """Resolve the path under discussion at ``pivot_index``, looking backward only.

    The pivot event is checked first, then earlier events one by one. A hit
    away from the pivot keeps its confidence but is tagged ``history``.

    Returns:
        PathResolution with ``event_index`` set, or None.
    """
    if not events:
        return None
    hit = scan_path_backward(events, pivot_index)
    if hit is None:
        logger.debug("no path at or before index %d", pivot_index)
        return None
    index, resolution = hit
    logger.debug("path %r found at index %d (pivot %d)", resolution.path, index, pivot_index)
    return _tag_at(resolution, index, pivot_index)


def resolve_path_around(events: EventLog, pivot_index: int) -> Optional[PathResolution]:
    """Like ``resolve_path_near``, falling back to later events when nothing precedes.

    A backward hit always wins over a forward one, even when the forward hit
    is closer to the pivot.
    """
    resolution = resolve_path_near(events, pivot_index)
    if resolution is not None:
        return resolution
    hit = scan_path_forward(events, pivot_index)
    if hit is None:
        return None
    index, found = hit
    logger.debug("path %r found ahead at index %d (pivot %d)", found.path, index, pivot_index)
    return _tag_at(found, index, pivot_index)


def scan_event_paths(events: EventLog) -> List[EventPathRow]:
    """Resolve every event on its own (no history), one row per event."""
    rows = []
    for i, event in enumerate(events):
        resolution = resolve_path_for_event(event)
        if resolution is not None:
            resolution = dataclasses.replace(resolution, event_index=i)
        rows.append(EventPathRow(index=i, event_id=event.id, role=event.role, resolution=resolution))
    return rows
