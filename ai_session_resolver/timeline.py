"""
Directional index walks over an event log.

Backward covers ``pivot, pivot-1, ..., 0``; forward covers ``pivot+1 .. end``.
A pivot past the end behaves like the last index; a negative pivot has no
backward range and a forward range starting at 0.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from typing import Sized


def backward_indices(events: Sized, pivot: int) -> range:
    """Indices from ``pivot`` (inclusive, clamped) down to 0."""
    if pivot < 0:
        return range(0)
    return range(min(pivot, len(events) - 1), -1, -1)


def forward_indices(events: Sized, pivot: int) -> range:
    """Indices from ``pivot + 1`` up to the end."""
    return range(max(pivot + 1, 0), len(events))
