"""Utility helpers for event and todo priorities."""
from __future__ import annotations

from typing import Optional, Tuple

# Ordered from least to most urgent.
PRIORITIES: Tuple[str, ...] = ("low", "medium", "high")

DEFAULT_PRIORITY = "medium"


def normalize_priority(value: Optional[str]) -> str:
    """Map external values onto the supported priority names."""
    if value is None:
        return DEFAULT_PRIORITY
    cleaned = str(value).strip().lower()
    if cleaned in PRIORITIES:
        return cleaned
    return DEFAULT_PRIORITY


__all__ = ["DEFAULT_PRIORITY", "PRIORITIES", "normalize_priority"]
