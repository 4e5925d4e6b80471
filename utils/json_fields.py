"""Encode and decode list columns stored as JSON text."""
from __future__ import annotations

import json
from typing import Iterable, List, Optional

from core.errors import StorageFault


def encode_list(values: Optional[Iterable[str]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps([str(v) for v in values], ensure_ascii=False)


def decode_list(payload: Optional[str]) -> Optional[List[str]]:
    if payload is None:
        return None
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise StorageFault(f"Malformed list column: {payload!r}") from exc
    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        raise StorageFault(f"List column is not an array of strings: {payload!r}")
    return data


__all__ = ["decode_list", "encode_list"]
