"""Helpers shared by the record models."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Type, TypeVar

from sqlmodel import SQLModel

from utils.datetime_utils import ensure_utc


ReadT = TypeVar("ReadT", bound=SQLModel)


def new_id() -> str:
    return str(uuid.uuid4())


def read_from_row(read_cls: Type[ReadT], row: SQLModel, **overrides: Any) -> ReadT:
    """Build the caller-facing model from a table row.

    ``overrides`` replace raw column values, e.g. decoded list columns.
    Timestamps come back from SQLite without tzinfo and are pinned to UTC.
    """

    data = row.model_dump()
    data.update(overrides)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = ensure_utc(value)
    return read_cls.model_validate(data)


__all__ = ["new_id", "read_from_row"]
