# toolbox/models/note.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from models.base import new_id
from utils.datetime_utils import utc_now


class NoteBase(SQLModel):
    title: str
    content: str = ""
    category: str = "general"
    color: str = "#fef3c7"


class Note(NoteBase, table=True):
    __tablename__ = "notes"

    id: str = Field(default_factory=new_id, primary_key=True)
    tags: Optional[str] = None        # JSON array
    is_pinned: bool = False
    is_archived: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class NoteCreate(NoteBase):
    tags: Optional[List[str]] = None


class NoteUpdate(NoteCreate):
    id: str
    content: str
    category: str
    color: str
    is_pinned: bool
    is_archived: bool


class NoteRead(NoteBase):
    id: str
    tags: Optional[List[str]] = None
    is_pinned: bool
    is_archived: bool
    created_at: datetime
    updated_at: datetime


__all__ = ["Note", "NoteCreate", "NoteRead", "NoteUpdate"]
