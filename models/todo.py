# toolbox/models/todo.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from models.base import new_id
from utils.datetime_utils import utc_now


class TodoBase(SQLModel):
    title: str
    description: Optional[str] = None
    priority: str = "medium"          # low / medium / high
    due_date: Optional[str] = None
    category: str = "general"


class Todo(TodoBase, table=True):
    __tablename__ = "todos"

    id: str = Field(default_factory=new_id, primary_key=True)
    completed: bool = False
    tags: Optional[str] = None        # JSON array
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TodoCreate(TodoBase):
    tags: Optional[List[str]] = None


class TodoUpdate(TodoCreate):
    id: str
    priority: str
    category: str
    completed: bool


class TodoRead(TodoBase):
    id: str
    completed: bool
    tags: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime


class Subtask(SQLModel, table=True):
    __tablename__ = "subtasks"

    id: str = Field(default_factory=new_id, primary_key=True)
    todo_id: str = Field(foreign_key="todos.id", ondelete="CASCADE")
    title: str
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class SubtaskCreate(SQLModel):
    todo_id: str
    title: str


class SubtaskRead(SQLModel):
    id: str
    todo_id: str
    title: str
    completed: bool
    created_at: datetime


__all__ = [
    "Subtask",
    "SubtaskCreate",
    "SubtaskRead",
    "Todo",
    "TodoCreate",
    "TodoRead",
    "TodoUpdate",
]
