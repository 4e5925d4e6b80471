# toolbox/models/habit.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from models.base import new_id
from utils.datetime_utils import utc_now


class HabitBase(SQLModel):
    name: str
    description: Optional[str] = None
    category: str = "general"
    color: str = "#3B82F6"
    target: int = 1                   # expected > 0, not enforced
    unit: str = "times"
    frequency: str = "daily"
    is_active: bool = True


class Habit(HabitBase, table=True):
    __tablename__ = "habits"

    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class HabitCreate(HabitBase):
    pass


class HabitUpdate(HabitBase):
    id: str
    category: str
    color: str
    target: int
    unit: str
    frequency: str
    is_active: bool


class HabitRead(HabitBase):
    id: str
    created_at: datetime
    updated_at: datetime


class HabitRecordBase(SQLModel):
    habit_id: str
    date: str
    completed: bool = False
    value: Optional[int] = None
    note: Optional[str] = None


class HabitRecord(HabitRecordBase, table=True):
    """One check-in of a habit on a calendar day.

    ``(habit_id, date)`` is unique through ``ux_habit_records_habit_date``,
    created by the migrations so that legacy files get it too.
    """

    __tablename__ = "habit_records"

    id: str = Field(default_factory=new_id, primary_key=True)
    habit_id: str = Field(foreign_key="habits.id", ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now)


class HabitRecordCreate(HabitRecordBase):
    pass


class HabitRecordRead(HabitRecordBase):
    id: str
    created_at: datetime


class HabitStats(SQLModel):
    habit_id: str
    streak_days: int
    completion_rate: int              # percent, 0..100
    window_days: int


__all__ = [
    "Habit",
    "HabitCreate",
    "HabitRead",
    "HabitRecord",
    "HabitRecordCreate",
    "HabitRecordRead",
    "HabitStats",
    "HabitUpdate",
]
