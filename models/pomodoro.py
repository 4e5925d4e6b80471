# toolbox/models/pomodoro.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from core.settings import POMODORO_DEFAULTS
from models.base import new_id
from utils.datetime_utils import utc_now


SESSION_TYPES = ("work", "short_break", "long_break")


class PomodoroSession(SQLModel, table=True):
    __tablename__ = "pomodoro_sessions"

    id: str = Field(default_factory=new_id, primary_key=True)
    session_type: str                 # work / short_break / long_break
    duration: int                     # seconds
    completed: bool = False
    task_title: Optional[str] = None
    notes: Optional[str] = None
    date: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)


class PomodoroSessionCreate(SQLModel):
    session_type: str
    duration: int
    task_title: Optional[str] = None
    notes: Optional[str] = None
    date: str
    started_at: Optional[datetime] = None

    @field_validator("session_type")
    @classmethod
    def _known_session_type(cls, value: str) -> str:
        if value not in SESSION_TYPES:
            raise ValueError(f"Unsupported session type: {value}")
        return value


class PomodoroSessionUpdate(SQLModel):
    id: str
    completed: bool
    task_title: Optional[str] = None
    notes: Optional[str] = None
    ended_at: Optional[datetime] = None


class PomodoroSessionRead(SQLModel):
    id: str
    session_type: str
    duration: int
    completed: bool
    task_title: Optional[str] = None
    notes: Optional[str] = None
    date: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime


class PomodoroDayStats(SQLModel):
    date: str
    total_sessions: int
    completed_work_sessions: int
    focus_minutes: int


class PomodoroSettingsBase(SQLModel):
    work_time: int = POMODORO_DEFAULTS.work_time              # minutes
    short_break: int = POMODORO_DEFAULTS.short_break
    long_break: int = POMODORO_DEFAULTS.long_break
    long_break_interval: int = POMODORO_DEFAULTS.long_break_interval
    auto_start_breaks: bool = POMODORO_DEFAULTS.auto_start_breaks
    auto_start_work: bool = POMODORO_DEFAULTS.auto_start_work
    notification_enabled: bool = POMODORO_DEFAULTS.notification_enabled


class PomodoroSettings(PomodoroSettingsBase, table=True):
    """Singleton row, seeded by ``storage.db.init_db``."""

    __tablename__ = "pomodoro_settings"

    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class PomodoroSettingsUpdate(SQLModel):
    work_time: int
    short_break: int
    long_break: int
    long_break_interval: int
    auto_start_breaks: bool
    auto_start_work: bool
    notification_enabled: bool


class PomodoroSettingsRead(PomodoroSettingsBase):
    id: str
    created_at: datetime
    updated_at: datetime


__all__ = [
    "PomodoroDayStats",
    "PomodoroSession",
    "PomodoroSessionCreate",
    "PomodoroSessionRead",
    "PomodoroSessionUpdate",
    "PomodoroSettings",
    "PomodoroSettingsRead",
    "PomodoroSettingsUpdate",
    "SESSION_TYPES",
]
