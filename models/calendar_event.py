# toolbox/models/calendar_event.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from models.base import new_id
from utils.datetime_utils import utc_now


class CalendarEventBase(SQLModel):
    title: str
    description: Optional[str] = None
    date: str                         # YYYY-MM-DD
    start_time: Optional[str] = None  # HH:MM
    end_time: Optional[str] = None
    event_type: str = "personal"      # work / personal / health / study / meeting / other
    priority: str = "medium"
    is_all_day: bool = False
    reminder: Optional[int] = None    # minutes before start
    repeat_type: Optional[str] = None
    location: Optional[str] = None


class CalendarEvent(CalendarEventBase, table=True):
    __tablename__ = "calendar_events"

    id: str = Field(default_factory=new_id, primary_key=True)
    attendees: Optional[str] = None   # JSON array
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class EventCreate(CalendarEventBase):
    attendees: Optional[List[str]] = None


class EventUpdate(EventCreate):
    """Overwrites the whole row; nullable fields left out become None."""

    id: str
    event_type: str
    priority: str
    is_all_day: bool


class EventRead(CalendarEventBase):
    id: str
    attendees: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime


__all__ = ["CalendarEvent", "EventCreate", "EventRead", "EventUpdate"]
