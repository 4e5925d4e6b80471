# toolbox/services/events.py
from __future__ import annotations

from typing import Callable, List

from sqlmodel import Session, select

from core.errors import NotFound
from core.logs import ensure_logger
from core.priorities import normalize_priority
from models.base import read_from_row
from models.calendar_event import CalendarEvent, EventCreate, EventRead, EventUpdate
from utils.datetime_utils import utc_now
from utils.json_fields import decode_list, encode_list


logger = ensure_logger("events")


def _to_read(row: CalendarEvent) -> EventRead:
    return read_from_row(EventRead, row, attendees=decode_list(row.attendees))


class EventService:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load(self, s: Session, event_id: str) -> CalendarEvent:
        row = s.get(CalendarEvent, event_id)
        if row is None:
            raise NotFound("CalendarEvent", event_id)
        return row

    def create(self, request: EventCreate) -> EventRead:
        fields = request.model_dump(exclude={"attendees"})
        fields["priority"] = normalize_priority(request.priority)
        now = utc_now()
        with self._session_factory() as s:
            row = CalendarEvent(
                **fields,
                attendees=encode_list(request.attendees),
                created_at=now,
                updated_at=now,
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Event created: %s", row.id)
            return _to_read(row)

    def get(self, event_id: str) -> EventRead:
        with self._session_factory() as s:
            return _to_read(self._load(s, event_id))

    def list_all(self) -> List[EventRead]:
        with self._session_factory() as s:
            stmt = select(CalendarEvent).order_by(
                CalendarEvent.date.asc(), CalendarEvent.start_time.asc()
            )
            return [_to_read(row) for row in s.exec(stmt)]

    def list_by_date_range(self, start_date: str, end_date: str) -> List[EventRead]:
        with self._session_factory() as s:
            stmt = (
                select(CalendarEvent)
                .where(CalendarEvent.date >= start_date, CalendarEvent.date <= end_date)
                .order_by(CalendarEvent.date.asc(), CalendarEvent.start_time.asc())
            )
            return [_to_read(row) for row in s.exec(stmt)]

    def update(self, request: EventUpdate) -> EventRead:
        with self._session_factory() as s:
            row = self._load(s, request.id)
            for key, value in request.model_dump(exclude={"id", "attendees"}).items():
                setattr(row, key, value)
            row.priority = normalize_priority(request.priority)
            row.attendees = encode_list(request.attendees)
            row.updated_at = utc_now()
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Event updated: %s", row.id)
            return _to_read(row)

    def delete(self, event_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(CalendarEvent, event_id)
            if row:
                s.delete(row)
                s.commit()
                logger.debug("Event deleted: %s", event_id)


__all__ = ["EventService"]
