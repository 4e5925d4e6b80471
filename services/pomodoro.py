# toolbox/services/pomodoro.py
from __future__ import annotations

from typing import Callable, List

from sqlmodel import Session, select

from core.errors import NotFound
from core.logs import ensure_logger
from models.base import read_from_row
from models.pomodoro import (
    PomodoroDayStats,
    PomodoroSession,
    PomodoroSessionCreate,
    PomodoroSessionRead,
    PomodoroSessionUpdate,
    PomodoroSettings,
    PomodoroSettingsRead,
    PomodoroSettingsUpdate,
)
from utils.datetime_utils import ensure_utc, utc_now


logger = ensure_logger("pomodoro")


class PomodoroService:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load_session(self, s: Session, session_id: str) -> PomodoroSession:
        row = s.get(PomodoroSession, session_id)
        if row is None:
            raise NotFound("PomodoroSession", session_id)
        return row

    def _load_settings(self, s: Session) -> PomodoroSettings:
        stmt = select(PomodoroSettings).order_by(PomodoroSettings.created_at.asc())
        row = s.exec(stmt).first()
        if row is None:
            raise NotFound("PomodoroSettings", "singleton")
        return row

    # ---------- sessions ----------
    def create_session(self, request: PomodoroSessionCreate) -> PomodoroSessionRead:
        with self._session_factory() as s:
            row = PomodoroSession(
                session_type=request.session_type,
                duration=request.duration,
                completed=False,
                task_title=request.task_title,
                notes=request.notes,
                date=request.date,
                started_at=ensure_utc(request.started_at),
                created_at=utc_now(),
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Pomodoro session created: %s (%s)", row.id, row.session_type)
            return read_from_row(PomodoroSessionRead, row)

    def get_session(self, session_id: str) -> PomodoroSessionRead:
        with self._session_factory() as s:
            return read_from_row(PomodoroSessionRead, self._load_session(s, session_id))

    def update_session(self, request: PomodoroSessionUpdate) -> PomodoroSessionRead:
        with self._session_factory() as s:
            row = self._load_session(s, request.id)
            row.completed = request.completed
            row.task_title = request.task_title
            row.notes = request.notes
            row.ended_at = ensure_utc(request.ended_at)
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Pomodoro session updated: %s", row.id)
            return read_from_row(PomodoroSessionRead, row)

    def delete_session(self, session_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(PomodoroSession, session_id)
            if row:
                s.delete(row)
                s.commit()

    def list_sessions_by_date(self, date: str) -> List[PomodoroSessionRead]:
        with self._session_factory() as s:
            stmt = (
                select(PomodoroSession)
                .where(PomodoroSession.date == date)
                .order_by(PomodoroSession.created_at.asc())
            )
            return [read_from_row(PomodoroSessionRead, row) for row in s.exec(stmt)]

    def list_sessions_in_range(self, start_date: str, end_date: str) -> List[PomodoroSessionRead]:
        with self._session_factory() as s:
            stmt = (
                select(PomodoroSession)
                .where(PomodoroSession.date >= start_date, PomodoroSession.date <= end_date)
                .order_by(PomodoroSession.date.asc(), PomodoroSession.created_at.asc())
            )
            return [read_from_row(PomodoroSessionRead, row) for row in s.exec(stmt)]

    def day_stats(self, date: str) -> PomodoroDayStats:
        sessions = self.list_sessions_by_date(date)
        work_done = [x for x in sessions if x.completed and x.session_type == "work"]
        return PomodoroDayStats(
            date=date,
            total_sessions=len(sessions),
            completed_work_sessions=len(work_done),
            focus_minutes=sum(x.duration for x in work_done) // 60,
        )

    # ---------- settings ----------
    def get_settings(self) -> PomodoroSettingsRead:
        with self._session_factory() as s:
            return read_from_row(PomodoroSettingsRead, self._load_settings(s))

    def update_settings(self, request: PomodoroSettingsUpdate) -> PomodoroSettingsRead:
        with self._session_factory() as s:
            row = self._load_settings(s)
            for key, value in request.model_dump().items():
                setattr(row, key, value)
            row.updated_at = utc_now()
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Pomodoro settings updated")
            return read_from_row(PomodoroSettingsRead, row)


__all__ = ["PomodoroService"]
