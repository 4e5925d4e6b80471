# toolbox/services/habits.py
from __future__ import annotations

from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.errors import NotFound
from core.logs import ensure_logger
from models.base import read_from_row
from models.habit import (
    Habit,
    HabitCreate,
    HabitRead,
    HabitRecord,
    HabitRecordCreate,
    HabitRecordRead,
    HabitStats,
    HabitUpdate,
)
from utils.datetime_utils import shift_day, utc_now


logger = ensure_logger("habits")

MAX_STREAK_DAYS = 365


class HabitService:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load(self, s: Session, habit_id: str) -> Habit:
        row = s.get(Habit, habit_id)
        if row is None:
            raise NotFound("Habit", habit_id)
        return row

    def _load_record(self, s: Session, record_id: str) -> HabitRecord:
        row = s.get(HabitRecord, record_id)
        if row is None:
            raise NotFound("HabitRecord", record_id)
        return row

    def _find_record(self, s: Session, habit_id: str, date: str) -> Optional[HabitRecord]:
        stmt = select(HabitRecord).where(HabitRecord.habit_id == habit_id, HabitRecord.date == date)
        return s.exec(stmt).first()

    # ---------- habits ----------
    def create(self, request: HabitCreate) -> HabitRead:
        now = utc_now()
        with self._session_factory() as s:
            row = Habit(**request.model_dump(), created_at=now, updated_at=now)
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Habit created: %s", row.id)
            return read_from_row(HabitRead, row)

    def get(self, habit_id: str) -> HabitRead:
        with self._session_factory() as s:
            return read_from_row(HabitRead, self._load(s, habit_id))

    def list_all(self, active_only: bool = False) -> List[HabitRead]:
        with self._session_factory() as s:
            stmt = select(Habit)
            if active_only:
                stmt = stmt.where(Habit.is_active == True)  # noqa: E712
            stmt = stmt.order_by(Habit.created_at.asc())
            return [read_from_row(HabitRead, row) for row in s.exec(stmt)]

    def update(self, request: HabitUpdate) -> HabitRead:
        with self._session_factory() as s:
            row = self._load(s, request.id)
            for key, value in request.model_dump(exclude={"id"}).items():
                setattr(row, key, value)
            row.updated_at = utc_now()
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Habit updated: %s", row.id)
            return read_from_row(HabitRead, row)

    def delete(self, habit_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(Habit, habit_id)
            if row:
                s.delete(row)
                s.commit()
                logger.debug("Habit deleted: %s", habit_id)

    # ---------- records ----------
    def create_record(self, request: HabitRecordCreate) -> HabitRecordRead:
        with self._session_factory() as s:
            row = HabitRecord(**request.model_dump(), created_at=utc_now())
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Habit record created: %s (%s)", row.id, row.date)
            return read_from_row(HabitRecordRead, row)

    def get_record(self, record_id: str) -> HabitRecordRead:
        with self._session_factory() as s:
            return read_from_row(HabitRecordRead, self._load_record(s, record_id))

    def get_record_by_date(self, habit_id: str, date: str) -> Optional[HabitRecordRead]:
        with self._session_factory() as s:
            row = self._find_record(s, habit_id, date)
            return read_from_row(HabitRecordRead, row) if row else None

    def list_records(self, habit_id: str) -> List[HabitRecordRead]:
        with self._session_factory() as s:
            stmt = (
                select(HabitRecord)
                .where(HabitRecord.habit_id == habit_id)
                .order_by(HabitRecord.date.desc())
            )
            return [read_from_row(HabitRecordRead, row) for row in s.exec(stmt)]

    def list_records_in_range(self, habit_id: str, start_date: str, end_date: str) -> List[HabitRecordRead]:
        with self._session_factory() as s:
            stmt = (
                select(HabitRecord)
                .where(
                    HabitRecord.habit_id == habit_id,
                    HabitRecord.date >= start_date,
                    HabitRecord.date <= end_date,
                )
                .order_by(HabitRecord.date.desc())
            )
            return [read_from_row(HabitRecordRead, row) for row in s.exec(stmt)]

    def update_record(
        self,
        record_id: str,
        completed: bool,
        value: Optional[int] = None,
        note: Optional[str] = None,
    ) -> HabitRecordRead:
        with self._session_factory() as s:
            row = self._load_record(s, record_id)
            row.completed = completed
            row.value = value
            row.note = note
            s.add(row)
            s.commit()
            s.refresh(row)
            return read_from_row(HabitRecordRead, row)

    def delete_record(self, record_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(HabitRecord, record_id)
            if row:
                s.delete(row)
                s.commit()

    def _get_or_create(self, s: Session, habit_id: str, date: str) -> HabitRecord:
        existing = self._find_record(s, habit_id, date)
        if existing is not None:
            return existing
        row = HabitRecord(habit_id=habit_id, date=date, completed=False, created_at=utc_now())
        s.add(row)
        try:
            s.commit()
        except IntegrityError:
            # Lost a race on ux_habit_records_habit_date; the winner's row is the answer.
            s.rollback()
            existing = self._find_record(s, habit_id, date)
            if existing is None:
                raise
            return existing
        s.refresh(row)
        logger.debug("Habit record created: %s (%s)", row.id, date)
        return row

    def get_or_create_record(self, habit_id: str, date: str) -> HabitRecordRead:
        with self._session_factory() as s:
            return read_from_row(HabitRecordRead, self._get_or_create(s, habit_id, date))

    def toggle_record(self, habit_id: str, date: str) -> HabitRecordRead:
        with self._session_factory() as s:
            row = self._get_or_create(s, habit_id, date)
            row.completed = not row.completed
            s.add(row)
            s.commit()
            s.refresh(row)
            return read_from_row(HabitRecordRead, row)

    # ---------- statistics ----------
    def stats(self, habit_id: str, today: str, days: int = 30) -> HabitStats:
        """Current streak ending at ``today`` and completion rate over ``days``."""

        earliest = shift_day(today, -max(days, MAX_STREAK_DAYS))
        with self._session_factory() as s:
            self._load(s, habit_id)
            stmt = select(HabitRecord).where(
                HabitRecord.habit_id == habit_id,
                HabitRecord.date > earliest,
                HabitRecord.date <= today,
            )
            completed_by_day = {row.date: row.completed for row in s.exec(stmt)}

        streak = 0
        cursor = today
        while streak < MAX_STREAK_DAYS and completed_by_day.get(cursor):
            streak += 1
            cursor = shift_day(cursor, -1)

        window_start = shift_day(today, -days)
        window = [done for day, done in completed_by_day.items() if day > window_start]
        rate = round(100 * sum(window) / len(window)) if window else 0
        return HabitStats(
            habit_id=habit_id,
            streak_days=streak,
            completion_rate=rate,
            window_days=days,
        )


__all__ = ["HabitService"]
