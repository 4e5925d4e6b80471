"""Record store facade: one lock, one engine, every command."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session

from core.errors import StorageFault, StoreError, UnknownCommand
from core.logs import ensure_logger
from core.settings import BACKUP, BackupSettings
from models import (
    EventCreate,
    EventUpdate,
    HabitCreate,
    HabitRecordCreate,
    HabitUpdate,
    NoteCreate,
    NoteUpdate,
    PomodoroSessionCreate,
    PomodoroSessionUpdate,
    PomodoroSettingsUpdate,
    SubtaskCreate,
    TodoCreate,
    TodoUpdate,
)
from services.events import EventService
from services.habits import HabitService
from services.notes import NoteService
from services.pomodoro import PomodoroService
from services.todos import TodoService
from storage.db import create_store_engine, get_session, init_db


logger = ensure_logger("store")


@dataclass(frozen=True)
class Command:
    name: str
    handler: Callable[..., Any]
    request_model: Optional[Type[SQLModel]] = None


class RecordStore:
    """Serializes every operation behind a single re-entrant lock.

    The lock is held for the whole operation, so multi-statement sequences
    such as get-or-create never interleave with another command.

    :meth:`execute` is the only serialized entry point. The service
    attributes (``events``, ``habits``, ``todos``, ``pomodoro``, ``notes``)
    take no lock and raise raw SQLAlchemy errors; use them only from a
    single thread, as the tests do.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._lock = threading.RLock()
        session_factory: Callable[[], Session] = lambda: get_session(self.engine)
        self.events = EventService(session_factory)
        self.habits = HabitService(session_factory)
        self.todos = TodoService(session_factory)
        self.pomodoro = PomodoroService(session_factory)
        self.notes = NoteService(session_factory)
        self._commands: Dict[str, Command] = {}
        self._register_commands()

    @classmethod
    def open(
        cls,
        db_path: str | Path | None = None,
        *,
        backup: Optional[BackupSettings] = BACKUP,
    ) -> "RecordStore":
        """Create the database file if needed, initialise it and wrap it."""

        engine = create_store_engine(db_path)
        try:
            init_db(engine, backup=backup)
        except SQLAlchemyError as exc:
            logger.error("Database initialisation failed: %s", exc)
            raise StorageFault(str(exc)) from exc
        return cls(engine)

    def close(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    def _register(self, name: str, handler: Callable[..., Any], request_model=None) -> None:
        self._commands[name] = Command(name, handler, request_model)

    def _register_commands(self) -> None:
        ev, hb, td, pm, nt = self.events, self.habits, self.todos, self.pomodoro, self.notes

        self._register("get_all_events", ev.list_all)
        self._register("get_events_by_date_range", ev.list_by_date_range)
        self._register("get_event", lambda id: ev.get(id))
        self._register("create_event", ev.create, EventCreate)
        self._register("update_event", ev.update, EventUpdate)
        self._register("delete_event", lambda id: ev.delete(id))

        self._register("get_all_habits", hb.list_all)
        self._register("get_habit", lambda id: hb.get(id))
        self._register("create_habit", hb.create, HabitCreate)
        self._register("update_habit", hb.update, HabitUpdate)
        self._register("delete_habit", lambda id: hb.delete(id))
        self._register("get_habit_stats", hb.stats)

        self._register("get_habit_records_by_date_range", hb.list_records_in_range)
        self._register("create_habit_record", hb.create_record, HabitRecordCreate)
        self._register("get_habit_record", lambda id: hb.get_record(id))
        self._register("get_habit_record_by_date", hb.get_record_by_date)
        self._register("get_or_create_habit_record", hb.get_or_create_record)
        self._register(
            "update_habit_record",
            lambda id, completed, value=None, note=None: hb.update_record(id, completed, value, note),
        )
        self._register("get_habit_records_by_habit", hb.list_records)
        self._register("toggle_habit_record", hb.toggle_record)
        self._register("delete_habit_record", lambda id: hb.delete_record(id))

        self._register("get_all_todos", td.list_all)
        self._register("get_todo", lambda id: td.get(id))
        self._register("create_todo", td.create, TodoCreate)
        self._register("update_todo", td.update, TodoUpdate)
        self._register("delete_todo", lambda id: td.delete(id))
        self._register("toggle_todo_completion", lambda id: td.toggle(id))

        self._register("get_subtasks_by_todo", td.list_subtasks)
        self._register("get_subtask", lambda id: td.get_subtask(id))
        self._register("create_subtask", td.create_subtask, SubtaskCreate)
        self._register("toggle_subtask_completion", lambda id: td.toggle_subtask(id))
        self._register("delete_subtask", lambda id: td.delete_subtask(id))

        self._register("create_pomodoro_session", pm.create_session, PomodoroSessionCreate)
        self._register("update_pomodoro_session", pm.update_session, PomodoroSessionUpdate)
        self._register("get_pomodoro_session", lambda id: pm.get_session(id))
        self._register("delete_pomodoro_session", lambda id: pm.delete_session(id))
        self._register("get_pomodoro_sessions_by_date", pm.list_sessions_by_date)
        self._register("get_pomodoro_sessions_by_date_range", pm.list_sessions_in_range)
        self._register("get_pomodoro_stats", pm.day_stats)
        self._register("get_pomodoro_settings", pm.get_settings)
        self._register("update_pomodoro_settings", pm.update_settings, PomodoroSettingsUpdate)

        self._register("get_all_notes", nt.list_all)
        self._register("get_note", lambda id: nt.get(id))
        self._register("create_note", nt.create, NoteCreate)
        self._register("update_note", nt.update, NoteUpdate)
        self._register("delete_note", lambda id: nt.delete(id))
        self._register("toggle_note_pin", lambda id: nt.toggle_pin(id))

    # ------------------------------------------------------------------
    @property
    def commands(self) -> List[str]:
        return sorted(self._commands)

    def command(self, name: str) -> Command:
        entry = self._commands.get(name)
        if entry is None:
            raise UnknownCommand(name)
        return entry

    def execute(self, name: str, **params: Any) -> Any:
        """Run one command to completion while holding the store lock."""

        entry = self.command(name)
        with self._lock:
            try:
                return entry.handler(**params)
            except StoreError:
                raise
            except (SQLAlchemyError, OverflowError) as exc:
                # sqlite3 raises a bare OverflowError binding integers wider than 64 bits.
                logger.error("Command %s failed: %s", name, exc)
                raise StorageFault(str(exc)) from exc


__all__ = ["Command", "RecordStore"]
