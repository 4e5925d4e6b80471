import threading

import pytest

from core.errors import UnknownCommand
from models import HabitCreate
from services.store import RecordStore


EXPECTED_COMMANDS = {
    "get_all_events", "get_events_by_date_range", "get_event", "create_event",
    "update_event", "delete_event",
    "get_all_habits", "get_habit", "create_habit", "update_habit", "delete_habit",
    "get_habit_stats", "get_habit_records_by_date_range", "create_habit_record",
    "get_habit_record", "get_habit_record_by_date", "get_or_create_habit_record",
    "update_habit_record", "get_habit_records_by_habit", "toggle_habit_record",
    "delete_habit_record",
    "get_all_todos", "get_todo", "create_todo", "update_todo", "delete_todo",
    "toggle_todo_completion", "get_subtasks_by_todo", "get_subtask", "create_subtask",
    "toggle_subtask_completion", "delete_subtask",
    "create_pomodoro_session", "update_pomodoro_session", "get_pomodoro_session",
    "delete_pomodoro_session", "get_pomodoro_sessions_by_date",
    "get_pomodoro_sessions_by_date_range", "get_pomodoro_stats",
    "get_pomodoro_settings", "update_pomodoro_settings",
    "get_all_notes", "get_note", "create_note", "update_note", "delete_note",
    "toggle_note_pin",
}


def test_every_command_is_registered(store):
    assert set(store.commands) == EXPECTED_COMMANDS


def test_unknown_command_raises(store):
    with pytest.raises(UnknownCommand):
        store.execute("format_disk")


def test_open_creates_database_file(tmp_path):
    path = tmp_path / "nested" / "data.db"
    record_store = RecordStore.open(path, backup=None)
    try:
        assert path.exists()
        assert record_store.execute("get_all_todos") == []
    finally:
        record_store.close()


def test_data_survives_reopen(db_path):
    first = RecordStore.open(db_path, backup=None)
    habit = first.execute("create_habit", request=HabitCreate(name="Walk"))
    first.close()

    second = RecordStore.open(db_path, backup=None)
    try:
        assert second.execute("get_habit", id=habit.id).name == "Walk"
    finally:
        second.close()


def test_concurrent_get_or_create_yields_one_record(store):
    habit = store.execute("create_habit", request=HabitCreate(name="Read"))
    results = []
    errors = []

    def worker():
        try:
            results.append(
                store.execute("get_or_create_habit_record", habit_id=habit.id, date="2024-05-01")
            )
        except Exception as exc:  # pragma: no cover - surfaced by the assert below
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len({r.id for r in results}) == 1
    assert len(store.execute("get_habit_records_by_habit", habit_id=habit.id)) == 1


def test_execute_wraps_errors_that_services_raise_raw(store):
    from sqlalchemy.exc import IntegrityError

    from core.errors import StorageFault
    from models import SubtaskCreate

    orphan = SubtaskCreate(todo_id="nope", title="orphan")

    with pytest.raises(IntegrityError):
        store.todos.create_subtask(orphan)
    with pytest.raises(StorageFault):
        store.execute("create_subtask", request=orphan)
