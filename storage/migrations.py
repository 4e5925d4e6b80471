"""Ad-hoc database migrations for Toolbox."""

from __future__ import annotations

from sqlalchemy import text


def _index_exists(conn, name: str) -> bool:
    result = conn.execute(
        text("SELECT 1 FROM sqlite_master WHERE type = 'index' AND name = :name"),
        {"name": name},
    )
    return result.first() is not None


def ensure_habit_record_uniqueness(conn) -> None:
    """Promote ``(habit_id, date)`` to a real unique key.

    Files written before the index existed may hold duplicates; the oldest
    record of each pair survives.
    """

    if _index_exists(conn, "ux_habit_records_habit_date"):
        return
    conn.execute(
        text(
            """
            DELETE FROM habit_records
            WHERE rowid NOT IN (
                SELECT rowid FROM (
                    SELECT rowid,
                           ROW_NUMBER() OVER (
                               PARTITION BY habit_id, date
                               ORDER BY created_at, rowid
                           ) AS rn
                    FROM habit_records
                )
                WHERE rn = 1
            )
            """
        )
    )
    conn.execute(
        text(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ux_habit_records_habit_date
            ON habit_records (habit_id, date)
            """
        )
    )


def ensure_lookup_indexes(conn) -> None:
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_calendar_events_date ON calendar_events(date)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_pomodoro_sessions_date ON pomodoro_sessions(date)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_subtasks_todo ON subtasks(todo_id)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_habit_records_habit ON habit_records(habit_id)"))


def ensure_single_settings_row(conn) -> None:
    conn.execute(
        text(
            """
            DELETE FROM pomodoro_settings
            WHERE id NOT IN (
                SELECT id FROM pomodoro_settings
                ORDER BY created_at, rowid
                LIMIT 1
            )
            """
        )
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        ensure_habit_record_uniqueness(conn)
        ensure_lookup_indexes(conn)
        ensure_single_settings_row(conn)


__all__ = ["run_all"]
