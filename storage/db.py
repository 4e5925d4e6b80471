# toolbox/storage/db.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy import event, func
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, select

from core.logs import ensure_logger
from core.settings import BACKUP, DB_PATH, BackupSettings
from storage.backup import ensure_daily_backup

# Ensure SQLModel metadata is populated
import models  # noqa: F401
from models.pomodoro import PomodoroSettings
from storage import migrations


logger = ensure_logger("db")

_engine: Optional[Engine] = None


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves FK enforcement off per connection; cascades depend on it.
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()


def create_store_engine(db_path: str | Path | None = None) -> Engine:
    """Build an engine for the SQLite file at ``db_path`` (``DB_PATH`` by default)."""

    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{path.as_posix()}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def get_engine() -> Engine:
    """Return (and lazily create) the engine for the default database file."""

    global _engine
    if _engine is None:
        _engine = create_store_engine(DB_PATH)
    return _engine


def get_session(engine: Optional[Engine] = None) -> Session:
    return Session(engine or get_engine())


def _database_file(engine: Engine) -> Optional[Path]:
    database = engine.url.database
    if not database or database == ":memory:":
        return None
    return Path(database)


def seed_pomodoro_settings(engine: Engine) -> bool:
    """Insert the default settings row if the table is empty."""

    with Session(engine) as session:
        count = session.exec(select(func.count()).select_from(PomodoroSettings)).one()
        if count:
            return False
        session.add(PomodoroSettings())
        session.commit()
    logger.info("Default pomodoro settings created")
    return True


def init_db(
    engine: Optional[Engine] = None,
    *,
    backup: Optional[BackupSettings] = BACKUP,
) -> Engine:
    """Create tables, run migrations and seed defaults. Safe on every start."""

    actual_engine = engine or get_engine()
    db_file = _database_file(actual_engine)
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)

    SQLModel.metadata.create_all(actual_engine)
    migrations.run_all(actual_engine)
    seed_pomodoro_settings(actual_engine)
    logger.info("Database ready at %s", db_file or actual_engine.url)

    if backup is not None and backup.enabled and db_file is not None:
        ensure_daily_backup(db_file, backup.directory, keep_days=backup.keep_days)
    return actual_engine


__all__ = [
    "create_store_engine",
    "get_engine",
    "get_session",
    "init_db",
    "seed_pomodoro_settings",
]
