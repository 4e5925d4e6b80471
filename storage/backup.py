"""Utilities for SQLite backups."""
from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from shutil import copy2

from core.logs import ensure_logger


logger = ensure_logger("backup")


def _parse_backup_date(path: Path, prefix: str) -> datetime | None:
    stem = path.stem
    if not stem.startswith(prefix):
        return None
    try:
        return datetime.strptime(stem[len(prefix) :], "%Y-%m-%d")
    except ValueError:
        return None


def _prune(backups: Path, db_file: Path, prefix: str, cutoff) -> int:
    removed = 0
    for file in backups.glob(f"{prefix}*{db_file.suffix}"):
        backup_date = _parse_backup_date(file, prefix)
        if backup_date is None or backup_date.date() >= cutoff:
            continue
        try:
            file.unlink()
            removed += 1
        except OSError as exc:
            logger.warning("Could not remove old backup %s: %s", file, exc)
    return removed


def ensure_daily_backup(
    db_path: str | Path,
    backup_dir: str | Path,
    *,
    keep_days: int = 7,
) -> Path | None:
    """Copy the database file once per day and drop copies past ``keep_days``.

    Returns the path of the copy made by this call, or ``None`` when today's
    copy already exists or there is nothing to back up yet.
    """

    db_file = Path(db_path)
    if not db_file.exists():
        return None

    backups = Path(backup_dir)
    backups.mkdir(parents=True, exist_ok=True)

    today = datetime.now().date()
    prefix = f"{db_file.stem}_"
    destination = backups / f"{prefix}{today.isoformat()}{db_file.suffix}"

    created: Path | None = None
    if not destination.exists():
        copy2(db_file, destination)
        created = destination
        logger.info("Database backed up to %s", destination)

    if keep_days > 0:
        removed = _prune(backups, db_file, prefix, today - timedelta(days=keep_days - 1))
        if removed:
            logger.info("Removed %d expired backup(s)", removed)

    return created


__all__ = ["ensure_daily_backup"]
