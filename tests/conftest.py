from pathlib import Path
import os
import sys
import tempfile

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep core.settings from creating folders in the real profile.
os.environ.setdefault("TOOLBOX_DATA_DIR", tempfile.mkdtemp(prefix="toolbox-tests-"))

import pytest

from services.store import RecordStore


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "toolbox.db"


@pytest.fixture()
def store(db_path):
    record_store = RecordStore.open(db_path, backup=None)
    yield record_store
    record_store.close()


@pytest.fixture()
def clock(monkeypatch):
    """Strictly increasing timestamps for ordering assertions."""

    from datetime import datetime, timedelta, timezone

    import services.events
    import services.habits
    import services.notes
    import services.pomodoro
    import services.todos

    state = {"now": datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)}

    def tick():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    for module in (
        services.events,
        services.habits,
        services.notes,
        services.pomodoro,
        services.todos,
    ):
        monkeypatch.setattr(module, "utc_now", tick)
    return tick
