"""ORM and request models exposed by the Toolbox record store."""
from .calendar_event import CalendarEvent, EventCreate, EventRead, EventUpdate
from .habit import (
    Habit,
    HabitCreate,
    HabitRead,
    HabitRecord,
    HabitRecordCreate,
    HabitRecordRead,
    HabitStats,
    HabitUpdate,
)
from .note import Note, NoteCreate, NoteRead, NoteUpdate
from .pomodoro import (
    PomodoroDayStats,
    PomodoroSession,
    PomodoroSessionCreate,
    PomodoroSessionRead,
    PomodoroSessionUpdate,
    PomodoroSettings,
    PomodoroSettingsRead,
    PomodoroSettingsUpdate,
)
from .todo import Subtask, SubtaskCreate, SubtaskRead, Todo, TodoCreate, TodoRead, TodoUpdate

__all__ = [
    "CalendarEvent",
    "EventCreate",
    "EventRead",
    "EventUpdate",
    "Habit",
    "HabitCreate",
    "HabitRead",
    "HabitRecord",
    "HabitRecordCreate",
    "HabitRecordRead",
    "HabitStats",
    "HabitUpdate",
    "Note",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    "PomodoroDayStats",
    "PomodoroSession",
    "PomodoroSessionCreate",
    "PomodoroSessionRead",
    "PomodoroSessionUpdate",
    "PomodoroSettings",
    "PomodoroSettingsRead",
    "PomodoroSettingsUpdate",
    "Subtask",
    "SubtaskCreate",
    "SubtaskRead",
    "Todo",
    "TodoCreate",
    "TodoRead",
    "TodoUpdate",
]
