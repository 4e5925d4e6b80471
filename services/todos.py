# toolbox/services/todos.py
from __future__ import annotations

from typing import Callable, List

from sqlalchemy import not_, update
from sqlmodel import Session, select

from core.errors import NotFound
from core.logs import ensure_logger
from core.priorities import normalize_priority
from models.base import read_from_row
from models.todo import Subtask, SubtaskCreate, SubtaskRead, Todo, TodoCreate, TodoRead, TodoUpdate
from utils.datetime_utils import utc_now
from utils.json_fields import decode_list, encode_list


logger = ensure_logger("todos")


def _to_read(row: Todo) -> TodoRead:
    return read_from_row(TodoRead, row, tags=decode_list(row.tags))


class TodoService:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load(self, s: Session, todo_id: str) -> Todo:
        row = s.get(Todo, todo_id)
        if row is None:
            raise NotFound("Todo", todo_id)
        return row

    def _load_subtask(self, s: Session, subtask_id: str) -> Subtask:
        row = s.get(Subtask, subtask_id)
        if row is None:
            raise NotFound("Subtask", subtask_id)
        return row

    # ---------- todos ----------
    def create(self, request: TodoCreate) -> TodoRead:
        fields = request.model_dump(exclude={"tags"})
        fields["priority"] = normalize_priority(request.priority)
        now = utc_now()
        with self._session_factory() as s:
            row = Todo(
                **fields,
                completed=False,
                tags=encode_list(request.tags),
                created_at=now,
                updated_at=now,
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Todo created: %s", row.id)
            return _to_read(row)

    def get(self, todo_id: str) -> TodoRead:
        with self._session_factory() as s:
            return _to_read(self._load(s, todo_id))

    def list_all(self) -> List[TodoRead]:
        with self._session_factory() as s:
            stmt = select(Todo).order_by(Todo.created_at.desc())
            return [_to_read(row) for row in s.exec(stmt)]

    def update(self, request: TodoUpdate) -> TodoRead:
        with self._session_factory() as s:
            row = self._load(s, request.id)
            for key, value in request.model_dump(exclude={"id", "tags"}).items():
                setattr(row, key, value)
            row.priority = normalize_priority(request.priority)
            row.tags = encode_list(request.tags)
            row.updated_at = utc_now()
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Todo updated: %s", row.id)
            return _to_read(row)

    def delete(self, todo_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(Todo, todo_id)
            if row:
                s.delete(row)
                s.commit()
                logger.debug("Todo deleted: %s", todo_id)

    def toggle(self, todo_id: str) -> TodoRead:
        with self._session_factory() as s:
            result = s.exec(
                update(Todo)
                .where(Todo.id == todo_id)
                .values(completed=not_(Todo.completed), updated_at=utc_now())
            )
            if result.rowcount == 0:
                raise NotFound("Todo", todo_id)
            s.commit()
            return _to_read(self._load(s, todo_id))

    # ---------- subtasks ----------
    def create_subtask(self, request: SubtaskCreate) -> SubtaskRead:
        with self._session_factory() as s:
            row = Subtask(todo_id=request.todo_id, title=request.title, completed=False, created_at=utc_now())
            s.add(row)
            s.commit()
            s.refresh(row)
            return read_from_row(SubtaskRead, row)

    def get_subtask(self, subtask_id: str) -> SubtaskRead:
        with self._session_factory() as s:
            return read_from_row(SubtaskRead, self._load_subtask(s, subtask_id))

    def list_subtasks(self, todo_id: str) -> List[SubtaskRead]:
        with self._session_factory() as s:
            stmt = (
                select(Subtask)
                .where(Subtask.todo_id == todo_id)
                .order_by(Subtask.created_at.asc())
            )
            return [read_from_row(SubtaskRead, row) for row in s.exec(stmt)]

    def toggle_subtask(self, subtask_id: str) -> SubtaskRead:
        with self._session_factory() as s:
            result = s.exec(
                update(Subtask)
                .where(Subtask.id == subtask_id)
                .values(completed=not_(Subtask.completed))
            )
            if result.rowcount == 0:
                raise NotFound("Subtask", subtask_id)
            s.commit()
            return read_from_row(SubtaskRead, self._load_subtask(s, subtask_id))

    def delete_subtask(self, subtask_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(Subtask, subtask_id)
            if row:
                s.delete(row)
                s.commit()


__all__ = ["TodoService"]
