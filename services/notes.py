# toolbox/services/notes.py
from __future__ import annotations

from typing import Callable, List

from sqlalchemy import not_, update
from sqlmodel import Session, select

from core.errors import NotFound
from core.logs import ensure_logger
from models.base import read_from_row
from models.note import Note, NoteCreate, NoteRead, NoteUpdate
from utils.datetime_utils import utc_now
from utils.json_fields import decode_list, encode_list


logger = ensure_logger("notes")


def _to_read(row: Note) -> NoteRead:
    return read_from_row(NoteRead, row, tags=decode_list(row.tags))


class NoteService:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load(self, s: Session, note_id: str) -> Note:
        row = s.get(Note, note_id)
        if row is None:
            raise NotFound("Note", note_id)
        return row

    def create(self, request: NoteCreate) -> NoteRead:
        now = utc_now()
        with self._session_factory() as s:
            row = Note(
                **request.model_dump(exclude={"tags"}),
                tags=encode_list(request.tags),
                is_pinned=False,
                is_archived=False,
                created_at=now,
                updated_at=now,
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Note created: %s", row.id)
            return _to_read(row)

    def get(self, note_id: str) -> NoteRead:
        with self._session_factory() as s:
            return _to_read(self._load(s, note_id))

    def list_all(self, include_archived: bool = False) -> List[NoteRead]:
        """Pinned notes first, then most recently edited."""
        with self._session_factory() as s:
            stmt = select(Note)
            if not include_archived:
                stmt = stmt.where(Note.is_archived == False)  # noqa: E712
            stmt = stmt.order_by(Note.is_pinned.desc(), Note.updated_at.desc())
            return [_to_read(row) for row in s.exec(stmt)]

    def update(self, request: NoteUpdate) -> NoteRead:
        with self._session_factory() as s:
            row = self._load(s, request.id)
            for key, value in request.model_dump(exclude={"id", "tags"}).items():
                setattr(row, key, value)
            row.tags = encode_list(request.tags)
            row.updated_at = utc_now()
            s.add(row)
            s.commit()
            s.refresh(row)
            logger.debug("Note updated: %s", row.id)
            return _to_read(row)

    def delete(self, note_id: str) -> None:
        with self._session_factory() as s:
            row = s.get(Note, note_id)
            if row:
                s.delete(row)
                s.commit()
                logger.debug("Note deleted: %s", note_id)

    def toggle_pin(self, note_id: str) -> NoteRead:
        with self._session_factory() as s:
            result = s.exec(
                update(Note)
                .where(Note.id == note_id)
                .values(is_pinned=not_(Note.is_pinned), updated_at=utc_now())
            )
            if result.rowcount == 0:
                raise NotFound("Note", note_id)
            s.commit()
            return _to_read(self._load(s, note_id))


__all__ = ["NoteService"]
