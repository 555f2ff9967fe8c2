"""
Note Repository - CRUD operations for stored notes.

Notes are held in process memory only; a restart loses them. The abstract
interface keeps the routes independent of the storage choice.
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod

from briefly.notes.models import Note, NoteCreate, NoteUpdate, utc_now
from briefly.observability.logging import get_logger

logger = get_logger(__name__)


class NoteRepository(ABC):
    """Storage interface used by the notes routes."""

    @abstractmethod
    def get(self, note_id: str) -> Note | None: ...

    @abstractmethod
    def list_all(self) -> list[Note]: ...

    @abstractmethod
    def create(self, note: NoteCreate) -> Note: ...

    @abstractmethod
    def update(self, note_id: str, changes: NoteUpdate) -> Note | None: ...

    @abstractmethod
    def delete(self, note_id: str) -> bool: ...


class InMemoryNoteRepository(NoteRepository):
    """
    Dict-backed repository.

    A lock guards the dict because routes run blocking work in the threadpool.
    """

    def __init__(self) -> None:
        self._notes: dict[str, Note] = {}
        self._lock = threading.Lock()

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def list_all(self) -> list[Note]:
        """Return every note, newest first."""
        with self._lock:
            notes = list(self._notes.values())
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    def create(self, note: NoteCreate) -> Note:
        """
        Store a new note.

        Side Effects:
            - Assigns a uuid4 id and a UTC creation timestamp
        """
        stored = Note(
            id=str(uuid.uuid4()),
            created_at=utc_now(),
            **note.model_dump(),
        )
        with self._lock:
            self._notes[stored.id] = stored
        logger.info("Created note %s (%s)", stored.id, stored.content_type)
        return stored

    def update(self, note_id: str, changes: NoteUpdate) -> Note | None:
        """Merge the non-None fields of ``changes`` into an existing note."""
        with self._lock:
            existing = self._notes.get(note_id)
            if existing is None:
                return None
            patch = changes.model_dump(exclude_none=True)
            updated = Note.model_validate({**existing.model_dump(), **patch})
            self._notes[note_id] = updated
        return updated

    def delete(self, note_id: str) -> bool:
        with self._lock:
            removed = self._notes.pop(note_id, None)
        if removed is not None:
            logger.info("Deleted note %s", note_id)
        return removed is not None
