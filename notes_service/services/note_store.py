"""
Notes Service - Note Store
===========================

What:  Durable persistence of notes: list, get, create, update, delete.
How:   Each operation opens its own session and transaction from the injected
       session factory, so every call is one atomic unit. Results are frozen
       NoteResponse values; the ORM objects never leave this module.
Who:   Built by the application factory and handed to the routes through
       `request.app.state.store`; also usable directly (tests, scripts).

Outcome model (update/delete/get_by_id):
    NoteResponse  → the operation applied / the note exists
    None          → no note with that id (expected, not an error)
    StoreError    → the database failed; ConstraintViolationError when a
                    CHECK or NOT NULL constraint rejected the write

Atomicity:
    update() is a single UPDATE ... RETURNING and delete() a single
    DELETE ... RETURNING, so the returned snapshot is exactly the row that was
    written or removed. Concurrent updates to one note are last-write-wins.

Blank content:
    The store does not re-check blankness. A whitespace-only title written
    directly through the store is accepted; only NULLs and values outside the
    closed sets are rejected here, by the database.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notes_service.exceptions import ConstraintViolationError, StoreError
from notes_service.models.note import Note, utcnow
from notes_service.schemas.note import NoteFields, NoteResponse

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Owns the `notes` record set.

    Args:
        session_factory: async_sessionmaker from notes_service.database.Database
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list(self) -> List[NoteResponse]:
        """
        All notes, most recently created first.

        Notes created in the same instant come back in no particular order.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Note).order_by(Note.created_at.desc())
                )
                return [NoteResponse.model_validate(n) for n in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._store_error("list", e)

    async def get_by_id(self, note_id: int) -> Optional[NoteResponse]:
        """The note with `note_id`, or None when there is none."""
        try:
            async with self._session_factory() as session:
                note = await session.get(Note, note_id)
                return NoteResponse.model_validate(note) if note is not None else None
        except SQLAlchemyError as e:
            raise self._store_error("get", e, note_id=note_id)

    async def create(self, fields: NoteFields) -> NoteResponse:
        """
        Insert a note; the store assigns `id` and both timestamps.

        Raises:
            ConstraintViolationError: bad category/priority or a NULL field
            StoreError: any other database failure
        """
        now = utcnow()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    note = Note(
                        title=fields.title,
                        category=fields.category,
                        priority=fields.priority,
                        description=fields.description,
                        created_at=now,
                        updated_at=now,
                    )
                    session.add(note)
                    await session.flush()  # assigns note.id
                logger.info("Note %d created (category=%s)", note.id, note.category)
                return NoteResponse.model_validate(note)
        except SQLAlchemyError as e:
            raise self._store_error("create", e)

    async def update(self, note_id: int, fields: NoteFields) -> Optional[NoteResponse]:
        """
        Replace all four mutable fields and bump `updated_at`.

        Returns None (not an error) when no row has `note_id`.
        `created_at` is never touched.
        """
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(
                title=fields.title,
                category=fields.category,
                priority=fields.priority,
                description=fields.description,
                updated_at=utcnow(),
            )
            .returning(Note)
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    note = (await session.execute(stmt)).scalar_one_or_none()
                    snapshot = NoteResponse.model_validate(note) if note is not None else None
        except SQLAlchemyError as e:
            raise self._store_error("update", e, note_id=note_id)

        if snapshot is not None:
            logger.info("Note %d updated", note_id)
        return snapshot

    async def delete(self, note_id: int) -> Optional[NoteResponse]:
        """
        Remove a note and return its pre-delete snapshot.

        Returns None when no row has `note_id`.
        """
        stmt = (
            delete(Note)
            .where(Note.id == note_id)
            .returning(Note)
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    note = (await session.execute(stmt)).scalar_one_or_none()
                    snapshot = NoteResponse.model_validate(note) if note is not None else None
        except SQLAlchemyError as e:
            raise self._store_error("delete", e, note_id=note_id)

        if snapshot is not None:
            logger.info("Note %d deleted", note_id)
        return snapshot

    # ── Error translation ─────────────────────────────────────────────────

    @staticmethod
    def _store_error(operation: str, exc: SQLAlchemyError, **context) -> StoreError:
        """
        Map a SQLAlchemy failure onto the store's error kinds.

        IntegrityError (CHECK / NOT NULL) → ConstraintViolationError;
        everything else → StoreError. The driver message goes into `context`
        for logging, never into the client-facing message.
        """
        context.update(operation=operation, original_error=str(getattr(exc, "orig", exc)))
        if isinstance(exc, IntegrityError):
            logger.warning("Constraint violation during %s: %s", operation, context["original_error"])
            return ConstraintViolationError(context=context)
        logger.error("Database error during %s: %s", operation, context["original_error"])
        return StoreError(message=f"Could not {operation} note", context=context)
