"""
Notes Service - Note SQLAlchemy Model
======================================

What:  ORM model for the `notes` table.
How:   Inherits from the DeclarativeBase in notes_service.database; Alembic
       migration 001 creates the identical table.
Who:   Used by NoteStore for CRUD and by Database.create_all() at startup.

Table Design:
    - id: INTEGER PRIMARY KEY AUTOINCREMENT, so ids increase monotonically
      and are never reused after a delete
    - category / priority: TEXT with CHECK constraints over the closed sets;
      the store rejects bad values even if API validation is bypassed
    - created_at / updated_at: UTC, stored naive by SQLite, returned aware
    - idx_notes_created_at: serves the only list query (ORDER BY created_at DESC)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from notes_service.database import Base

# Closed sets shared by the CHECK constraints, validation and the client.
# Order matters: it is the order used in the validation messages.
CATEGORIES = ("work", "personal", "ideas")
PRIORITIES = ("high", "medium", "low")


def _in_clause(column: str, values: tuple) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class UTCDateTime(TypeDecorator):
    """
    DateTime column that always hands back timezone-aware UTC values.

    SQLite has no timezone-aware storage: the driver writes
    'YYYY-MM-DD HH:MM:SS.ffffff' and reads back a naive datetime. Values are
    normalized to UTC on the way in and tagged as UTC on the way out, so a
    note read back from the table compares equal to the one just written.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user-authored note.

    Lifecycle:
        1. Inserted by NoteStore.create() with created_at == updated_at
        2. Replaced field-by-field by NoteStore.update(); only updated_at moves
        3. Removed by NoteStore.delete(), which returns the last snapshot
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(_in_clause("category", CATEGORIES), name="ck_notes_category"),
        CheckConstraint(_in_clause("priority", PRIORITIES), name="ck_notes_priority"),
        # AUTOINCREMENT keyword: ids are never handed out twice
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, category='{self.category}', "
            f"priority='{self.priority}', created_at='{self.created_at}')>"
        )


# created_at DESC index for the list query (most recent first)
Index("idx_notes_created_at", Note.created_at.desc())
