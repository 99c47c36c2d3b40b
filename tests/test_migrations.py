"""
Notes Service - Migration Tests
================================

What:  Alembic revision 001 produces the same `notes` table as the ORM model.
How:   Runs `alembic upgrade head` / `downgrade base` against a tmp SQLite file
       and inspects it with a synchronous SQLAlchemy engine.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "migrated.db"


@pytest.fixture
def alembic_config(db_path) -> Config:
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


def inspect_db(db_path: Path):
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        insp = inspect(engine)
        return (
            insp.get_table_names(),
            insp.get_columns("notes") if insp.has_table("notes") else [],
            insp.get_check_constraints("notes") if insp.has_table("notes") else [],
            insp.get_indexes("notes") if insp.has_table("notes") else [],
        )
    finally:
        engine.dispose()


class TestMigrations:

    def test_upgrade_creates_notes_table(self, alembic_config, db_path):
        command.upgrade(alembic_config, "head")

        tables, columns, checks, indexes = inspect_db(db_path)
        assert "notes" in tables
        assert [c["name"] for c in columns] == [
            "id", "title", "category", "priority", "description", "created_at", "updated_at",
        ]
        assert all(not c["nullable"] for c in columns if c["name"] != "id")
        assert {c["name"] for c in checks} == {"ck_notes_category", "ck_notes_priority"}
        assert "idx_notes_created_at" in {i["name"] for i in indexes}

    def test_downgrade_drops_notes_table(self, alembic_config, db_path):
        command.upgrade(alembic_config, "head")
        command.downgrade(alembic_config, "base")

        tables, _, _, _ = inspect_db(db_path)
        assert "notes" not in tables

    def test_ini_sets_path_separator(self):
        assert Config(str(ALEMBIC_INI)).get_main_option("path_separator") == "os"
