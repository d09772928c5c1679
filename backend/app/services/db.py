"""
Database configuration and session management for the area backend.

This module defines a SQLModel engine targeting a SQLite database stored
in the project's ``storage`` directory, or in ``AREA_STORAGE_DIR`` when
that environment variable is set.  It exposes helper functions to
initialise the schema and to obtain session objects.
"""

from __future__ import annotations

import os
from pathlib import Path
from sqlmodel import SQLModel, create_engine, Session

# Storage lives at the repository root unless overridden.  The directory
# is created on import so the SQLite file can always be opened.
STORAGE_DIR = Path(
    os.getenv("AREA_STORAGE_DIR") or Path(__file__).resolve().parents[3] / "storage"
)
STORAGE_DIR.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    f"sqlite:///{(STORAGE_DIR / 'areas.db').as_posix()}",
    echo=False,
    connect_args={"check_same_thread": False},
)


def create_db_and_tables() -> None:
    """Create all tables in the database.

    Safe to call repeatedly; existing tables are left untouched.
    """
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """Return a new SQLModel session bound to the engine.

    Use it as a context manager (``with get_session() as session: ...``)
    so connections are closed.
    """
    return Session(engine)
