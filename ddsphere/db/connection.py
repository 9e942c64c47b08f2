"""SQLite connection factory.

Usage::

    from ddsphere.db.connection import get_connection

    conn = get_connection()
    conn.execute("SELECT 1")
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from ddsphere.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    The connection is shared across request threads, uses WAL journaling
    for concurrent readers, and returns :class:`sqlite3.Row` rows so columns
    can be accessed by name.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.
            ``":memory:"`` gives an isolated throwaway database.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    return conn
