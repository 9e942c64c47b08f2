"""Database layer package.

Public re-exports so callers can write::

    from ddsphere.db import get_connection, init_db
    from ddsphere.db import analyses
"""

from ddsphere.db.connection import get_connection
from ddsphere.db.migrations import init_db
from ddsphere.db import analyses

__all__ = ["get_connection", "init_db", "analyses"]
