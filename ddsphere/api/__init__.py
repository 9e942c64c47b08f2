"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from ddsphere.api import app

    uvicorn ddsphere.api:app --reload
"""

from ddsphere.api.app import app

__all__ = ["app"]
