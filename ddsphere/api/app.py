"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``) and initialises the schema.  On
shutdown it closes the connection cleanly.

Routers
-------
    /seo       URL analysis, history, dashboard, webhook, health
    /content   editor-time draft scoring
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ddsphere import __version__
from ddsphere.db import get_connection, init_db
from ddsphere.log import configure_logging

from ddsphere.api.routers import content as content_router
from ddsphere.api.routers import seo as seo_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    try:
        yield
    finally:
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()
    app = FastAPI(
        title="DD Sphere SEO API",
        description=(
            "SEO analysis for DD Sphere: page audits with a 0-100 score, "
            "per-user analysis history and a draft scorer for the editor."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(seo_router.router, prefix="/seo", tags=["seo"])
    app.include_router(content_router.router, prefix="/content", tags=["content"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn ddsphere.api.app:app --reload
app = create_app()
