"""Shared FastAPI dependencies."""

from __future__ import annotations

import sqlite3

from fastapi import Header, Request

from ddsphere.seo.providers import BacklinkProvider, build_default_providers

ANONYMOUS = "anonymous"


def get_db(request: Request) -> sqlite3.Connection:
    return request.app.state.db


def get_user_id(x_user_id: str = Header(default=ANONYMOUS)) -> str:
    """Caller identity as set by the authentication proxy in front of the API."""
    return x_user_id or ANONYMOUS


def get_backlink_provider() -> BacklinkProvider:
    return build_default_providers()[1]
