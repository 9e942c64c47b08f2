"""SEO analysis endpoints.

Routes
------
POST   /seo/analyze               Analyse one URL (24h per-user cache unless ?force=true)
POST   /seo/analyze/batch         Analyse up to ``batch_max_urls`` URLs in groups
GET    /seo/history               Paged, filterable list of the caller's analyses
GET    /seo/analysis/{id}         One stored analysis
DELETE /seo/analysis/{id}         Delete a stored analysis
GET    /seo/backlinks             Backlinks from the configured provider
GET    /seo/dashboard             Totals, trend, recent analyses, top issues
POST   /seo/webhook/analyze       Secret-protected analysis trigger (publish hooks)
GET    /seo/health                Liveness plus database check
POST   /seo/keywords/analyze      Keyword frequency table for arbitrary text
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

from ddsphere.api.deps import get_backlink_provider, get_db, get_user_id
from ddsphere.config import settings
from ddsphere.db.analyses import (
    dashboard_summary,
    delete_analysis,
    find_recent_analysis,
    get_analysis,
    list_analyses,
    save_analysis,
)
from ddsphere.seo.analyzer import analyze_page
from ddsphere.seo.batch import analyze_batch
from ddsphere.seo.content import analyze_keywords
from ddsphere.seo.errors import FetchError
from ddsphere.seo.providers import BacklinkProvider

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    """Validate *value* as an http(s) URL but keep it exactly as sent.

    The stored URL and the cache key must match what the caller and the CLI
    use, so the normalised form (trailing slash, lower-cased host) is dropped.
    """
    try:
        _HTTP_URL.validate_python(value)
    except ValueError as exc:
        raise ValueError(f"Invalid URL: {value!r}") from exc
    return value


class AnalyzeRequest(BaseModel):
    url: str
    save: bool = True
    project_id: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    scheduled: bool = False

    @field_validator("url")
    @classmethod
    def url_must_be_http(cls, value: str) -> str:
        return _check_url(value)


class BatchRequest(BaseModel):
    urls: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class WebhookRequest(BaseModel):
    secret: str
    url: str
    user_id: str
    project_id: Optional[str] = None

    @field_validator("url")
    @classmethod
    def url_must_be_http(cls, value: str) -> str:
        return _check_url(value)


class KeywordsRequest(BaseModel):
    text: str = ""
    limit: int = Field(10, ge=1, le=100)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/analyze")
def analyze_endpoint(
    body: AnalyzeRequest,
    force: bool = False,
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    """Analyse a URL, reusing the caller's analysis from the last 24 hours.

    ``?force=true`` skips the cache.  A fresh analysis is stored unless
    ``save`` is false, and records its score change against the cached one.
    """
    url = body.url
    recent = find_recent_analysis(conn, url, user_id, settings.cache_ttl_seconds)
    if recent and not force:
        data = recent.to_dict()
        data["cached"] = True
        data["message"] = (
            f"Using cached analysis from less than {settings.cache_ttl_hours} hours ago"
        )
        return data

    try:
        result = analyze_page(url)
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to analyze page: {exc}") from exc

    if not body.save:
        return result.to_dict()

    record = save_analysis(
        conn,
        result,
        user_id=user_id,
        project_id=body.project_id,
        tags=body.tags,
        scheduled=body.scheduled,
        previous=recent,
    )
    return record.to_dict()


@router.post("/analyze/batch")
def analyze_batch_endpoint(
    body: BatchRequest,
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    """Analyse several URLs; failures are reported per URL, not raised."""
    if not body.urls:
        raise HTTPException(status_code=400, detail="URLs array is required")
    if len(body.urls) > settings.batch_max_urls:
        raise HTTPException(
            status_code=400, detail=f"Maximum {settings.batch_max_urls} URLs per batch"
        )

    outcome = analyze_batch(body.urls, analyze=analyze_page)
    tags = [*body.tags, "batch"]
    results = [
        save_analysis(conn, result, user_id=user_id, tags=tags).to_dict()
        for result in outcome.results
    ]
    return {
        "success": len(results),
        "failed": len(outcome.errors),
        "results": results,
        "errors": [{"url": e.url, "error": e.error} for e in outcome.errors],
    }


@router.get("/history")
def history_endpoint(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: Literal["analyzed_at", "score", "url"] = "analyzed_at",
    sort_order: Literal["asc", "desc"] = "desc",
    tags: Optional[str] = None,
    min_score: Optional[int] = None,
    max_score: Optional[int] = None,
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    """List the caller's analyses without the bulky per-page detail.

    ``tags`` is a comma-separated list; a record matches if it has any of them.
    """
    tag_list = [t for t in tags.split(",") if t] if tags else None
    records, total = list_analyses(
        conn,
        user_id,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
        tags=tag_list,
        min_score=min_score,
        max_score=max_score,
    )
    return {
        "analyses": [r.to_summary() for r in records],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": total > offset + limit,
        },
    }


@router.get("/analysis/{analysis_id}")
def get_analysis_endpoint(
    analysis_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    record = get_analysis(conn, analysis_id, user_id=user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record.to_dict()


@router.delete("/analysis/{analysis_id}")
def delete_analysis_endpoint(
    analysis_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    if not delete_analysis(conn, analysis_id, user_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return {"success": True, "message": "Analysis deleted"}


@router.get("/backlinks")
def backlinks_endpoint(
    url: str,
    limit: int = Query(50, ge=1, le=500),
    provider: BacklinkProvider = Depends(get_backlink_provider),
) -> dict[str, Any]:
    backlinks = provider.backlinks(url, limit=limit)
    return {
        "url": url,
        "provider": provider.name,
        "total": len(backlinks),
        "backlinks": [b.to_dict() for b in backlinks],
    }


@router.get("/dashboard")
def dashboard_endpoint(
    conn: sqlite3.Connection = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    return dashboard_summary(conn, user_id)


@router.post("/webhook/analyze")
def webhook_endpoint(
    body: WebhookRequest,
    conn: sqlite3.Connection = Depends(get_db),
) -> dict[str, Any]:
    """Analyse a URL on behalf of *user_id* when a trusted system asks."""
    if not settings.webhook_secret or body.secret != settings.webhook_secret:
        raise HTTPException(status_code=401, detail="Invalid webhook secret")

    try:
        result = analyze_page(body.url)
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to analyze page: {exc}") from exc

    record = save_analysis(
        conn,
        result,
        user_id=body.user_id,
        project_id=body.project_id,
        tags=["webhook", "auto"],
        scheduled=True,
    )
    return {"success": True, "analysis_id": record.id}


@router.get("/health")
def health_endpoint(conn: sqlite3.Connection = Depends(get_db)) -> dict[str, Any]:
    services = {"database": False}
    try:
        conn.execute("SELECT 1 FROM seo_analyses LIMIT 1").fetchall()
        services["database"] = True
    except sqlite3.Error as exc:
        logger.warning("health check: database unavailable: %s", exc)
    return {
        "status": "healthy" if all(services.values()) else "degraded",
        "services": services,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/keywords/analyze")
def keywords_endpoint(body: KeywordsRequest) -> dict[str, Any]:
    """Most frequent words of *text* with their share of all counted words."""
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    keywords = analyze_keywords(body.text, limit=body.limit)
    return {"keywords": [asdict(k) for k in keywords]}
