"""CRUD and reporting queries for the ``seo_analyses`` table."""

from __future__ import annotations

import json
import sqlite3
import uuid
from time import time
from typing import Any, Optional, Sequence

from ddsphere.db.models import AnalysisRecord
from ddsphere.seo.models import AnalysisResult

_SORTABLE = {"analyzed_at", "score", "url"}
_ISSUE_WEIGHT = {"error": 2, "warning": 1}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_record(row: sqlite3.Row) -> AnalysisRecord:
    return AnalysisRecord(
        id=row["id"],
        url=row["url"],
        user_id=row["user_id"],
        project_id=row["project_id"],
        score=row["score"],
        tags=json.loads(row["tags"] or "[]"),
        scheduled=bool(row["scheduled"]),
        previous_score=row["previous_score"],
        improvement=row["improvement"],
        payload=json.loads(row["payload"] or "{}"),
        analyzed_at=row["analyzed_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def save_analysis(
    conn: sqlite3.Connection,
    result: AnalysisResult,
    user_id: str,
    project_id: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    scheduled: bool = False,
    previous: Optional[AnalysisRecord] = None,
) -> AnalysisRecord:
    """Persist *result* and return the stored record.

    When *previous* is given the new record carries its score as
    ``previous_score`` and the difference as ``improvement``.
    """
    rid = str(uuid.uuid4())
    previous_score = previous.score if previous else None
    improvement = result.score - previous.score if previous else None

    with conn:
        conn.execute(
            """
            INSERT INTO seo_analyses (
                id, url, user_id, project_id, score, tags, scheduled,
                previous_score, improvement, payload, analyzed_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                rid,
                result.url,
                user_id,
                project_id,
                result.score,
                json.dumps(list(tags or [])),
                int(scheduled),
                previous_score,
                improvement,
                json.dumps(result.to_dict()),
                int(result.analyzed_at.timestamp()),
            ),
        )

    return get_analysis(conn, rid)  # type: ignore[return-value]


def get_analysis(
    conn: sqlite3.Connection, analysis_id: str, user_id: Optional[str] = None
) -> Optional[AnalysisRecord]:
    """Fetch one analysis.  With *user_id*, only that user's record matches."""
    if user_id is None:
        row = conn.execute(
            "SELECT * FROM seo_analyses WHERE id = ?", (analysis_id,)
        ).fetchone()
    else:
        row = conn.execute(
            "SELECT * FROM seo_analyses WHERE id = ? AND user_id = ?",
            (analysis_id, user_id),
        ).fetchone()
    return _row_to_record(row) if row else None


def find_recent_analysis(
    conn: sqlite3.Connection,
    url: str,
    user_id: str,
    max_age_seconds: int,
    now: Optional[float] = None,
) -> Optional[AnalysisRecord]:
    """Newest analysis of *url* by *user_id* no older than *max_age_seconds*."""
    cutoff = int((now if now is not None else time()) - max_age_seconds)
    row = conn.execute(
        """
        SELECT * FROM seo_analyses
        WHERE url = ? AND user_id = ? AND analyzed_at >= ?
        ORDER BY analyzed_at DESC
        LIMIT 1
        """,
        (url, user_id, cutoff),
    ).fetchone()
    return _row_to_record(row) if row else None


def list_analyses(
    conn: sqlite3.Connection,
    user_id: str,
    limit: int = 20,
    offset: int = 0,
    sort_by: str = "analyzed_at",
    sort_order: str = "desc",
    tags: Optional[Sequence[str]] = None,
    min_score: Optional[int] = None,
    max_score: Optional[int] = None,
) -> tuple[list[AnalysisRecord], int]:
    """Return one page of a user's analyses and the total matching count.

    Raises:
        ValueError: If ``sort_by`` is not a sortable column.
    """
    if sort_by not in _SORTABLE:
        raise ValueError(f"Cannot sort by {sort_by!r}")
    direction = "ASC" if sort_order.lower() == "asc" else "DESC"

    clauses = ["user_id = ?"]
    params: list[Any] = [user_id]
    if tags:
        marks = ", ".join("?" for _ in tags)
        clauses.append(
            f"EXISTS (SELECT 1 FROM json_each(seo_analyses.tags) WHERE value IN ({marks}))"
        )
        params.extend(tags)
    if min_score is not None:
        clauses.append("score >= ?")
        params.append(min_score)
    if max_score is not None:
        clauses.append("score <= ?")
        params.append(max_score)
    where = " AND ".join(clauses)

    total = conn.execute(
        f"SELECT COUNT(*) FROM seo_analyses WHERE {where}", params  # noqa: S608
    ).fetchone()[0]
    rows = conn.execute(
        f"SELECT * FROM seo_analyses WHERE {where} "  # noqa: S608
        f"ORDER BY {sort_by} {direction} LIMIT ? OFFSET ?",
        params + [limit, offset],
    ).fetchall()
    return [_row_to_record(r) for r in rows], total


def delete_analysis(conn: sqlite3.Connection, analysis_id: str, user_id: str) -> bool:
    """Delete a user's analysis.  Returns ``False`` if nothing matched."""
    with conn:
        cursor = conn.execute(
            "DELETE FROM seo_analyses WHERE id = ? AND user_id = ?",
            (analysis_id, user_id),
        )
    return cursor.rowcount > 0


def list_scheduled(conn: sqlite3.Connection) -> list[AnalysisRecord]:
    """Latest record of every (url, user) pair flagged for re-analysis."""
    rows = conn.execute(
        """
        SELECT * FROM seo_analyses AS a
        WHERE scheduled = 1
          AND analyzed_at = (
              SELECT MAX(b.analyzed_at) FROM seo_analyses AS b
              WHERE b.url = a.url AND b.user_id = a.user_id AND b.scheduled = 1
          )
        GROUP BY url, user_id
        ORDER BY url
        """
    ).fetchall()
    return [_row_to_record(r) for r in rows]


def dashboard_summary(
    conn: sqlite3.Connection, user_id: str, now: Optional[float] = None
) -> dict[str, Any]:
    """Totals, 30-day score trend, recent analyses and most frequent issues."""
    current = now if now is not None else time()
    thirty_days_ago = int(current - 30 * 24 * 60 * 60)

    total, average = conn.execute(
        "SELECT COUNT(*), AVG(score) FROM seo_analyses WHERE user_id = ?",
        (user_id,),
    ).fetchone()

    trend_rows = conn.execute(
        """
        SELECT date(analyzed_at, 'unixepoch') AS day, AVG(score) AS avg_score
        FROM seo_analyses
        WHERE user_id = ? AND analyzed_at >= ?
        GROUP BY day
        ORDER BY day
        """,
        (user_id, thirty_days_ago),
    ).fetchall()
    trend = [{"date": r["day"], "avg_score": r["avg_score"]} for r in trend_rows]

    recent, _ = list_analyses(conn, user_id, limit=5)

    issues: dict[str, dict[str, Any]] = {}
    for row in conn.execute(
        "SELECT payload FROM seo_analyses WHERE user_id = ?", (user_id,)
    ):
        for check in json.loads(row["payload"] or "{}").get("checks", []):
            weight = _ISSUE_WEIGHT.get(check.get("severity"))
            if weight is None:
                continue
            entry = issues.setdefault(check["title"], {"title": check["title"], "count": 0, "weight": 0})
            entry["count"] += 1
            entry["weight"] += weight

    top_issues = sorted(issues.values(), key=lambda e: e["count"], reverse=True)[:10]
    for entry in top_issues:
        entry["avg_severity"] = entry.pop("weight") / entry["count"]

    return {
        "overview": {
            "total_analyses": total,
            "average_score": average or 0,
            "improvement": trend[-1]["avg_score"] - trend[0]["avg_score"] if len(trend) > 1 else 0,
        },
        "score_trend": trend,
        "recent_analyses": [r.to_summary() for r in recent],
        "top_issues": top_issues,
    }
