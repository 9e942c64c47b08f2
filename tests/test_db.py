"""Database layer tests.

All tests use an in-memory SQLite database so they are fast, isolated and
write nothing to ``~/.ddsphere_data``.
"""

from __future__ import annotations

import dataclasses
import sqlite3
from datetime import datetime, timezone
from typing import Generator

import pytest

from ddsphere.db.analyses import (
    dashboard_summary,
    delete_analysis,
    find_recent_analysis,
    get_analysis,
    list_analyses,
    list_scheduled,
    save_analysis,
)
from ddsphere.db.connection import get_connection
from ddsphere.db.migrations import current_version, init_db, migrate
from ddsphere.seo.analyzer import analyze_html
from ddsphere.seo.models import AnalysisResult

# 2024-03-01 12:00:00 UTC
_NOW = 1709294400.0
_DAY = 24 * 60 * 60


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")
    init_db(connection)
    yield connection
    connection.close()


def _result(url: str = "https://a.com/", score: int = 70, age_days: float = 0) -> AnalysisResult:
    html = "<title>Sample page</title><h1>Hi</h1>"
    result = analyze_html(url, html)
    analyzed_at = datetime.fromtimestamp(_NOW - age_days * _DAY, tz=timezone.utc)
    return dataclasses.replace(result, score=score, analyzed_at=analyzed_at)


# ---------------------------------------------------------------------------
# connection / init
# ---------------------------------------------------------------------------

class TestInitDb:
    def test_table_exists(self, conn: sqlite3.Connection) -> None:
        tables = {
            r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert "seo_analyses" in tables
        assert "schema_version" in tables

    def test_idempotent(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(), "u1")
        init_db(conn)
        init_db(conn)
        assert conn.execute("SELECT COUNT(*) FROM seo_analyses").fetchone()[0] == 1

    def test_migrate_applies_pending_once(self, conn: sqlite3.Connection) -> None:
        assert current_version(conn) == 0
        steps = [(1, "ALTER TABLE seo_analyses ADD COLUMN notes TEXT")]
        migrate(conn, steps)
        migrate(conn, steps)
        assert current_version(conn) == 1
        columns = {r["name"] for r in conn.execute("PRAGMA table_info(seo_analyses)")}
        assert "notes" in columns

    def test_score_range_enforced(self, conn: sqlite3.Connection) -> None:
        with pytest.raises(sqlite3.IntegrityError):
            save_analysis(conn, _result(score=101), "u1")


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

class TestSaveAndGet:
    def test_round_trip(self, conn: sqlite3.Connection) -> None:
        record = save_analysis(conn, _result(score=64), "u1", project_id="p1", tags=["blog"])
        fetched = get_analysis(conn, record.id)

        assert fetched is not None
        assert fetched.url == "https://a.com/"
        assert fetched.score == 64
        assert fetched.project_id == "p1"
        assert fetched.tags == ["blog"]
        assert fetched.scheduled is False
        assert fetched.analyzed_at == int(_NOW)
        assert fetched.payload["title"] == "Sample page"
        assert fetched.previous_score is None

    def test_previous_score_and_improvement(self, conn: sqlite3.Connection) -> None:
        first = save_analysis(conn, _result(score=60, age_days=2), "u1")
        second = save_analysis(conn, _result(score=75), "u1", previous=first)
        assert second.previous_score == 60
        assert second.improvement == 15

    def test_get_is_scoped_to_user(self, conn: sqlite3.Connection) -> None:
        record = save_analysis(conn, _result(), "u1")
        assert get_analysis(conn, record.id, user_id="u1") is not None
        assert get_analysis(conn, record.id, user_id="u2") is None

    def test_get_missing(self, conn: sqlite3.Connection) -> None:
        assert get_analysis(conn, "nope") is None

    def test_to_dict_merges_payload(self, conn: sqlite3.Connection) -> None:
        record = save_analysis(conn, _result(score=50), "u1")
        data = record.to_dict()
        assert data["id"] == record.id
        assert data["score"] == 50
        assert data["analyzed_at"].startswith("2024-03-01T12:00:00")
        assert "checks" in data
        assert "checks" not in record.to_summary()
        assert record.to_summary()["title"] == "Sample page"

    def test_delete(self, conn: sqlite3.Connection) -> None:
        record = save_analysis(conn, _result(), "u1")
        assert delete_analysis(conn, record.id, "u2") is False
        assert delete_analysis(conn, record.id, "u1") is True
        assert get_analysis(conn, record.id) is None
        assert delete_analysis(conn, record.id, "u1") is False


class TestFindRecent:
    def test_within_window(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(score=40, age_days=0.5), "u1")
        newest = save_analysis(conn, _result(score=45, age_days=0.1), "u1")
        found = find_recent_analysis(conn, "https://a.com/", "u1", _DAY, now=_NOW)
        assert found is not None and found.id == newest.id

    def test_too_old(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(age_days=2), "u1")
        assert find_recent_analysis(conn, "https://a.com/", "u1", _DAY, now=_NOW) is None

    def test_other_user_or_url(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(), "u1")
        assert find_recent_analysis(conn, "https://a.com/", "u2", _DAY, now=_NOW) is None
        assert find_recent_analysis(conn, "https://b.com/", "u1", _DAY, now=_NOW) is None


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListAnalyses:
    @pytest.fixture()
    def populated(self, conn: sqlite3.Connection) -> sqlite3.Connection:
        save_analysis(conn, _result("https://a.com/1", 90, age_days=3), "u1", tags=["blog"])
        save_analysis(conn, _result("https://a.com/2", 50, age_days=2), "u1", tags=["shop", "batch"])
        save_analysis(conn, _result("https://a.com/3", 70, age_days=1), "u1")
        save_analysis(conn, _result("https://z.com/", 10), "u2")
        return conn

    def test_newest_first_by_default(self, populated: sqlite3.Connection) -> None:
        records, total = list_analyses(populated, "u1")
        assert total == 3
        assert [r.url for r in records] == ["https://a.com/3", "https://a.com/2", "https://a.com/1"]

    def test_sort_by_score_ascending(self, populated: sqlite3.Connection) -> None:
        records, _ = list_analyses(populated, "u1", sort_by="score", sort_order="asc")
        assert [r.score for r in records] == [50, 70, 90]

    def test_pagination(self, populated: sqlite3.Connection) -> None:
        records, total = list_analyses(populated, "u1", limit=2, offset=2)
        assert total == 3
        assert [r.url for r in records] == ["https://a.com/1"]

    def test_tag_filter(self, populated: sqlite3.Connection) -> None:
        records, total = list_analyses(populated, "u1", tags=["shop", "blog"])
        assert total == 2
        assert {r.url for r in records} == {"https://a.com/1", "https://a.com/2"}

    def test_score_range_filter(self, populated: sqlite3.Connection) -> None:
        records, total = list_analyses(populated, "u1", min_score=60, max_score=80)
        assert total == 1
        assert records[0].score == 70

    def test_bad_sort_column(self, populated: sqlite3.Connection) -> None:
        with pytest.raises(ValueError):
            list_analyses(populated, "u1", sort_by="payload; DROP TABLE seo_analyses")


class TestListScheduled:
    def test_latest_scheduled_per_url_and_user(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result("https://a.com/", 40, age_days=2), "u1", scheduled=True)
        latest = save_analysis(conn, _result("https://a.com/", 55, age_days=1), "u1", scheduled=True)
        other = save_analysis(conn, _result("https://a.com/", 60, age_days=1), "u2", scheduled=True)
        save_analysis(conn, _result("https://b.com/", 80), "u1")

        scheduled = list_scheduled(conn)
        assert {r.id for r in scheduled} == {latest.id, other.id}

    def test_none_scheduled(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(), "u1")
        assert list_scheduled(conn) == []


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class TestDashboard:
    def test_empty(self, conn: sqlite3.Connection) -> None:
        summary = dashboard_summary(conn, "u1", now=_NOW)
        assert summary["overview"] == {"total_analyses": 0, "average_score": 0, "improvement": 0}
        assert summary["score_trend"] == []
        assert summary["recent_analyses"] == []
        assert summary["top_issues"] == []

    def test_overview_and_trend(self, conn: sqlite3.Connection) -> None:
        save_analysis(conn, _result(score=40, age_days=40), "u1")
        save_analysis(conn, _result(score=50, age_days=2), "u1")
        save_analysis(conn, _result(score=80), "u1")
        save_analysis(conn, _result(score=0), "u2")

        summary = dashboard_summary(conn, "u1", now=_NOW)
        overview = summary["overview"]
        assert overview["total_analyses"] == 3
        assert overview["average_score"] == pytest.approx(170 / 3)
        # The 40-day-old analysis falls outside the trend window.
        assert [p["avg_score"] for p in summary["score_trend"]] == [50, 80]
        assert summary["score_trend"][-1]["date"] == "2024-03-01"
        assert overview["improvement"] == 30
        assert len(summary["recent_analyses"]) == 3

    def test_top_issues(self, conn: sqlite3.Connection) -> None:
        # No meta description (error) and an http URL (error) on every page.
        save_analysis(conn, _result("http://a.com/1"), "u1")
        save_analysis(conn, _result("http://a.com/2"), "u1")

        issues = {i["title"]: i for i in dashboard_summary(conn, "u1", now=_NOW)["top_issues"]}
        assert issues["SSL Certificate"]["count"] == 2
        assert issues["SSL Certificate"]["avg_severity"] == 2
        assert issues["Page Title"]["avg_severity"] == 1
        assert "H1 Heading" not in issues
