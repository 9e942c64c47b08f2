"""Dataclass models representing DB rows.

These are plain Python objects, not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def _iso(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


@dataclass
class AnalysisRecord:
    id: str
    url: str
    user_id: str
    score: int
    analyzed_at: int
    project_id: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    scheduled: bool = False
    previous_score: Optional[int] = None
    improvement: Optional[int] = None
    payload: dict[str, Any] = field(default_factory=dict)

    def _record_fields(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "user_id": self.user_id,
            "project_id": self.project_id,
            "score": self.score,
            "tags": self.tags,
            "scheduled": self.scheduled,
            "previous_score": self.previous_score,
            "improvement": self.improvement,
            "analyzed_at": _iso(self.analyzed_at),
        }

    def to_dict(self) -> dict[str, Any]:
        """Full stored analysis: the analysis payload plus record fields."""
        data = dict(self.payload)
        data.update(self._record_fields())
        return data

    def to_summary(self) -> dict[str, Any]:
        """Light view for listings: no checks, keywords, images or links."""
        data = self._record_fields()
        data["title"] = self.payload.get("title", "")
        return data
