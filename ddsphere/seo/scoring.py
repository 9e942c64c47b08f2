"""Aggregate check deductions into a 0-100 score."""

from __future__ import annotations

from typing import Iterable

from ddsphere.seo.models import Check

MAX_SCORE = 100


def calculate_score(checks: Iterable[Check], max_points: int = MAX_SCORE) -> int:
    """``max(0, max_points - total deducted points)``."""
    deducted = sum(check.points for check in checks)
    return max(0, max_points - deducted)
