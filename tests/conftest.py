"""Shared fixtures.

The simulated providers stand in for the PageSpeed API and a backlink index.
They return fixed values so tests stay deterministic; they are not shipped
with the package.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytest

from ddsphere.seo.models import Backlink, PerformanceMetrics
from ddsphere.seo.providers import BacklinkProvider, PerformanceProvider


class SimulatedPerformanceProvider(PerformanceProvider):
    def __init__(self) -> None:
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "simulated"

    def measure(self, url: str) -> Optional[PerformanceMetrics]:
        self.calls.append(url)
        return PerformanceMetrics(
            performance_score=85.0,
            fcp=1200.0,
            lcp=2500.0,
            fid=80.0,
            cls=0.05,
            tti=3500.0,
            speed_index=2100.0,
        )


class SimulatedBacklinkProvider(BacklinkProvider):
    _DOMAINS = ["github.com", "linkedin.com", "news.ycombinator.com"]

    @property
    def name(self) -> str:
        return "simulated"

    def backlinks(self, url: str, limit: int = 50) -> list[Backlink]:
        found = datetime(2024, 1, 15, tzinfo=timezone.utc)
        links = [
            Backlink(
                url=f"https://{domain}/post-{i}",
                domain=domain,
                anchor_text=f"Related article {i + 1}",
                follow=i % 2 == 0,
                authority=40 + i,
                date_found=found,
            )
            for i, domain in enumerate(self._DOMAINS)
        ]
        return links[:limit]


@pytest.fixture()
def simulated_performance() -> SimulatedPerformanceProvider:
    return SimulatedPerformanceProvider()


@pytest.fixture()
def simulated_backlinks() -> SimulatedBacklinkProvider:
    return SimulatedBacklinkProvider()
