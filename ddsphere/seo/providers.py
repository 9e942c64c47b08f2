"""External capabilities used by a full analysis: page speed and backlinks.

Both are pluggable.  ``build_default_providers()`` returns the real
PageSpeed Insights integration when ``GOOGLE_API_KEY`` is set and null
providers otherwise.  There is no backlink index integration yet, so
:class:`NullBacklinkProvider` is the only implementation shipped.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ddsphere.config import settings
from ddsphere.seo.models import Backlink, PerformanceMetrics

logger = logging.getLogger(__name__)

_PAGESPEED_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


# ---------------------------------------------------------------------------
# Abstract bases
# ---------------------------------------------------------------------------

class PerformanceProvider(ABC):
    """Source of lab performance metrics for a URL."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""

    @abstractmethod
    def measure(self, url: str) -> Optional[PerformanceMetrics]:
        """Return metrics for *url*, or ``None`` (not raise) when unavailable."""


class BacklinkProvider(ABC):
    """Source of pages linking to a URL."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""

    @abstractmethod
    def backlinks(self, url: str, limit: int = 50) -> list[Backlink]:
        """Return up to *limit* backlinks.  Must return ``[]`` on failure."""


# ---------------------------------------------------------------------------
# Google PageSpeed Insights
# ---------------------------------------------------------------------------

class PageSpeedInsightsProvider(PerformanceProvider):
    """Lighthouse metrics from the PageSpeed Insights v5 REST API."""

    def __init__(self, api_key: str, timeout: float = 60.0) -> None:
        self._api_key = api_key
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "PageSpeed Insights"

    def measure(self, url: str) -> Optional[PerformanceMetrics]:
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.get(
                    _PAGESPEED_ENDPOINT,
                    params={"url": url, "key": self._api_key},
                )
                resp.raise_for_status()
                lighthouse = resp.json()["lighthouseResult"]
            audits = lighthouse["audits"]
            return PerformanceMetrics(
                performance_score=lighthouse["categories"]["performance"]["score"] * 100,
                fcp=audits["first-contentful-paint"]["numericValue"],
                lcp=audits["largest-contentful-paint"]["numericValue"],
                fid=audits["max-potential-fid"]["numericValue"],
                cls=audits["cumulative-layout-shift"]["numericValue"],
                tti=audits["interactive"]["numericValue"],
                speed_index=audits["speed-index"]["numericValue"],
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("[%s] no metrics for %s: %s", self.name, url, exc)
            return None


# ---------------------------------------------------------------------------
# Null providers
# ---------------------------------------------------------------------------

class NullPerformanceProvider(PerformanceProvider):
    """Used when no performance API is configured."""

    @property
    def name(self) -> str:
        return "none"

    def measure(self, url: str) -> Optional[PerformanceMetrics]:
        return None


class NullBacklinkProvider(BacklinkProvider):
    """Placeholder until a backlink index (Ahrefs, Moz, ...) is wired in."""

    @property
    def name(self) -> str:
        return "none"

    def backlinks(self, url: str, limit: int = 50) -> list[Backlink]:
        return []


# ---------------------------------------------------------------------------
# Default factory
# ---------------------------------------------------------------------------

def build_default_providers() -> tuple[PerformanceProvider, BacklinkProvider]:
    """PageSpeed Insights when ``settings.google_api_key`` is set, else nulls."""
    performance: PerformanceProvider
    if settings.google_api_key:
        performance = PageSpeedInsightsProvider(settings.google_api_key)
    else:
        performance = NullPerformanceProvider()
    return performance, NullBacklinkProvider()
